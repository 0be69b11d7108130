"""Standalone HTML report for a single run."""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import List

from ..result import StepStatus, TestResult
from ..util import file_stamp, sanitize_name

logger = logging.getLogger(__name__)

_STYLE = """
        body { font-family: Arial, sans-serif; margin: 20px; }
        .header { background: #f0f0f0; padding: 20px; border-radius: 5px; }
        .passed { color: green; font-weight: bold; }
        .failed { color: red; font-weight: bold; }
        .partiallypassed { color: darkorange; font-weight: bold; }
        .step { margin: 10px 0; padding: 10px; border: 1px solid #ddd; }
        .step-passed { border-left: 4px solid green; }
        .step-failed { border-left: 4px solid red; }
        .step-skipped { border-left: 4px solid gray; }
        table { width: 100%; border-collapse: collapse; margin: 20px 0; }
        th, td { padding: 10px; text-align: left; border-bottom: 1px solid #ddd; }
        th { background: #f0f0f0; }
"""


def _fmt_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


def render_html_report(result: TestResult) -> str:
    name = escape(result.script_name)
    status = result.status.value
    lines: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '    <meta charset="utf-8">',
        f"    <title>Test Result: {name}</title>",
        f"    <style>{_STYLE}    </style>",
        "</head>",
        "<body>",
        "    <div class='header'>",
        f"        <h1>Test Result: {name}</h1>",
        f"        <p><strong>Status:</strong> <span class='{status.lower()}'>{status}</span></p>",
        f"        <p><strong>Duration:</strong> {result.duration_ms:.2f} ms</p>",
        f"        <p><strong>Start Time:</strong> {_fmt_time(result.start_time)}</p>",
        f"        <p><strong>End Time:</strong> {_fmt_time(result.end_time)}</p>",
    ]
    if result.error_message:
        lines.append(f"        <p><strong>Error:</strong> {escape(result.error_message)}</p>")
    lines += [
        "    </div>",
        "    <h2>Summary</h2>",
        "    <table>",
        "        <tr><th>Total Steps</th><th>Passed</th><th>Failed</th><th>Skipped</th></tr>",
        "        <tr>"
        f"<td>{result.total_steps}</td>"
        f"<td class='passed'>{result.passed_steps}</td>"
        f"<td class='failed'>{result.failed_steps}</td>"
        f"<td>{result.skipped_steps}</td>"
        "</tr>",
        "    </table>",
        "    <h2>Steps</h2>",
    ]
    for step in result.step_results:
        step_status = step.status.value
        if step.status is StepStatus.PASSED:
            css = "step-passed"
        elif step.status is StepStatus.SKIPPED:
            css = "step-skipped"
        else:
            css = "step-failed"
        lines.append(f"    <div class='step {css}'>")
        lines.append(
            f"        <strong>Step {step.step_index + 1}:</strong> {escape(step.step.command)} - "
            f"<span class='{step_status.lower()}'>{step_status}</span><br>"
        )
        if step.step.description:
            lines.append(f"        <em>{escape(step.step.description)}</em><br>")
        lines.append(f"        <strong>Duration:</strong> {step.duration_ms:.2f} ms<br>")
        if step.error_message:
            lines.append(f"        <strong>Error:</strong> {escape(step.error_message)}<br>")
        if step.actual_value:
            lines.append(f"        <strong>Actual Value:</strong> {escape(step.actual_value)}<br>")
        lines.append("    </div>")
    if result.screenshots:
        lines.append("    <h2>Screenshots</h2>")
        lines.append("    <ul>")
        for shot in result.screenshots:
            lines.append(f"        <li>{escape(shot)}</li>")
        lines.append("    </ul>")
    lines += ["</body>", "</html>", ""]
    return "\n".join(lines)


def write_html_report(result: TestResult, directory: Path) -> Path:
    """Write ``<key>_<start stamp>.html`` into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    out = directory / f"{sanitize_name(result.script_name)}_{file_stamp(result.start_time, precise=False)}.html"
    out.write_text(render_html_report(result), encoding="utf-8")
    logger.info("HTML report saved: %s", out)
    return out
