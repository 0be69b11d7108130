import logging
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..result import StepStatus, TestResult

logger = logging.getLogger(__name__)

SUMMARY_FILE = "results_summary.xlsx"

_HEADERS = ["Script", "Step", "Command", "Type", "Status", "Duration (ms)", "Actual", "Error", "Timestamp"]
_WIDTHS = [28, 8, 22, 12, 16, 14, 36, 48, 20]
_PASS_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
_FAIL_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")


def _sheet_title(script_name: str) -> str:
    # Excel forbids []:*?/\ in sheet titles and caps them at 31 chars.
    cleaned = "".join("_" if ch in '[]:*?/\\' else ch for ch in script_name).strip("'")
    return (cleaned or "General")[:31]


def _initialize_sheet(ws) -> None:
    ws.append(_HEADERS)
    bold = Font(bold=True)
    for col_idx in range(1, len(_HEADERS) + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = bold
        cell.alignment = Alignment(horizontal="center")
    ws.freeze_panes = "A2"
    for idx, width in enumerate(_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def write_results_workbook(result: TestResult, directory: Path) -> Path:
    """
    Write ``result`` into ``results_summary.xlsx`` under ``directory``.

    Each script owns one sheet; rows from its previous export are replaced so
    the sheet always reflects the latest exported run.
    """
    directory.mkdir(parents=True, exist_ok=True)
    out_path = directory / SUMMARY_FILE
    title = _sheet_title(result.script_name)

    if out_path.exists():
        wb = load_workbook(out_path)
        if title in wb.sheetnames:
            del wb[title]
        ws = wb.create_sheet(title=title)
    else:
        wb = Workbook()
        ws = wb.active
        ws.title = title
    _initialize_sheet(ws)

    timestamp = result.start_time.strftime("%Y-%m-%d %H:%M:%S")
    for step_result in result.step_results:
        ws.append(
            [
                result.script_name,
                step_result.step_index + 1,
                step_result.step.command,
                step_result.step.type,
                step_result.status.value,
                round(step_result.duration_ms, 3),
                step_result.actual_value or "",
                step_result.error_message or "",
                timestamp,
            ]
        )
        last_row = ws.max_row
        ws.cell(row=last_row, column=6).number_format = "0.000"
        status_cell = ws.cell(row=last_row, column=5)
        status_cell.alignment = Alignment(horizontal="center")
        if step_result.status is StepStatus.PASSED:
            status_cell.fill = _PASS_FILL
        elif step_result.status is StepStatus.FAILED:
            status_cell.fill = _FAIL_FILL

    ws.append([])
    ws.append(["Overall", None, None, None, result.status.value, round(result.duration_ms, 3)])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    wb.save(out_path)
    logger.info("Excel results saved: %s", out_path)
    return out_path
