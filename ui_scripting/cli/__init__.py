from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional

from ui_scripting.app.configuration import RuntimeConfig, load_runtime_config
from ui_scripting.app.environment import Paths, build_default_paths
from ui_scripting.app.settings import REPORT_FORMATS, AppSettings
from ui_scripting.automation.exceptions import InvalidArgumentError, ScriptStorageError
from ui_scripting.automation.repository import ScriptRepository
from ui_scripting.automation.result import TestStatus
from ui_scripting.services.test_scripts import AutomationFactory, TestScriptService

logger = logging.getLogger("ui_scripting.cli")

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INVALID = 2
EXIT_RUN_FAILED = 4

LOG_FILE_NAME = "ui_scripting.log"


def main(argv: Optional[List[str]] = None, automation_factory: Optional[AutomationFactory] = None) -> int:
    parser = argparse.ArgumentParser(prog="ui-scripting", description="UI Scripting Toolkit CLI")
    parser.add_argument("--data-root", type=Path, default=None, help="Data directory (defaults to ui_scripting/data)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List saved scripts")

    show_parser = subparsers.add_parser("show", help="Print a script as JSON")
    show_parser.add_argument("name", help="Script name")

    create_parser = subparsers.add_parser("create", help="Create an empty script")
    create_parser.add_argument("name", help="Script name")
    create_parser.add_argument("--description", default="", help="Script description")

    delete_parser = subparsers.add_parser("delete", help="Delete a script")
    delete_parser.add_argument("name", help="Script name")

    run_parser = subparsers.add_parser("run", help="Run a script against the target application")
    run_parser.add_argument("name", help="Script name")
    run_parser.add_argument("--param", action="append", default=[], metavar="KEY=VALUE", help="Variable override")

    results_parser = subparsers.add_parser("results", help="Show recent results of a script")
    results_parser.add_argument("name", help="Script name")
    results_parser.add_argument("--max", type=int, default=None, dest="max_results", help="Maximum results to show")

    export_parser = subparsers.add_parser("export", help="Export the latest result of a script")
    export_parser.add_argument("name", help="Script name")
    export_parser.add_argument("--format", choices=REPORT_FORMATS, default=None, dest="fmt")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s - %(message)s")

    runtime_cfg = load_runtime_config()
    logger.debug("Loaded runtime config overrides: %s", runtime_cfg)

    paths = build_default_paths(args.data_root)
    file_handler = _attach_log_file(paths.logs_dir / LOG_FILE_NAME)
    try:
        service = _build_service(paths, runtime_cfg, automation_factory)
        if args.command == "list":
            return _handle_list(service)
        if args.command == "show":
            return _handle_show(service, args.name)
        if args.command == "create":
            return _handle_create(service, args.name, args.description)
        if args.command == "delete":
            return _handle_delete(service, args.name)
        if args.command == "run":
            return _handle_run(service, args.name, args.param)
        if args.command == "results":
            return _handle_results(service, args.name, args.max_results)
        if args.command == "export":
            return _handle_export(service, args.name, args.fmt)
    except InvalidArgumentError as exc:
        logger.error("%s", exc)
        return EXIT_INVALID
    except ScriptStorageError as exc:
        logger.error("Storage failure: %s", exc)
        return EXIT_INVALID
    finally:
        if file_handler is not None:
            logging.getLogger().removeHandler(file_handler)
            file_handler.close()
    parser.print_help()
    return EXIT_INVALID


def _build_service(
    paths: Paths,
    runtime_cfg: RuntimeConfig,
    automation_factory: Optional[AutomationFactory],
) -> TestScriptService:
    settings = _load_settings(paths, runtime_cfg)
    repo_root = Path(settings.scripts_root).expanduser() if settings.scripts_root else paths.data_root
    factory = automation_factory or (lambda: _default_automation(settings))
    return TestScriptService(ScriptRepository(repo_root), factory, settings=settings)


def _attach_log_file(log_file: Path) -> Optional[RotatingFileHandler]:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and getattr(handler, "baseFilename", None) == os.path.abspath(log_file):
            return None
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_048_576, backupCount=3, encoding="utf-8")
    except OSError:
        logger.exception("Failed to initialize file logging")
        return None
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
    root_logger.addHandler(file_handler)
    return file_handler


def _default_automation(settings: AppSettings):
    from ui_scripting.automation.driver import DEFAULT_WINDOW_SPEC, PywinautoAutomation, WindowSpec

    spec = WindowSpec(title_regex=settings.target_app_regex) if settings.target_app_regex else DEFAULT_WINDOW_SPEC
    return PywinautoAutomation(spec, find_timeout=settings.find_timeout, poll_interval=settings.poll_interval)


def _handle_list(service: TestScriptService) -> int:
    summaries = service.script_summaries()
    if not summaries:
        print("No scripts found.", file=sys.stderr)
        return EXIT_OK
    for summary in summaries:
        tags = ",".join(summary["tags"])
        print(f"{summary['name']}\tsteps={summary['stepCount']}\tmodified={summary['modified']}\ttags={tags}")
    return EXIT_OK


def _handle_show(service: TestScriptService, name: str) -> int:
    script = service.load_script(name)
    if script is None:
        logger.error("Script '%s' not found", name)
        return EXIT_NOT_FOUND
    print(json.dumps(script.to_dict(), indent=2))
    return EXIT_OK


def _handle_create(service: TestScriptService, name: str, description: str) -> int:
    script = service.create_script(name, description)
    logger.info("Created script '%s'", script.name)
    return EXIT_OK


def _handle_delete(service: TestScriptService, name: str) -> int:
    if not service.delete_script(name):
        logger.error("Script '%s' not found", name)
        return EXIT_NOT_FOUND
    return EXIT_OK


def _handle_run(service: TestScriptService, name: str, raw_params: List[str]) -> int:
    parameters = _parse_params(raw_params)
    if service.load_script(name) is None:
        logger.error("Script '%s' not found", name)
        return EXIT_NOT_FOUND
    result = service.run_script(name, parameters)
    print(json.dumps(result.summary(), indent=2))
    return EXIT_OK if result.status is TestStatus.PASSED else EXIT_RUN_FAILED


def _handle_results(service: TestScriptService, name: str, max_results: Optional[int]) -> int:
    results = service.get_results(name, max_results)
    if not results:
        print(f"No results for '{name}'.", file=sys.stderr)
        return EXIT_NOT_FOUND
    for result in results:
        print(json.dumps(result.summary()))
    return EXIT_OK


def _handle_export(service: TestScriptService, name: str, fmt: Optional[str]) -> int:
    path = service.export_result_to_report(name, fmt)
    if path is None:
        logger.error("No results to export for '%s'", name)
        return EXIT_NOT_FOUND
    print(path)
    return EXIT_OK


def _parse_params(raw_params: List[str]) -> Dict[str, str]:
    parameters: Dict[str, str] = {}
    for raw in raw_params:
        key, sep, value = raw.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidArgumentError(f"Parameters must look like KEY=VALUE, got '{raw}'")
        parameters[key] = value
    return parameters


def _load_settings(paths: Paths, runtime_cfg: RuntimeConfig) -> AppSettings:
    settings = AppSettings.load(paths.settings_file)
    runtime_cfg.apply_to_settings(settings)
    return settings


if __name__ == "__main__":
    sys.exit(main())
