"""Report writers for run results."""

from .allure_helpers import attach_file
from .excel import write_results_workbook
from .html import write_html_report

__all__ = ["attach_file", "write_html_report", "write_results_workbook"]
