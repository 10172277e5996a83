"""Cost report building and formatting."""

from foodcost.report.cost_report import (
    DEFAULT_CURRENCY_SYMBOL,
    REPORT_HEADERS,
    CostReport,
    CostReportRow,
    CostReportSummary,
    build_cost_report,
    format_cost_report,
    render_cost_report_csv,
)

__all__ = [
    "DEFAULT_CURRENCY_SYMBOL",
    "REPORT_HEADERS",
    "CostReport",
    "CostReportRow",
    "CostReportSummary",
    "build_cost_report",
    "format_cost_report",
    "render_cost_report_csv",
]
