"""Write cost reports to disk."""

from pathlib import Path

from foodcost.report.cost_report import DEFAULT_CURRENCY_SYMBOL, CostReport, render_cost_report_csv
from foodcost.runtime.logging import get_logger

logger = get_logger(__name__)


def write_cost_report_csv(
    report: CostReport,
    path: Path,
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> Path:
    """Write ``report`` as CSV (UTF-8 with BOM so spreadsheet apps keep the currency sign)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_cost_report_csv(report, currency_symbol), encoding="utf-8-sig")
    logger.info("Wrote cost report to %s", path)
    return path
