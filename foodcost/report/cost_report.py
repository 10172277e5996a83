"""Tabular cost report: one row per ingredient plus a pricing summary."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from decimal import Decimal

from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.numbers import HUNDRED, format_plain
from foodcost.domain.pricing import PricingCalculator, PricingMethod

DEFAULT_CURRENCY_SYMBOL = "₱"

REPORT_HEADERS = (
    "QTY",
    "UNIT",
    "INGREDIENT",
    "PURCHASE PRICE",
    "UNIT CONVERSION",
    "UNIT COST",
    "EXTENSION COST",
)


@dataclass(frozen=True)
class CostReportRow:
    quantity: Decimal
    unit: str
    name: str
    purchase_price: Decimal
    purchase_unit: str
    conversion_factor: Decimal
    unit_cost: Decimal
    extension_cost: Decimal


@dataclass(frozen=True)
class CostReportSummary:
    grand_total: Decimal
    yield_count: Decimal
    cost_per_serving: Decimal
    method: PricingMethod
    target_value: Decimal  # percentage fraction or pricing factor, depending on method
    selling_price: Decimal
    final_food_cost: Decimal  # fraction, 0.4 == 40%


@dataclass(frozen=True)
class CostReport:
    rows: list[CostReportRow]
    summary: CostReportSummary


def build_cost_report(ledger: IngredientLedger, calculator: PricingCalculator) -> CostReport:
    """Snapshot the ledger and pricing into report rows; unnamed lines are skipped."""
    rows = [
        CostReportRow(
            quantity=line.quantity,
            unit=line.unit,
            name=line.name,
            purchase_price=line.purchase_price,
            purchase_unit=line.purchase_unit,
            conversion_factor=line.conversion_factor,
            unit_cost=line.unit_cost,
            extension_cost=line.extension_cost,
        )
        for line in ledger.lines
        if line.name
    ]

    s = calculator.summary()
    final_fraction = s.food_cost_percentage / HUNDRED
    if s.method is PricingMethod.COST_PERCENTAGE:
        target = final_fraction
    else:
        target = s.pricing_factor

    return CostReport(
        rows=rows,
        summary=CostReportSummary(
            grand_total=s.grand_total,
            yield_count=s.yield_count,
            cost_per_serving=s.cost_per_serving,
            method=s.method,
            target_value=target,
            selling_price=s.selling_price,
            final_food_cost=final_fraction,
        ),
    )


def _money(value: Decimal, symbol: str, places: int = 2) -> str:
    return f"{symbol}{value:,.{places}f}"


def _percent(fraction: Decimal) -> str:
    return f"{fraction * HUNDRED:.2f}%"


def _price_label(row: CostReportRow, symbol: str) -> str:
    return f"{symbol}{row.purchase_price:.2f} / {row.purchase_unit}"


def _row_cells(row: CostReportRow, symbol: str) -> list[str]:
    return [
        f"{row.quantity:,.2f}",
        row.unit,
        row.name,
        _price_label(row, symbol),
        format_plain(row.conversion_factor),
        _money(row.unit_cost, symbol, places=4),
        _money(row.extension_cost, symbol),
    ]


def _summary_pairs(summary: CostReportSummary, symbol: str) -> list[tuple[str, str]]:
    pairs = [
        ("Grand Total:", _money(summary.grand_total, symbol)),
        ("Yield (Servings):", format_plain(summary.yield_count)),
        ("Cost per Serving:", _money(summary.cost_per_serving, symbol)),
        ("Pricing Method:", summary.method.label),
    ]
    if summary.method is PricingMethod.COST_PERCENTAGE:
        pairs.append(("Target Food Cost %:", _percent(summary.target_value)))
    else:
        pairs.append(("Pricing Factor:", f"{summary.target_value:.2f}"))
    pairs.append(("Recipe Selling Price:", _money(summary.selling_price, symbol)))
    pairs.append(("Final Food Cost %:", _percent(summary.final_food_cost)))
    return pairs


def format_cost_report(report: CostReport, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Render the report as an aligned plain-text table."""
    table = [list(REPORT_HEADERS)] + [_row_cells(row, currency_symbol) for row in report.rows]
    widths = [max(len(r[i]) for r in table) for i in range(len(REPORT_HEADERS))]

    lines = []
    for i, cells in enumerate(table):
        # Text columns (unit, name, price label) left-aligned, numbers right-aligned
        padded = [
            cell.ljust(widths[col]) if col in (1, 2, 3) else cell.rjust(widths[col])
            for col, cell in enumerate(cells)
        ]
        lines.append("  ".join(padded).rstrip())
        if i == 0:
            lines.append("  ".join("-" * w for w in widths))

    pairs = _summary_pairs(report.summary, currency_symbol)
    label_width = max(len(label) for label, _ in pairs)
    value_width = max(len(value) for _, value in pairs)
    lines.append("")
    for label, value in pairs:
        lines.append(f"{label.rjust(label_width)}  {value.rjust(value_width)}")
    return "\n".join(lines) + "\n"


def render_cost_report_csv(report: CostReport, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """CSV in the spreadsheet layout: ingredient rows, a blank row, then the summary."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    for row in report.rows:
        writer.writerow(_row_cells(row, currency_symbol))
    writer.writerow([])
    for label, value in _summary_pairs(report.summary, currency_symbol):
        writer.writerow(["", "", "", "", "", label, value])
    return buffer.getvalue()
