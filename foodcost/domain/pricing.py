"""Selling-price calculation from the ledger's grand total.

The selling price is the only stored pricing value. Food-cost percentage and
pricing factor are projections recomputed from it on every read, so switching
between the two pricing methods cannot drift. The stored price is kept in
whole cents, so feeding a projection back into its setter is a fixed point.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from foodcost.domain.ledger import IngredientLedger
from foodcost.domain.numbers import (
    HUNDRED,
    ONE,
    ZERO,
    coerce_yield,
    non_negative,
    quantize_money,
    to_decimal,
)


class PricingMethod(str, Enum):
    COST_PERCENTAGE = "costPercentage"
    FACTOR_PRICING = "factorPricing"

    @property
    def label(self) -> str:
        return "Cost Percentage" if self is PricingMethod.COST_PERCENTAGE else "Factor Pricing"


@dataclass(frozen=True)
class CostSummary:
    """Every derived pricing value at one point in time."""

    grand_total: Decimal
    yield_count: Decimal
    cost_per_serving: Decimal
    selling_price: Decimal
    food_cost_percentage: Decimal
    pricing_factor: Decimal
    method: PricingMethod


def food_cost_percentage(grand_total: Decimal, selling_price: Decimal) -> Decimal:
    if selling_price > 0:
        return grand_total / selling_price * HUNDRED
    return ZERO


def pricing_factor(grand_total: Decimal, selling_price: Decimal) -> Decimal:
    if grand_total > 0 and selling_price > 0:
        return selling_price / grand_total
    return ZERO


class PricingCalculator:
    """Solves the selling price from either pricing control."""

    def __init__(
        self,
        ledger: IngredientLedger,
        selling_price: Any = ZERO,
        yield_count: Any = ONE,
        method: PricingMethod = PricingMethod.COST_PERCENTAGE,
    ) -> None:
        self.ledger = ledger
        self.method = method
        self._selling_price = quantize_money(non_negative(selling_price))
        self._yield_count = coerce_yield(yield_count)

    @property
    def selling_price(self) -> Decimal:
        return self._selling_price

    @property
    def yield_count(self) -> Decimal:
        return self._yield_count

    def set_selling_price(self, value: Any) -> None:
        self._selling_price = quantize_money(non_negative(value))

    def set_yield(self, value: Any) -> None:
        self._yield_count = coerce_yield(value)

    @property
    def grand_total(self) -> Decimal:
        return self.ledger.grand_total()

    @property
    def cost_per_serving(self) -> Decimal:
        return self.grand_total / self._yield_count

    @property
    def resulting_food_cost_percentage(self) -> Decimal:
        return food_cost_percentage(self.grand_total, self._selling_price)

    @property
    def pricing_factor(self) -> Decimal:
        return pricing_factor(self.grand_total, self._selling_price)

    def set_from_target_percentage(self, percentage: Any) -> bool:
        """Price so that the food cost is ``percentage`` of the selling price.

        No-op (returns False) for non-positive targets or an empty total.
        """
        p = to_decimal(percentage)
        total = self.grand_total
        if p > 0 and total > 0:
            self._selling_price = quantize_money(total / (p / HUNDRED))
            return True
        return False

    def set_from_pricing_factor(self, factor: Any) -> bool:
        """Price at ``factor`` times the grand total; no-op when not computable."""
        f = to_decimal(factor)
        total = self.grand_total
        if f > 0 and total > 0:
            self._selling_price = quantize_money(total * f)
            return True
        return False

    def target_value(self) -> Decimal:
        """The control shown for the active method."""
        if self.method is PricingMethod.COST_PERCENTAGE:
            return self.resulting_food_cost_percentage
        return self.pricing_factor

    def summary(self) -> CostSummary:
        total = self.grand_total
        return CostSummary(
            grand_total=total,
            yield_count=self._yield_count,
            cost_per_serving=total / self._yield_count,
            selling_price=self._selling_price,
            food_cost_percentage=food_cost_percentage(total, self._selling_price),
            pricing_factor=pricing_factor(total, self._selling_price),
            method=self.method,
        )
