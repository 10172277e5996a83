"""Tests for purchase-unit to recipe-unit conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from foodcost.domain.units import (
    describe_conversion,
    is_piece_unit,
    normalize_recipe_unit,
    resolve_conversion_factor,
    unit_family,
)


@pytest.mark.parametrize(
    ("purchase_unit", "recipe_unit", "expected"),
    [
        ("kg", "g", Decimal("1000")),
        ("g", "kg", Decimal("0.001")),
        ("liter", "ml", Decimal("1000")),
        ("ml", "liter", Decimal("0.001")),
        ("pc", "pcs", Decimal("1")),
        ("piece", "pc", Decimal("1")),
        ("kg", "ml", Decimal("1")),
        ("cup", "g", Decimal("1")),
        ("", "g", Decimal("1")),
    ],
)
def test_resolve_conversion_factor(purchase_unit: str, recipe_unit: str, expected: Decimal) -> None:
    assert resolve_conversion_factor(purchase_unit, recipe_unit) == expected


@pytest.mark.parametrize(("a", "b"), [("kg", "g"), ("g", "kg"), ("liter", "ml"), ("ml", "liter")])
def test_same_family_factors_are_reciprocal(a: str, b: str) -> None:
    assert resolve_conversion_factor(a, b) * resolve_conversion_factor(b, a) == 1


@pytest.mark.parametrize("unit", ["kg", "g", "liter", "ml", "pc", "pcs", "piece", "pieces"])
def test_identity_pair_is_one(unit: str) -> None:
    assert resolve_conversion_factor(unit, unit) == 1


def test_units_are_case_and_whitespace_insensitive() -> None:
    assert resolve_conversion_factor(" KG ", "G") == Decimal("1000")
    assert unit_family("Liter") == "volume"


def test_describe_conversion_marks_unknown_pairs_unresolved() -> None:
    assert describe_conversion("kg", "g").resolved is True
    assert describe_conversion("pc", "pieces").resolved is True

    cross = describe_conversion("kg", "ml")
    assert cross.resolved is False
    assert cross.factor == 1

    assert describe_conversion("tbsp", "tbsp").resolved is False


def test_piece_helpers() -> None:
    assert is_piece_unit("PCS")
    assert not is_piece_unit("kg")
    assert unit_family("oz") is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, "pc"),
        ("", "pc"),
        ("  ", "pc"),
        ("Pieces", "pc"),
        ("piece", "pc"),
        ("pcs.", "pc"),
        ("G", "g"),
        ("cups", "cups"),
    ],
)
def test_normalize_recipe_unit(raw: str | None, expected: str) -> None:
    assert normalize_recipe_unit(raw) == expected
