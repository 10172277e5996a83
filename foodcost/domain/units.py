"""Purchase-unit to recipe-unit conversion.

Only two closed families convert automatically, plus an opaque piece family:

    mass    kg, g        (base: gram)
    volume  liter, ml    (base: millilitre)
    piece   pc, pcs, piece, pieces   (all 1:1)

Anything else (cups, cross-family pairs, unknown units) resolves to 1 and the
user is expected to enter a manual conversion factor.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

UnitFamily = Literal["mass", "volume", "piece"]

PIECE_UNITS = frozenset({"pc", "pcs", "piece", "pieces"})
MASS_UNITS = frozenset({"kg", "g"})
VOLUME_UNITS = frozenset({"liter", "ml"})

# Unit -> amount of the family's base unit
BASE_UNITS: dict[str, Decimal] = {
    "kg": Decimal("1000"),
    "g": Decimal("1"),
    "liter": Decimal("1000"),
    "ml": Decimal("1"),
}

# Spellings the extraction service tends to return for a single piece
PIECE_SYNONYMS = frozenset({"piece", "pieces", "pcs."})

DEFAULT_RECIPE_UNIT = "pc"

_IDENTITY = Decimal("1")


@dataclass(frozen=True)
class ConversionResult:
    """Factor plus whether it came from a known unit pair."""

    factor: Decimal
    resolved: bool


def _norm(unit: str | None) -> str:
    """Lookup key: trimmed and lower-cased."""
    return (unit or "").strip().lower()


def unit_family(unit: str | None) -> UnitFamily | None:
    u = _norm(unit)
    if u in PIECE_UNITS:
        return "piece"
    if u in MASS_UNITS:
        return "mass"
    if u in VOLUME_UNITS:
        return "volume"
    return None


def is_piece_unit(unit: str | None) -> bool:
    return _norm(unit) in PIECE_UNITS


def normalize_recipe_unit(unit: str | None) -> str:
    """Lower-case a recipe unit, default it to ``pc`` and fold piece synonyms."""
    u = _norm(unit)
    if not u:
        return DEFAULT_RECIPE_UNIT
    if u in PIECE_SYNONYMS:
        return DEFAULT_RECIPE_UNIT
    return u


def describe_conversion(purchase_unit: str | None, recipe_unit: str | None) -> ConversionResult:
    """Resolve a conversion factor and report whether the pair was understood."""
    p_family = unit_family(purchase_unit)
    r_family = unit_family(recipe_unit)

    if p_family is None or p_family != r_family:
        return ConversionResult(factor=_IDENTITY, resolved=False)
    if p_family == "piece":
        return ConversionResult(factor=_IDENTITY, resolved=True)

    factor = BASE_UNITS[_norm(purchase_unit)] / BASE_UNITS[_norm(recipe_unit)]
    return ConversionResult(factor=factor, resolved=True)


def resolve_conversion_factor(purchase_unit: str | None, recipe_unit: str | None) -> Decimal:
    """Number of recipe units in one purchase unit.

    Total and never raises: unknown or incompatible pairs give 1.

    >>> resolve_conversion_factor("kg", "g")
    Decimal('1000')
    """
    return describe_conversion(purchase_unit, recipe_unit).factor
