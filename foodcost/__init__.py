"""Recipe food-cost estimation: unit conversion, price reconciliation and pricing."""

__version__ = "0.1.0"
