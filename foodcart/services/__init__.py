"""Services layer."""
from .money import round_money, to_decimal, to_float

__all__ = ["round_money", "to_decimal", "to_float"]
