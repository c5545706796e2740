"""Unit prices derived from catalog cost and expense plus the studio's margins.

Margins and commissions may be stored as ratios (``0.3``) or whole
percentages (``30``); both are normalized to a 0..1 ratio here.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..models.pricing_types import UtilityType
from ..utils.numbers import ZERO, quantize_money, read_field, to_decimal

_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def normalize_ratio(value: Any) -> Decimal:
    """Return a 0..1 ratio; whole percentages such as ``30`` become ``0.30``."""
    ratio = to_decimal(value)
    return ratio / _HUNDRED if ratio > _ONE else ratio


def commission_ratio(value: Any) -> Decimal:
    return normalize_ratio(value)


def derive_unit_price(cost: Any, expense: Any, utility_type: Any, config: Any) -> Decimal:
    """Price a catalog item from its cost and expense.

    ``(cost + expense) / (1 - margin)`` using the service or product margin of
    the pricing configuration.
    """
    base = to_decimal(cost) + to_decimal(expense)
    kind = UtilityType.parse(utility_type, UtilityType.SERVICE)
    margin_key = "product_margin" if kind is UtilityType.PRODUCT else "service_margin"
    margin = normalize_ratio(read_field(config, margin_key))
    if margin <= ZERO or margin >= _ONE:
        return quantize_money(base)
    return quantize_money(base / (_ONE - margin))
