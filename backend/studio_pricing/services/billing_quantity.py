"""Effective quantities for catalog items billed per hour.

``HOUR`` items scale with the event duration; ``SERVICE`` and ``UNIT`` items
are charged as-is. When no positive duration is known the quantity is used
unchanged, which is how quotes created before durations existed are priced.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..models.pricing_types import BillingType
from ..utils.numbers import ZERO, quantize_money, to_decimal


def effective_quantity(billing_type: Any, quantity: Any, duration_hours: Any = None) -> Decimal:
    qty = to_decimal(quantity)
    hours = to_decimal(duration_hours)
    if BillingType.parse(billing_type, BillingType.SERVICE) is BillingType.HOUR and hours > ZERO:
        return qty * hours
    return qty


def line_subtotal(
    unit_price: Any,
    billing_type: Any,
    quantity: Any,
    duration_hours: Any = None,
) -> Decimal:
    return quantize_money(to_decimal(unit_price) * effective_quantity(billing_type, quantity, duration_hours))
