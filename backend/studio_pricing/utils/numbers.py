from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Mapping, Optional

from ..models.pricing_types import CoercionPolicy
from .errors import error_response

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Return ``value`` as a finite Decimal, or None when missing or malformed."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    parsed = parse_decimal(value)
    return default if parsed is None else parsed


def coerce_optional_decimal(
    value: Any,
    *,
    field: str,
    policy: CoercionPolicy = CoercionPolicy.ZERO,
) -> Optional[Decimal]:
    """Coerce a nullable input.

    ``None`` stays ``None``. A malformed value becomes ``0`` under the zero
    policy and raises :class:`PricingInputError` under the strict policy.
    """
    if value is None:
        return None
    parsed = parse_decimal(value)
    if parsed is not None:
        return parsed
    if policy is CoercionPolicy.STRICT:
        raise error_response("Invalid numeric input", {field: f"not a finite number: {value!r}"})
    return ZERO


def coerce_decimal(
    value: Any,
    *,
    field: str,
    policy: CoercionPolicy = CoercionPolicy.ZERO,
) -> Decimal:
    parsed = coerce_optional_decimal(value, field=field, policy=policy)
    return ZERO if parsed is None else parsed


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """Return ``percentage`` percent of ``amount`` in cents."""
    return quantize_money(amount * percentage / HUNDRED)


def is_positive(value: Optional[Decimal]) -> bool:
    return value is not None and value > ZERO


def read_field(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def read_first(source: Any, keys: tuple[str, ...]) -> Any:
    """Return the first non-None value among ``keys``."""
    for key in keys:
        value = read_field(source, key)
        if value is not None:
            return value
    return None
