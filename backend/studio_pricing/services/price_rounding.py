"""Deterministic price rounding policies.

``charm`` moves a price to the closest psychological ending (…9, …99, …199,
…999), ``hundred`` and ``thousand`` always round up to the next block and
``auto`` picks one of those depending on the size of the amount.

The two charm branches do not share a rule: below 1000 a price is never
charmed downward, from 1000 upward the nearest ending wins even when it is
lower than the input. Both behaviours are relied upon by published quotes.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR
from typing import Any, Iterable, List

from ..models.pricing_types import RoundingStrategy
from ..utils.numbers import ZERO, quantize_money, to_decimal

_TEN = Decimal("10")
_HUNDRED = Decimal("100")
_THOUSAND = Decimal("1000")

SMALL_CHARM_OFFSETS = tuple(Decimal(n) for n in (9, 19, 29, 39, 69, 99))
LARGE_CHARM_OFFSETS = tuple(Decimal(n) for n in (199, 299, 399, 699, 999))

AUTO_HUNDRED_FROM = Decimal("50000")
AUTO_THOUSAND_FROM = Decimal("100000")


def _ceil_to(value: Decimal, step: Decimal) -> Decimal:
    return (value / step).to_integral_value(rounding=ROUND_CEILING) * step


def _floor_to(value: Decimal, step: Decimal) -> Decimal:
    return (value / step).to_integral_value(rounding=ROUND_FLOOR) * step


def _nearest(value: Decimal, candidates: Iterable[Decimal]) -> Decimal:
    # min() keeps the first candidate on ties, so ordering matters
    return min(candidates, key=lambda c: abs(value - c))


def round_to_hundred(value: Any) -> Decimal:
    return quantize_money(_ceil_to(to_decimal(value), _HUNDRED))


def round_to_thousand(value: Any) -> Decimal:
    return quantize_money(_ceil_to(to_decimal(value), _THOUSAND))


def _charm_small(value: Decimal) -> Decimal:
    base = _floor_to(value, _TEN)
    current = [base + o for o in SMALL_CHARM_OFFSETS]
    following = [base + _TEN + o for o in SMALL_CHARM_OFFSETS]
    chosen = _nearest(value, current + following)
    if chosen < value:
        chosen = min(c for c in following if c >= value)
    return chosen


def _charm_large(value: Decimal) -> Decimal:
    base = _floor_to(value, _HUNDRED)
    candidates: List[Decimal] = []
    for block in (base - _HUNDRED, base, base + _HUNDRED):
        if block < ZERO:
            continue
        candidates.extend(block + o for o in LARGE_CHARM_OFFSETS)
    return _nearest(value, candidates)


def round_to_charm_ending(value: Any) -> Decimal:
    amount = to_decimal(value)
    if amount <= ZERO:
        return amount
    if amount < _THOUSAND:
        return quantize_money(_charm_small(amount))
    return quantize_money(_charm_large(amount))


def round_auto(value: Any) -> Decimal:
    amount = to_decimal(value)
    if amount < AUTO_HUNDRED_FROM:
        return round_to_charm_ending(amount)
    if amount < AUTO_THOUSAND_FROM:
        return round_to_hundred(amount)
    return round_to_thousand(amount)


_POLICIES = {
    RoundingStrategy.CHARM: round_to_charm_ending,
    RoundingStrategy.HUNDRED: round_to_hundred,
    RoundingStrategy.THOUSAND: round_to_thousand,
    RoundingStrategy.AUTO: round_auto,
}


def round_price(value: Any, strategy: Any = RoundingStrategy.CHARM) -> Decimal:
    """Round ``value`` with the named strategy; non-positive amounts pass through."""
    amount = to_decimal(value)
    if amount <= ZERO:
        return amount
    policy = RoundingStrategy.parse(strategy)
    if policy is None:
        raise ValueError(f"Unknown rounding strategy: {strategy!r}")
    return _POLICIES[policy](amount)
