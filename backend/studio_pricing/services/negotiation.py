"""Negotiated price simulation and margin checks for quotes.

Used while a studio negotiates a cotización: it prices the quote with a custom
total, an extra discount, courtesy (free) items and a commercial condition,
and reports how much profit is left after costs, expenses and sales
commission.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Collection, Iterable, List, Optional

from ..models.pricing_types import HealthStatus, MarginLevel
from ..utils.numbers import ZERO, parse_decimal, quantize_money, read_field, to_decimal
from .billing_quantity import effective_quantity
from .cost_pricing import commission_ratio

_HUNDRED = Decimal("100")

ACCEPTABLE_MARGIN_PCT = Decimal("20")
LOW_MARGIN_PCT = Decimal("10")
WARNING_MARGIN_PCT = Decimal("15")
RESCUE_TARGET_RATIO = Decimal("0.20")


@dataclass
class NegotiatedItem:
    id: Any
    original_price: Decimal
    negotiated_price: Decimal
    is_courtesy: bool


@dataclass
class NegotiationResult:
    final_price: Decimal
    base_price: Decimal
    total_discount: Decimal
    cost_total: Decimal
    expense_total: Decimal
    commission_amount: Decimal
    commission_ratio: Decimal
    net_profit: Decimal
    margin_pct: Decimal
    profit_impact: Decimal
    items: List[NegotiatedItem] = field(default_factory=list)


@dataclass
class MarginValidation:
    is_valid: bool
    level: MarginLevel
    message: str


@dataclass
class FinancialHealth:
    status: HealthStatus
    margin_pct: Decimal
    rescue_price: Decimal
    shortfall: Decimal
    message: str


@dataclass
class CourtesyImpact:
    courtesy_total: Decimal
    profit_impact: Decimal


def _pct(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.1'))}%"


def _item_price(item: Any) -> Decimal:
    return to_decimal(read_field(item, "unit_price")) * to_decimal(read_field(item, "quantity"))


def calculate_negotiated_price(
    items: Iterable[Any],
    *,
    event_duration_hours: Any = None,
    custom_price: Any = None,
    extra_discount: Any = None,
    condition: Any = None,
    courtesy_item_ids: Collection[Any] = (),
    pricing_config: Any = None,
    original_price: Any = None,
) -> Optional[NegotiationResult]:
    """Price a quote under negotiation.

    Returns None when the negotiated price would fall below cost plus expense.
    Costs and expenses use effective quantities (hourly items scale with the
    event duration); the item price base uses the plain quantity.
    """
    items = list(items or ())
    courtesy = set(courtesy_item_ids or ())

    items_base = ZERO
    items_full = ZERO
    cost_total = ZERO
    expense_total = ZERO
    for item in items:
        qty = effective_quantity(read_field(item, "billing_type"), read_field(item, "quantity"), event_duration_hours)
        cost_total += to_decimal(read_field(item, "cost")) * qty
        expense_total += to_decimal(read_field(item, "expense")) * qty
        items_full += _item_price(item)
        if read_field(item, "id") not in courtesy:
            items_base += _item_price(item)

    custom = parse_decimal(custom_price)
    base_price = custom if custom is not None else items_base

    condition_pct = to_decimal(read_field(condition, "discount_percentage"))
    condition_discount = base_price * condition_pct / _HUNDRED if condition_pct else ZERO
    total_discount = condition_discount + to_decimal(extra_discount)
    final_price = max(ZERO, base_price - total_discount)

    if final_price < cost_total + expense_total:
        return None

    ratio = commission_ratio(read_field(pricing_config, "sales_commission"))
    commission = final_price * ratio
    net_profit = final_price - cost_total - expense_total - commission
    margin = net_profit / final_price * _HUNDRED if final_price > ZERO else ZERO

    reference = parse_decimal(original_price)
    if reference is None:
        reference = items_full
    reference_profit = reference - cost_total - expense_total - reference * ratio

    return NegotiationResult(
        final_price=quantize_money(final_price),
        base_price=quantize_money(base_price),
        total_discount=quantize_money(total_discount),
        cost_total=quantize_money(cost_total),
        expense_total=quantize_money(expense_total),
        commission_amount=quantize_money(commission),
        commission_ratio=ratio,
        net_profit=quantize_money(net_profit),
        margin_pct=quantize_money(margin),
        profit_impact=quantize_money(net_profit - reference_profit),
        items=[
            NegotiatedItem(
                id=read_field(item, "id"),
                original_price=_item_price(item),
                negotiated_price=ZERO if read_field(item, "id") in courtesy else _item_price(item),
                is_courtesy=read_field(item, "id") in courtesy,
            )
            for item in items
        ],
    )


def validate_negotiated_margin(
    margin_pct: Any,
    final_price: Any,
    cost_total: Any,
    expense_total: Any,
) -> MarginValidation:
    margin = to_decimal(margin_pct)
    floor = to_decimal(cost_total) + to_decimal(expense_total)

    if to_decimal(final_price) < floor:
        return MarginValidation(False, MarginLevel.CRITICAL, f"Price cannot be lower than {quantize_money(floor)} (cost + expense)")
    # Low margins are allowed but flagged
    if margin < LOW_MARGIN_PCT:
        return MarginValidation(
            True,
            MarginLevel.CRITICAL,
            f"Critical margin: {_pct(margin)}. A minimum margin of {LOW_MARGIN_PCT}% is recommended.",
        )
    if margin < ACCEPTABLE_MARGIN_PCT:
        return MarginValidation(
            True,
            MarginLevel.LOW,
            f"Low margin: {_pct(margin)}. A minimum margin of {ACCEPTABLE_MARGIN_PCT}% is recommended.",
        )
    return MarginValidation(True, MarginLevel.ACCEPTABLE, f"Acceptable margin: {_pct(margin)}")


def calculate_financial_health(
    costs: Any,
    expenses: Any,
    negotiated_price: Any,
    commission: Any = None,
) -> FinancialHealth:
    """Classify a negotiated price by its margin after commission.

    ``commission`` is a 0..1 ratio. The rescue price is the lowest price that
    keeps a 20% margin after commission.
    """
    total_costs = to_decimal(costs) + to_decimal(expenses)
    price = to_decimal(negotiated_price)
    ratio = to_decimal(commission)

    net = price - total_costs - price * ratio
    margin = net / price * _HUNDRED if price > ZERO else ZERO

    denominator = Decimal("1") - RESCUE_TARGET_RATIO - ratio
    rescue = total_costs / denominator if denominator > ZERO else price
    rescue = quantize_money(rescue)
    shortfall = rescue - price

    if margin >= ACCEPTABLE_MARGIN_PCT:
        status, message = HealthStatus.HEALTHY, "Solid margin for the operation."
    elif margin >= WARNING_MARGIN_PCT:
        status = HealthStatus.WARNING
        message = (
            f"Low margin: {_pct(margin)}. {quantize_money(shortfall)} short of a 20% margin; "
            f"consider adjusting to {rescue}."
        )
    elif margin >= LOW_MARGIN_PCT:
        status, message = HealthStatus.CRITICAL, f"Profitability compromised. Recommended minimum price: {rescue}."
    else:
        status, message = HealthStatus.DANGER, "Operational risk: price is below the safety limit."

    return FinancialHealth(
        status=status,
        margin_pct=quantize_money(margin),
        rescue_price=rescue,
        shortfall=quantize_money(shortfall),
        message=message,
    )


def calculate_courtesy_impact(items: Iterable[Any], courtesy_item_ids: Collection[Any]) -> CourtesyImpact:
    """Price given away through courtesy items and the resulting profit loss."""
    courtesy = set(courtesy_item_ids or ())
    courtesy_total = ZERO
    impact = ZERO
    for item in items or ():
        if read_field(item, "id") not in courtesy:
            continue
        qty = to_decimal(read_field(item, "quantity"))
        price = _item_price(item)
        courtesy_total += price
        impact -= price - to_decimal(read_field(item, "cost")) * qty - to_decimal(read_field(item, "expense")) * qty
    return CourtesyImpact(courtesy_total=quantize_money(courtesy_total), profit_impact=quantize_money(impact))
