from decimal import Decimal

from studio_pricing.models import HealthStatus, MarginLevel
from studio_pricing.schemas import PricingConfig, QuoteItem
from studio_pricing.services.negotiation import (
    calculate_courtesy_impact,
    calculate_financial_health,
    calculate_negotiated_price,
    validate_negotiated_margin,
)

ITEMS = [
    QuoteItem(id="a", quantity=2, unit_price=1000, cost=300, expense=100, billing_type="hour"),
    QuoteItem(id="b", quantity=1, unit_price=2000, cost=500, expense=0, billing_type="service"),
]
CONFIG = PricingConfig(sales_commission=5)


def test_condition_discount_and_commission():
    res = calculate_negotiated_price(
        ITEMS,
        event_duration_hours=3,
        condition={"discount_percentage": 10},
        pricing_config=CONFIG,
    )
    assert res is not None
    # hourly item costs scale with the 3h event
    assert res.cost_total == Decimal("2300.00")
    assert res.expense_total == Decimal("600.00")
    assert res.base_price == Decimal("4000.00")
    assert res.total_discount == Decimal("400.00")
    assert res.final_price == Decimal("3600.00")
    assert res.commission_ratio == Decimal("0.05")
    assert res.commission_amount == Decimal("180.00")
    assert res.net_profit == Decimal("520.00")
    assert res.margin_pct == Decimal("14.44")
    assert res.profit_impact == Decimal("-380.00")


def test_custom_price_and_extra_discount():
    res = calculate_negotiated_price(
        ITEMS,
        event_duration_hours=3,
        custom_price=5000,
        extra_discount=500,
        pricing_config=CONFIG,
        original_price=4000,
    )
    assert res.base_price == Decimal("5000.00")
    assert res.final_price == Decimal("4500.00")


def test_price_below_cost_floor_is_rejected():
    res = calculate_negotiated_price(
        ITEMS,
        event_duration_hours=3,
        courtesy_item_ids={"b"},
        pricing_config=CONFIG,
    )
    assert res is None


def test_profit_impact_reference_includes_courtesy_items():
    items = [
        QuoteItem(id="a", quantity=1, unit_price=2000, cost=500),
        QuoteItem(id="b", quantity=1, unit_price=3000, cost=500),
    ]
    res = calculate_negotiated_price(items, courtesy_item_ids={"a"})
    assert res.final_price == Decimal("3000.00")
    assert res.net_profit == Decimal("2000.00")
    # the full 5000 quote would have earned 4000
    assert res.profit_impact == Decimal("-2000.00")


def test_courtesy_items_are_zeroed_in_breakdown():
    res = calculate_negotiated_price(ITEMS, courtesy_item_ids={"a"}, custom_price=6000, pricing_config=CONFIG)
    by_id = {item.id: item for item in res.items}
    assert by_id["a"].is_courtesy is True
    assert by_id["a"].negotiated_price == 0
    assert by_id["b"].negotiated_price == Decimal("2000")


def test_margin_validation_levels():
    below_floor = validate_negotiated_margin(5, 1000, 2000, 0)
    assert below_floor.is_valid is False
    assert below_floor.level == MarginLevel.CRITICAL

    assert validate_negotiated_margin(5, 3000, 1000, 0).level == MarginLevel.CRITICAL
    assert validate_negotiated_margin(5, 3000, 1000, 0).is_valid is True
    assert validate_negotiated_margin(15, 3000, 1000, 0).level == MarginLevel.LOW
    assert validate_negotiated_margin(25, 3000, 1000, 0).level == MarginLevel.ACCEPTABLE


def test_financial_health_states():
    warning = calculate_financial_health(6000, 2000, 10000, Decimal("0.05"))
    assert warning.status == HealthStatus.WARNING
    assert warning.margin_pct == Decimal("15.00")
    assert warning.rescue_price == Decimal("10666.67")
    assert warning.shortfall == Decimal("666.67")

    assert calculate_financial_health(6000, 2000, 12000).status == HealthStatus.HEALTHY
    assert calculate_financial_health(6000, 2000, 9000).status == HealthStatus.CRITICAL
    assert calculate_financial_health(6000, 2000, 8000).status == HealthStatus.DANGER
    assert calculate_financial_health(6000, 2000, 0).status == HealthStatus.DANGER


def test_courtesy_impact():
    impact = calculate_courtesy_impact(ITEMS, {"a"})
    assert impact.courtesy_total == Decimal("2000.00")
    assert impact.profit_impact == Decimal("-1200.00")
