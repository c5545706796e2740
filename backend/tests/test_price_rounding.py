from decimal import Decimal

import pytest

from studio_pricing.models import RoundingStrategy
from studio_pricing.services import price_rounding
from studio_pricing.services.price_rounding import round_price


def test_rounding_examples_used_on_published_quotes():
    assert round_price(20171, "charm") == Decimal("20199")
    assert round_price(38661, "hundred") == Decimal("38700")
    assert round_price(64419, "thousand") == Decimal("65000")


def test_hundred_and_thousand_always_round_up():
    assert price_rounding.round_to_hundred(Decimal("100.01")) == Decimal("200")
    assert price_rounding.round_to_hundred(500) == Decimal("500")
    assert price_rounding.round_to_thousand(Decimal("1000.5")) == Decimal("2000")


def test_small_charm_picks_nearest_ending():
    assert price_rounding.round_to_charm_ending(5) == Decimal("9")
    assert price_rounding.round_to_charm_ending(15) == Decimal("19")
    assert price_rounding.round_to_charm_ending(Decimal("12.5")) == Decimal("19")
    assert price_rounding.round_to_charm_ending(41) == Decimal("49")
    assert price_rounding.round_to_charm_ending(999) == Decimal("999")


def test_small_charm_never_rounds_down():
    # 19 is closer to 19.5 but lower, so the next decade's ending is used
    assert price_rounding.round_to_charm_ending(Decimal("19.5")) == Decimal("29")
    assert price_rounding.round_to_charm_ending(Decimal("999.5")) == Decimal("1009")


def test_large_charm_may_round_down():
    assert price_rounding.round_to_charm_ending(Decimal("2299.5")) == Decimal("2299")
    assert price_rounding.round_to_charm_ending(1000) == Decimal("1099")
    assert price_rounding.round_to_charm_ending(2050) == Decimal("2099")


def test_auto_thresholds():
    assert round_price(45000, RoundingStrategy.AUTO) == Decimal("45099")
    assert round_price(50000, "auto") == Decimal("50000")
    assert round_price(60001, "auto") == Decimal("60100")
    assert round_price(100000, "auto") == Decimal("100000")
    assert round_price(150001, "auto") == Decimal("151000")


def test_non_positive_amounts_pass_through_every_strategy():
    for strategy in RoundingStrategy:
        assert round_price(0, strategy) == 0
        assert round_price(Decimal("-125.40"), strategy) == Decimal("-125.40")


def test_block_rounding_is_idempotent():
    for value in (Decimal("38661"), Decimal("64419"), Decimal("75010.2"), Decimal("250001")):
        for strategy in ("hundred", "thousand", "auto"):
            once = round_price(value, strategy)
            assert round_price(once, strategy) == once


def test_charm_idempotence_within_each_branch():
    for value in (Decimal("5"), Decimal("19.5"), Decimal("433"), Decimal("2299.5"), Decimal("20171"), Decimal("47250")):
        once = round_price(value, "charm")
        assert round_price(once, "charm") == once


def test_charm_is_not_idempotent_across_the_thousand_boundary():
    # Recorded behaviour: the sub-1000 branch can push a price to 1009,
    # which the >=1000 branch then moves again.
    once = round_price(Decimal("999.5"), "charm")
    assert once == Decimal("1009")
    assert round_price(once, "charm") == Decimal("1099")


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        round_price(100, "banker")
