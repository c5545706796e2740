"""Resolve the price charged for a pre-defined service package.

A package carries a price the studio typed in by hand ("personalized") for a
given number of hours. When the event runs for a different duration the
package can instead be repriced item by item from the catalog, with hourly
items scaled to the event duration. The branch order below is what decides
which of the two prices a client sees:

a. recalculation disabled and a personalized price exists: personalized
b. hours match: personalized, never rounded
c. hours differ and the event duration is known: recalculated (personalized
   if the catalog sum is empty)
d. event duration unknown: personalized, never rounded
e. no personalized price: recalculated
f. nothing to go on: personalized or zero
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional

from ..models.pricing_types import BillingType, PackagePriceSource, RoundingMode
from ..utils.numbers import ZERO, parse_decimal, quantize_money, read_field, to_decimal
from .billing_quantity import line_subtotal
from .cost_pricing import derive_unit_price
from .price_rounding import round_to_charm_ending

logger = logging.getLogger(__name__)

PriceDeriver = Callable[[Any, Any, Any, Any], Decimal]


@dataclass(frozen=True)
class PackagePriceSettings:
    allow_recalc: bool = True
    rounding_mode: RoundingMode = RoundingMode.CHARM

    def __post_init__(self) -> None:
        object.__setattr__(self, "rounding_mode", RoundingMode.parse(self.rounding_mode, RoundingMode.CHARM))

    @classmethod
    def from_config(cls, config: Any) -> "PackagePriceSettings":
        return cls(
            allow_recalc=bool(config.PACKAGE_ALLOW_RECALC),
            rounding_mode=RoundingMode.parse(config.PACKAGE_ROUNDING_MODE, RoundingMode.CHARM),
        )


@dataclass
class PackagePriceResult:
    final_price: Decimal
    base_price: Decimal
    recalculated_price: Decimal
    hours_match: bool
    price_source: PackagePriceSource


def _known_hours(value: Any) -> Optional[Decimal]:
    hours = parse_decimal(value)
    if hours is None or hours <= ZERO:
        return None
    return hours


def _index_catalog(catalog: Any) -> Mapping[Any, Any]:
    if catalog is None:
        return {}
    if isinstance(catalog, Mapping):
        return catalog
    return {read_field(entry, "id"): entry for entry in catalog}


def _item_unit_price(item: Any, entry: Any, pricing_config: Any, derive_price: PriceDeriver) -> Decimal:
    personalized = parse_decimal(read_field(item, "personalized_item_price"))
    if personalized is not None:
        return personalized
    if entry is None:
        return ZERO
    return derive_price(
        read_field(entry, "cost"),
        read_field(entry, "expense"),
        read_field(entry, "utility_type"),
        pricing_config,
    )


def recalculate_package_price(
    package_items: Iterable[Any],
    catalog: Any,
    pricing_config: Any,
    duration_hours: Optional[Decimal],
    derive_price: PriceDeriver = derive_unit_price,
) -> Decimal:
    """Sum catalog-derived subtotals for every item of a package."""
    index = _index_catalog(catalog)
    total = ZERO
    for item in package_items or ():
        entry = index.get(read_field(item, "item_id"))
        billing_type = read_field(entry, "billing_type") if entry is not None else BillingType.SERVICE
        unit_price = _item_unit_price(item, entry, pricing_config, derive_price)
        total += line_subtotal(unit_price, billing_type, read_field(item, "quantity"), duration_hours)
    return total


def resolve_package_price(
    package: Any,
    *,
    event_duration_hours: Any,
    package_items: Iterable[Any],
    catalog: Any,
    pricing_config: Any,
    settings: Optional[PackagePriceSettings] = None,
    derive_price: PriceDeriver = derive_unit_price,
) -> PackagePriceResult:
    settings = settings or PackagePriceSettings()
    charm = settings.rounding_mode is RoundingMode.CHARM

    base_hours = _known_hours(read_field(package, "base_hours"))
    event_hours = _known_hours(event_duration_hours)
    personalized = quantize_money(to_decimal(read_field(package, "personalized_price")))
    has_personalized = personalized > ZERO

    recalculated = recalculate_package_price(
        package_items,
        catalog,
        pricing_config,
        event_hours if event_hours is not None else base_hours,
        derive_price,
    )
    hours_match = base_hours is not None and event_hours is not None and base_hours == event_hours

    if not settings.allow_recalc and has_personalized:
        price, source, apply_rounding = personalized, PackagePriceSource.PERSONALIZED, charm
    elif has_personalized and hours_match:
        price, source, apply_rounding = personalized, PackagePriceSource.PERSONALIZED, False
    elif has_personalized and event_hours is not None:
        if recalculated > ZERO:
            price, source = recalculated, PackagePriceSource.RECALCULATED
        else:
            price, source = personalized, PackagePriceSource.PERSONALIZED
        apply_rounding = charm
    elif has_personalized:
        price, source, apply_rounding = personalized, PackagePriceSource.PERSONALIZED, False
    elif recalculated > ZERO:
        price, source, apply_rounding = recalculated, PackagePriceSource.RECALCULATED, charm
    else:
        price, source, apply_rounding = max(personalized, ZERO), PackagePriceSource.BASE, False

    final_price = round_to_charm_ending(price) if apply_rounding else price
    logger.debug(
        "package price resolved source=%s hours_match=%s rounded=%s final=%s",
        source.value,
        hours_match,
        apply_rounding,
        final_price,
    )
    return PackagePriceResult(
        final_price=final_price,
        base_price=personalized,
        recalculated_price=recalculated,
        hours_match=hours_match,
        price_source=source,
    )


def package_price_payload(result: PackagePriceResult) -> dict[str, Any]:
    return {
        "final_price": float(result.final_price),
        "base_price": float(result.base_price),
        "recalculated_price": float(result.recalculated_price),
        "hours_match": result.hours_match,
        "price_source": result.price_source.value,
    }
