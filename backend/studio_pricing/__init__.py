"""Quote and package pricing engine for studio management."""

from .services.billing_quantity import effective_quantity, line_subtotal
from .services.cotizacion_totals import (
    CotizacionTotals,
    calculate_cotizacion_totals,
    calculate_quote_totals,
    cotizacion_totals_payload,
    resolve_snapshot_first,
)
from .services.package_price import (
    PackagePriceResult,
    PackagePriceSettings,
    package_price_payload,
    resolve_package_price,
)
from .services.price_rounding import (
    round_auto,
    round_price,
    round_to_charm_ending,
    round_to_hundred,
    round_to_thousand,
)

__all__ = [
    "CotizacionTotals",
    "PackagePriceResult",
    "PackagePriceSettings",
    "calculate_cotizacion_totals",
    "calculate_quote_totals",
    "cotizacion_totals_payload",
    "effective_quantity",
    "line_subtotal",
    "package_price_payload",
    "resolve_package_price",
    "resolve_snapshot_first",
    "round_auto",
    "round_price",
    "round_to_charm_ending",
    "round_to_hundred",
    "round_to_thousand",
]
