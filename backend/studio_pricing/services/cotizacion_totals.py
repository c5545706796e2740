"""Single source of truth for a quote's payable total.

Every surface that shows money for a cotización (contract rendering,
commercial dashboards, financial summaries) must call this module instead of
re-deriving totals, so all of them agree to the cent.

Rules, in priority order:

1. A negotiated price (``negotiated_custom > 0``) is the final total; any
   percentage discount of the commercial condition is ignored.
2. Otherwise a percentage discount is applied to the real base price.
3. Otherwise a monetary discount already baked into ``price`` is reported.
4. Advance (anticipo) and deferred (diferido) amounts are computed on the
   resolved total, after the optional charm rounding.

``discount`` on a quote row is always an absolute amount. When it is positive
the stored ``price`` already has it subtracted, so ``price + discount`` is the
real base price.

Condition terms come from the immutable snapshot taken when the quote was
approved; the live condition record only fills fields the snapshot lacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, TypeVar

from ..models.pricing_types import AdvanceType, CoercionPolicy, TotalsSource
from ..utils.numbers import (
    ZERO,
    coerce_decimal,
    coerce_optional_decimal,
    is_positive,
    percent_of,
    quantize_money,
    read_field,
    read_first,
)
from .price_rounding import round_to_charm_ending

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SNAPSHOT_COLUMNS = {
    "discount_percentage": "condiciones_comerciales_discount_percentage_snapshot",
    "advance_percentage": "condiciones_comerciales_advance_percentage_snapshot",
    "advance_type": "condiciones_comerciales_advance_type_snapshot",
    "advance_amount": "condiciones_comerciales_advance_amount_snapshot",
}


@dataclass
class CotizacionTotals:
    total_a_pagar: Decimal
    precio_base: Decimal
    precio_base_real: Decimal
    descuento_aplicado: Decimal
    descuento_porcentaje: Optional[Decimal]
    source: TotalsSource
    anticipo: Decimal
    diferido: Decimal
    precio_original_para_comparativa: Optional[Decimal] = None
    ahorro_total: Optional[Decimal] = None


@dataclass
class ConditionTerms:
    discount_percentage: Optional[Decimal]
    advance_percentage: Optional[Decimal]
    advance_type: Optional[AdvanceType]
    advance_amount: Optional[Decimal]


def resolve_snapshot_first(snapshot_value: Optional[T], live_value: Optional[T]) -> Optional[T]:
    """Return the snapshot value when present, else the live one."""
    if snapshot_value is not None:
        return snapshot_value
    return live_value


def resolve_condition_terms(
    snapshot: Any,
    live_condition: Any,
    policy: CoercionPolicy = CoercionPolicy.ZERO,
) -> ConditionTerms:
    def pick(key: str) -> Any:
        return resolve_snapshot_first(read_field(snapshot, key), read_field(live_condition, key))

    return ConditionTerms(
        discount_percentage=coerce_optional_decimal(pick("discount_percentage"), field="discount_percentage", policy=policy),
        advance_percentage=coerce_optional_decimal(pick("advance_percentage"), field="advance_percentage", policy=policy),
        advance_type=AdvanceType.parse(pick("advance_type")),
        advance_amount=coerce_optional_decimal(pick("advance_amount"), field="advance_amount", policy=policy),
    )


def _money_or_none(value: Optional[Decimal]) -> Optional[Decimal]:
    return None if value is None else quantize_money(value)


def _advance(total: Decimal, terms: ConditionTerms) -> Decimal:
    if terms.advance_type is AdvanceType.PERCENTAGE and is_positive(terms.advance_percentage):
        return percent_of(total, terms.advance_percentage)
    if terms.advance_type is AdvanceType.FIXED_AMOUNT and is_positive(terms.advance_amount):
        return quantize_money(terms.advance_amount)
    return ZERO


def calculate_cotizacion_totals(
    price: Any,
    discount: Any = None,
    *,
    negotiated_original: Any = None,
    negotiated_custom: Any = None,
    snapshot: Any = None,
    live_condition: Any = None,
    apply_charm_rounding: bool = False,
    policy: CoercionPolicy = CoercionPolicy.ZERO,
) -> CotizacionTotals:
    """Resolve total, discount, anticipo and diferido for a quote.

    ``snapshot`` and ``live_condition`` are condition-like objects (mapping,
    ORM row or schema) exposing ``discount_percentage``,
    ``advance_percentage``, ``advance_type`` and ``advance_amount``.
    ``apply_charm_rounding`` is only used for package quotes.
    """
    precio = quantize_money(coerce_decimal(price, field="price", policy=policy))
    descuento_existente = quantize_money(coerce_decimal(discount, field="discount", policy=policy))
    precio_base_real = precio + descuento_existente if descuento_existente > ZERO else precio

    custom = _money_or_none(coerce_optional_decimal(negotiated_custom, field="negotiated_custom", policy=policy))
    original = _money_or_none(coerce_optional_decimal(negotiated_original, field="negotiated_original", policy=policy))
    terms = resolve_condition_terms(snapshot, live_condition, policy)

    descuento_porcentaje: Optional[Decimal] = None
    comparativa = precio_base_real
    ahorro: Optional[Decimal] = None

    if is_positive(custom):
        total = custom
        descuento_aplicado = ZERO
        source = TotalsSource.NEGOCIADO
        comparativa = original if original is not None else precio_base_real
        ahorro = comparativa - custom
    elif is_positive(terms.discount_percentage):
        descuento_aplicado = percent_of(precio_base_real, terms.discount_percentage)
        total = precio_base_real - descuento_aplicado
        descuento_porcentaje = terms.discount_percentage
        source = TotalsSource.DESCUENTO_PORCENTAJE
    elif descuento_existente > ZERO:
        total = precio
        descuento_aplicado = descuento_existente
        source = TotalsSource.DESCUENTO_MONTO
    else:
        total = precio
        descuento_aplicado = ZERO
        source = TotalsSource.SIN_DESCUENTO

    if apply_charm_rounding:
        total = round_to_charm_ending(total)

    anticipo = _advance(total, terms)
    diferido = total - anticipo

    logger.debug("cotizacion totals source=%s total=%s anticipo=%s", source.value, total, anticipo)
    return CotizacionTotals(
        total_a_pagar=total,
        precio_base=precio,
        precio_base_real=precio_base_real,
        descuento_aplicado=descuento_aplicado,
        descuento_porcentaje=descuento_porcentaje,
        source=source,
        anticipo=anticipo,
        diferido=diferido,
        precio_original_para_comparativa=comparativa,
        ahorro_total=ahorro,
    )


def snapshot_from_row(row: Any) -> Optional[dict[str, Any]]:
    """Return the condition snapshot stored on a quote row, if any column is set."""
    values = {key: read_field(row, column) for key, column in _SNAPSHOT_COLUMNS.items()}
    if all(v is None for v in values.values()):
        return None
    return values


def calculate_quote_totals(
    quote: Any,
    *,
    snapshot: Any = None,
    live_condition: Any = None,
    apply_charm_rounding: bool = False,
    policy: CoercionPolicy = CoercionPolicy.ZERO,
) -> CotizacionTotals:
    """Compute totals for a stored quote row (mapping, ORM row or schema).

    Unless passed in, the condition snapshot comes from ``condition_snapshot``
    or the row's ``condiciones_comerciales_*_snapshot`` columns, and the live
    condition from ``commercial_condition`` / ``condiciones_comerciales``.
    """
    if snapshot is None:
        snapshot = read_field(quote, "condition_snapshot")
        if snapshot is None:
            snapshot = snapshot_from_row(quote)
    if live_condition is None:
        live_condition = read_first(quote, ("commercial_condition", "condiciones_comerciales"))
    return calculate_cotizacion_totals(
        read_field(quote, "price"),
        read_field(quote, "discount"),
        negotiated_original=read_first(quote, ("negotiated_original", "negociacion_precio_original")),
        negotiated_custom=read_first(quote, ("negotiated_custom", "negociacion_precio_personalizado")),
        snapshot=snapshot,
        live_condition=live_condition,
        apply_charm_rounding=apply_charm_rounding,
        policy=policy,
    )


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def cotizacion_totals_payload(totals: CotizacionTotals) -> dict[str, Any]:
    """Return a JSON-ready dict for renderers that cannot handle Decimal."""
    payload: dict[str, Any] = {
        "total_a_pagar": float(totals.total_a_pagar),
        "precio_base": float(totals.precio_base),
        "precio_base_real": float(totals.precio_base_real),
        "descuento_aplicado": float(totals.descuento_aplicado),
        "descuento_porcentaje": _as_float(totals.descuento_porcentaje),
        "source": totals.source.value,
        "anticipo": float(totals.anticipo),
        "diferido": float(totals.diferido),
        "precio_original_para_comparativa": _as_float(totals.precio_original_para_comparativa),
    }
    if totals.ahorro_total is not None:
        payload["ahorro_total"] = float(totals.ahorro_total)
    return payload
