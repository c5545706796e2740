from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.pricing_types import (
    AdvanceType,
    BillingType,
    PackagePriceSource,
    TotalsSource,
    UtilityType,
)


class CommercialConditionTerms(BaseModel):
    discount_percentage: Optional[Decimal] = None
    advance_percentage: Optional[Decimal] = None
    advance_type: Optional[AdvanceType] = None
    advance_amount: Optional[Decimal] = None

    @field_validator("advance_type", mode="before")
    @classmethod
    def normalize_advance_type(cls, v):
        """Accept the legacy ``amount`` spelling and any letter case."""
        if v is None:
            return None
        return AdvanceType.parse(v, v)


class CommercialConditionSnapshot(CommercialConditionTerms):
    """Immutable copy of a condition taken when the quote was approved."""

    model_config = {"frozen": True}


class CommercialCondition(CommercialConditionTerms):
    id: Optional[str] = None
    name: Optional[str] = None


class Quote(BaseModel):
    price: Decimal
    discount: Optional[Decimal] = None
    negotiated_original: Optional[Decimal] = None
    negotiated_custom: Optional[Decimal] = None
    condition_snapshot: Optional[CommercialConditionSnapshot] = None
    commercial_condition: Optional[CommercialCondition] = None


class CatalogItem(BaseModel):
    id: str
    billing_type: BillingType = BillingType.SERVICE
    cost: Decimal = Field(default=0)
    expense: Decimal = Field(default=0)
    utility_type: UtilityType = UtilityType.SERVICE


class Package(BaseModel):
    personalized_price: Decimal = Field(default=0)
    base_hours: Optional[Decimal] = None


class PackageItem(BaseModel):
    item_id: str
    quantity: Decimal = Field(default=1)
    personalized_item_price: Optional[Decimal] = None


class PricingConfig(BaseModel):
    service_margin: Decimal = Field(default=0)
    product_margin: Decimal = Field(default=0)
    sales_commission: Decimal = Field(default=0)
    markup: Decimal = Field(default=0)


class QuoteItem(BaseModel):
    """Line of a quote under negotiation."""

    id: str
    item_id: Optional[str] = None
    quantity: Decimal = Field(default=1)
    unit_price: Decimal = Field(default=0)
    cost: Optional[Decimal] = None
    expense: Optional[Decimal] = None
    billing_type: Optional[BillingType] = None


class CotizacionTotalsRead(BaseModel):
    total_a_pagar: Decimal
    precio_base: Decimal
    precio_base_real: Decimal
    descuento_aplicado: Decimal
    descuento_porcentaje: Optional[Decimal] = None
    source: TotalsSource
    anticipo: Decimal
    diferido: Decimal
    precio_original_para_comparativa: Optional[Decimal] = None
    ahorro_total: Optional[Decimal] = None

    model_config = {"from_attributes": True}


class PackagePriceRead(BaseModel):
    final_price: Decimal
    base_price: Decimal
    recalculated_price: Decimal
    hours_match: bool
    price_source: PackagePriceSource

    model_config = {"from_attributes": True}
