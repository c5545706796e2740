import enum
from typing import Any, Optional


class _LenientEnum(str, enum.Enum):
    """String enum whose ``parse`` accepts values case-insensitively."""

    @classmethod
    def parse(cls, value: Any, default: Optional["_LenientEnum"] = None):
        if isinstance(value, cls):
            return value
        if value is None:
            return default
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key or member.name.lower() == key:
                return member
        return default


class BillingType(_LenientEnum):
    """Unit a catalog item is billed in."""

    HOUR = "hour"
    SERVICE = "service"
    UNIT = "unit"


class UtilityType(_LenientEnum):
    SERVICE = "service"
    PRODUCT = "product"


class AdvanceType(_LenientEnum):
    """How the upfront payment (anticipo) of a commercial condition is defined."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"

    @classmethod
    def parse(cls, value: Any, default: Optional["AdvanceType"] = None):
        # Older condition rows stored the fixed variant as "amount".
        if isinstance(value, str) and value.strip().lower() == "amount":
            return cls.FIXED_AMOUNT
        return super().parse(value, default)


class RoundingStrategy(_LenientEnum):
    CHARM = "charm"
    HUNDRED = "hundred"
    THOUSAND = "thousand"
    AUTO = "auto"


class RoundingMode(_LenientEnum):
    """Package rounding preference chosen by the studio."""

    EXACT = "exact"
    CHARM = "charm"


class PackagePriceSource(str, enum.Enum):
    PERSONALIZED = "personalized"
    RECALCULATED = "recalculated"
    BASE = "base"


class TotalsSource(str, enum.Enum):
    """Which rule produced a quote's payable total."""

    NEGOCIADO = "negociado"
    DESCUENTO_PORCENTAJE = "descuento_porcentaje"
    DESCUENTO_MONTO = "descuento_monto"
    SIN_DESCUENTO = "sin_descuento"


class CoercionPolicy(_LenientEnum):
    """What to do with malformed numeric input."""

    ZERO = "zero"
    STRICT = "strict"


class MarginLevel(str, enum.Enum):
    ACCEPTABLE = "acceptable"
    LOW = "low"
    CRITICAL = "critical"


class HealthStatus(str, enum.Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    DANGER = "danger"
