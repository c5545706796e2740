from .pricing_types import (
    AdvanceType,
    BillingType,
    CoercionPolicy,
    HealthStatus,
    MarginLevel,
    PackagePriceSource,
    RoundingMode,
    RoundingStrategy,
    TotalsSource,
    UtilityType,
)
