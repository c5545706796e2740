from .pricing import (
    CatalogItem,
    CommercialCondition,
    CommercialConditionSnapshot,
    CotizacionTotalsRead,
    Package,
    PackageItem,
    PackagePriceRead,
    PricingConfig,
    Quote,
    QuoteItem,
)
