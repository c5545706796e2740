from .errors import PricingInputError, error_response
from .numbers import (
    CENT,
    coerce_decimal,
    coerce_optional_decimal,
    parse_decimal,
    percent_of,
    quantize_money,
    read_field,
    to_decimal,
)
