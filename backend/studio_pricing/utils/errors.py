from typing import Dict
import logging

logger = logging.getLogger(__name__)


class PricingInputError(ValueError):
    """Raised when strict coercion rejects a numeric pricing input."""

    def __init__(self, message: str, field_errors: Dict[str, str]):
        super().__init__(message)
        self.message = message
        self.field_errors = field_errors


def error_response(message: str, field_errors: Dict[str, str]) -> PricingInputError:
    """Return a PricingInputError with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    return PricingInputError(message, field_errors)
