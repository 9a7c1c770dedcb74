"""Domain errors raised by the valuation engine and rules store."""
from typing import Optional


class ValuationError(Exception):
    """Base class for valuation failures that callers can act on."""


class ProductNotFoundError(ValuationError):
    def __init__(self, product_id: Optional[str] = None, brand: Optional[str] = None, model: Optional[str] = None):
        if product_id is not None:
            message = f"Product '{product_id}' not found"
        else:
            message = f"Product '{brand} {model}' not found"
        super().__init__(message)
        self.product_id = product_id
        self.brand = brand
        self.model = model


class RulesValidationError(ValuationError):
    """Pricing rules rejected by validation; carries the findings."""
    
    def __init__(self, errors: list[str], warnings: Optional[list[str]] = None):
        super().__init__("; ".join(errors) or "Invalid pricing rules")
        self.errors = errors
        self.warnings = warnings or []
