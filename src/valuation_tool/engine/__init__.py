"""Engine subpackage - assessment pricing rules and price calculation."""
from .models import PricingRules, YesNoPrice, ValuationRequest, ValuationResult
from .price_calculator import calculate_price, explain_price
from .zero_rules import ZERO_PRICING_RULES, zero_pricing_rules

__all__ = [
    'PricingRules', 'YesNoPrice', 'ValuationRequest', 'ValuationResult',
    'calculate_price', 'explain_price',
    'ZERO_PRICING_RULES', 'zero_pricing_rules',
]
