"""
All-zero pricing rules.

Used when neither a product override nor a global default has been
configured, so a missing configuration prices as "no adjustment" instead of
failing the valuation.
"""
from types import MappingProxyType

from .categories import KNOWN_CONDITIONS, YesNoQuestion
from .models import PricingRules, YesNoPrice


def zero_pricing_rules() -> PricingRules:
    """Build a complete rules table with every adjustment set to 0."""
    questions = {q.value: YesNoPrice(yes=0, no=0) for q in YesNoQuestion}
    groups = {
        group.value: MappingProxyType({label: 0 for label in labels})
        for group, labels in KNOWN_CONDITIONS.items()
    }
    return PricingRules(questions=MappingProxyType(questions), groups=MappingProxyType(groups))


ZERO_PRICING_RULES: PricingRules = zero_pricing_rules()
