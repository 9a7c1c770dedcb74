"""
Valuation Engine - Product → Pricing Rules → Offer, with traceability.

Ties the product catalog, the pricing rules store and the price calculator
together:
- Structured ValuationResult output
- Execution trace for every resolution step
- Warning collection for fallbacks and ignored answers
- Legacy /api/calculate field mapping
"""
import logging
from typing import Mapping, Optional

from ..config.settings import get_settings, Settings
from ..services.rules_service import PricingRulesStore, SOURCE_ZERO
from .catalog import ProductCatalog
from .errors import ProductNotFoundError
from .labels import format_answer_value, get_assessment_label
from .models import ValuationRequest, ValuationResult
from .price_calculator import explain_price

logger = logging.getLogger(__name__)

# Legacy request fields → assessment answers
LEGACY_CONDITION_GROUP = 'bodyCondition'
LEGACY_USAGE_TO_AGE = {
    'light': 'lessThan3Months',
    'moderate': 'fourToTwelveMonths',
    'heavy': 'aboveTwelveMonths',
}


def legacy_answers(
    condition: Optional[str] = None,
    usage: Optional[str] = None,
    accessories: Optional[list[str]] = None,
) -> dict:
    """Map the public calculator's condition/usage/accessories onto an answer map."""
    answers = {}
    if condition:
        answers[LEGACY_CONDITION_GROUP] = condition
    if usage and usage in LEGACY_USAGE_TO_AGE:
        answers['age'] = LEGACY_USAGE_TO_AGE[usage]
    if accessories:
        answers['accessories'] = list(accessories)
    return answers


class ValuationEngine:
    """
    Core valuation engine that prices a device assessment.
    
    Resolution order:
    1. Look up the product for its internal base price
    2. Resolve pricing rules: product override → global default → zero rules
    3. Apply every answered question's adjustment
    4. Clamp the offer at 0
    """
    
    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[ProductCatalog] = None,
        store: Optional[PricingRulesStore] = None,
    ):
        """Initialize engine with catalog and rules store."""
        self.settings = settings or get_settings()
        self.catalog = catalog or ProductCatalog(self.settings.products_csv)
        self.store = store or PricingRulesStore(
            self.settings.rules_dir,
            cache_ttl=self.settings.rules_cache_ttl,
            max_rule_value=self.settings.max_rule_value,
        )
    
    def reload_data(self):
        """Reload the catalog from disk and drop cached rules."""
        self.catalog = ProductCatalog(self.settings.products_csv)
        self.store.invalidate()
    
    def quote(self, request: ValuationRequest) -> ValuationResult:
        """
        Price an assessment with full traceability.
        
        Raises:
            ProductNotFoundError: product_id is not in the catalog
        """
        product = self.catalog.get(request.product_id)
        if product is None:
            raise ProductNotFoundError(product_id=request.product_id)
        
        resolved = self.store.resolve(product.product_id)
        brand = request.brand or product.brand
        
        breakdown = explain_price(
            product.base_price,
            request.answers,
            resolved.rules,
            brand,
            power_on_percentage=product.power_on_percentage,
        )
        
        result = ValuationResult(
            product_id=product.product_id,
            brand=product.brand,
            model=product.model,
            base_price=product.base_price,
            final_price=breakdown.final_price,
            rules_source=resolved.source,
            breakdown=breakdown,
            answers=dict(request.answers) if isinstance(request.answers, Mapping) else {},
        )
        
        result.add_trace("Product Lookup", f"{product.brand} {product.model}", f"₹{product.base_price:,}")
        result.add_trace("Rules Resolution", f"Using {resolved.source} pricing rules", resolved.source)
        if resolved.source == SOURCE_ZERO:
            result.add_warning(f"No pricing rules configured for {product.product_id}; using all-zero pricing rules")
        
        for adj in breakdown.adjustments:
            sign = "+" if adj.delta >= 0 else "-"
            result.add_trace(
                "Adjustment",
                f"{get_assessment_label(adj.category)}: {format_answer_value(adj.answer)}",
                f"{sign}₹{abs(adj.delta):,}",
            )
        
        if breakdown.ignored_answers:
            result.add_warning(f"Ignored unrecognised answers: {', '.join(breakdown.ignored_answers)}")
        
        if breakdown.clamped:
            result.add_trace("Clamp", f"Adjusted price ₹{breakdown.unclamped_price:,} floored", "₹0")
        result.add_trace("Final Price", "Base price plus adjustments", f"₹{breakdown.final_price:,}")
        
        logger.info(
            "Valued %s at %s (base %s, %d adjustments, rules=%s)",
            product.product_id, breakdown.final_price, product.base_price,
            len(breakdown.adjustments), resolved.source,
        )
        return result
    
    def quote_legacy(
        self,
        brand: str,
        model: str,
        condition: Optional[str] = None,
        usage: Optional[str] = None,
        accessories: Optional[list[str]] = None,
    ) -> ValuationResult:
        """Price a request in the public calculator's legacy shape."""
        product = self.catalog.find(brand, model)
        if product is None:
            raise ProductNotFoundError(brand=brand, model=model)
        
        request = ValuationRequest(
            product_id=product.product_id,
            answers=legacy_answers(condition, usage, accessories),
            brand=brand,
        )
        return self.quote(request)
