"""
Rules API - FastAPI router for pricing rules management.
"""
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..engine.categories import GROUP_KINDS, KNOWN_CONDITIONS, YesNoQuestion
from ..engine.errors import RulesValidationError
from ..engine.labels import get_assessment_label
from ..engine.models import PricingRules
from ..engine.price_calculator import explain_price
from ..engine.valuation_engine import ValuationEngine
from ..services.rules_service import SOURCE_GLOBAL, SOURCE_PRODUCT, SOURCE_ZERO
from .state import get_engine

router = APIRouter(prefix="/api/pricing/rules", tags=["pricing-rules"])


# Pydantic models for API
class RulesUpdate(BaseModel):
    """Request model for saving a rules document."""
    pricing_rules: Dict[str, Any]
    updated_by: str = Field(default="admin", min_length=1, max_length=200)


class ValidateRequest(BaseModel):
    pricing_rules: Dict[str, Any]
    product_id: Optional[str] = None


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


class PreviewRequest(BaseModel):
    """Price an assessment against unsaved rules."""
    pricing_rules: Dict[str, Any]
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    product_id: Optional[str] = None
    base_price: Optional[int] = Field(default=None, ge=0)


def _rules_response(engine: ValuationEngine, rules: Optional[PricingRules], source: str, product_id: Optional[str] = None) -> dict:
    configured = rules is not None and source != SOURCE_ZERO
    return {
        "product_id": product_id,
        "source": source,
        "configured": configured,
        "pricing_rules": rules.to_dict() if rules is not None else None,
        "metadata": engine.store.get_metadata(product_id if source == SOURCE_PRODUCT else None) if configured else None,
    }


def _save(engine: ValuationEngine, update: RulesUpdate, product_id: Optional[str] = None) -> PricingRules:
    try:
        if product_id is None:
            return engine.store.save_global_rules(update.pricing_rules, updated_by=update.updated_by)
        return engine.store.save_product_rules(product_id, update.pricing_rules, updated_by=update.updated_by)
    except RulesValidationError as e:
        raise HTTPException(status_code=400, detail={"errors": e.errors, "warnings": e.warnings})


# Endpoints

@router.get("/categories")
def list_categories():
    """Every question and condition group the calculator prices."""
    return {
        "questions": [
            {"key": q.value, "label": get_assessment_label(q.value)}
            for q in YesNoQuestion
        ],
        "groups": [
            {
                "key": group.value,
                "label": get_assessment_label(group.value),
                "kind": kind.value,
                "conditions": list(KNOWN_CONDITIONS.get(group, ())),
            }
            for group, kind in GROUP_KINDS.items()
        ],
    }


@router.get("/global")
def get_global_rules(engine: ValuationEngine = Depends(get_engine)):
    """Get the global default rules."""
    return _rules_response(engine, engine.store.get_global_rules(), SOURCE_GLOBAL)


@router.put("/global")
def save_global_rules(update: RulesUpdate, engine: ValuationEngine = Depends(get_engine)):
    """Replace the global default rules."""
    rules = _save(engine, update)
    return {"success": True, "message": "Global pricing rules saved", "pricing_rules": rules.to_dict()}


@router.get("/products")
def list_overrides(engine: ValuationEngine = Depends(get_engine)):
    """List products that carry their own rules."""
    return {"product_ids": engine.store.list_product_overrides()}


@router.get("/products/{product_id}")
def get_product_rules(product_id: str, engine: ValuationEngine = Depends(get_engine)):
    """Get the rules a product resolves to, and where they come from."""
    resolved = engine.store.resolve(product_id)
    return _rules_response(engine, resolved.rules, resolved.source, product_id)


@router.put("/products/{product_id}")
def save_product_rules(product_id: str, update: RulesUpdate, engine: ValuationEngine = Depends(get_engine)):
    """Create or replace a product override."""
    if product_id not in engine.catalog:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    rules = _save(engine, update, product_id)
    return {"success": True, "message": f"Pricing rules saved for {product_id}", "pricing_rules": rules.to_dict()}


@router.delete("/products/{product_id}")
def delete_product_rules(product_id: str, engine: ValuationEngine = Depends(get_engine)):
    """Delete a product override; the product falls back to the global rules."""
    if not engine.store.delete_product_rules(product_id):
        raise HTTPException(status_code=404, detail=f"No pricing rules override for '{product_id}'")
    return {"success": True, "message": f"Pricing rules override for '{product_id}' deleted"}


@router.post("/validate", response_model=ValidationResponse)
def validate_rules(request: ValidateRequest, engine: ValuationEngine = Depends(get_engine)):
    """Validate a rules document without saving."""
    result = engine.store.validate_rules(request.pricing_rules, product_id=request.product_id)
    return ValidationResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)


@router.post("/preview")
def preview(request: PreviewRequest, engine: ValuationEngine = Depends(get_engine)):
    """Price an assessment with draft rules (for the rules editor)."""
    power_on_percentage = None
    if request.product_id:
        product = engine.catalog.get(request.product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product '{request.product_id}' not found")
        base_price = product.base_price if request.base_price is None else request.base_price
        power_on_percentage = product.power_on_percentage
    elif request.base_price is not None:
        base_price = request.base_price
    else:
        raise HTTPException(status_code=400, detail="product_id or base_price is required")
    
    breakdown = explain_price(
        base_price,
        request.answers,
        PricingRules.from_dict(request.pricing_rules),
        power_on_percentage=power_on_percentage,
    )
    return breakdown.to_dict()
