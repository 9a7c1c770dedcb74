import logging
from dataclasses import asdict
from typing import Dict, List, Literal, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config.logging import init_logging
from ..engine.errors import ProductNotFoundError
from ..engine.models import ValuationRequest
from ..engine.valuation_engine import ValuationEngine
from .rules_api import router as rules_router
from .state import get_engine

init_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Valuation Tool API",
    description="Instant trade-in valuations and pricing rules management",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rules management API
app.include_router(rules_router)


class CalcRequest(BaseModel):
    """Public calculator request (legacy field names)."""
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    condition: Optional[Literal["excellent", "good", "fair", "poor"]] = None
    usage: Optional[Literal["light", "moderate", "heavy"]] = None
    accessories: Optional[List[str]] = None


class QuoteRequest(BaseModel):
    product_id: str = Field(min_length=1, max_length=100)
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    brand: Optional[str] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "Valuation Tool API Active"}


@app.post("/api/calculate")
def calculate_value(req: CalcRequest, engine: ValuationEngine = Depends(get_engine)):
    try:
        result = engine.quote_legacy(
            brand=req.brand,
            model=req.model,
            condition=req.condition,
            usage=req.usage,
            accessories=req.accessories,
        )
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error calculating value")
        raise HTTPException(status_code=500, detail="Failed to calculate value")
    
    breakdown = result.breakdown
    return {
        "success": True,
        "basePrice": result.base_price,
        "estimatedValue": result.final_price,
        "brand": req.brand,
        "model": req.model,
        "condition": req.condition,
        "usage": req.usage,
        "accessories": req.accessories or [],
        "breakdown": {
            "basePrice": breakdown.base_price,
            "totalAdjustment": breakdown.total_adjustment,
            "adjustments": [
                {"category": a.category, "answer": a.answer, "delta": a.delta}
                for a in breakdown.adjustments
            ],
            "rulesSource": result.rules_source,
        },
    }


@app.post("/api/valuations/quote")
def quote(req: QuoteRequest, engine: ValuationEngine = Depends(get_engine)):
    try:
        result = engine.quote(ValuationRequest(
            product_id=req.product_id,
            answers=req.answers,
            brand=req.brand,
        ))
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error valuing product %s", req.product_id)
        raise HTTPException(status_code=500, detail="Failed to calculate value")
    return result.to_dict()


@app.get("/api/products")
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    brand: Optional[str] = None,
    engine: ValuationEngine = Depends(get_engine),
):
    products = engine.catalog.search(search, category=category, brand=brand)
    return [asdict(p) for p in products]


@app.get("/api/products/{product_id}")
def get_product(product_id: str, engine: ValuationEngine = Depends(get_engine)):
    product = engine.catalog.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")
    resolved = engine.store.resolve(product.product_id)
    return {**asdict(product), "rules_source": resolved.source}


@app.get("/system/status")
def get_status(engine: ValuationEngine = Depends(get_engine)):
    return {
        "engine_active": True,
        "version": __version__,
        "products_count": len(engine.catalog),
        "catalog_warnings": engine.catalog.warnings,
        "global_rules_configured": engine.store.get_global_rules() is not None,
        "product_overrides": len(engine.store.list_product_overrides()),
        "rules_cache_ttl": engine.store.cache.default_ttl,
    }
