"""Shared engine instance for the API routers."""
from typing import Optional

from ..engine.valuation_engine import ValuationEngine

_engine: Optional[ValuationEngine] = None


def get_engine() -> ValuationEngine:
    """Get the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = ValuationEngine()
    return _engine


def set_engine(engine: Optional[ValuationEngine]):
    """Replace (or reset, with None) the process-wide engine."""
    global _engine
    _engine = engine
