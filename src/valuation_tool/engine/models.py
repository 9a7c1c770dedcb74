"""
Data models for the valuation engine.

Uses dataclasses for structured, type-safe data representation.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .categories import NO, QUESTIONS_GROUP, YES

logger = logging.getLogger(__name__)

# question id -> single answer, or several for multi-select questions
AnswerMap = Mapping[str, Union[str, list[str]]]


def coerce_delta(value: Any) -> Optional[int]:
    """Return value as an int currency delta, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass(frozen=True)
class YesNoPrice:
    """Adjustments for the two answers of a yes/no question."""
    yes: int = 0
    no: int = 0
    
    def for_answer(self, answer: str) -> int:
        if answer == YES:
            return self.yes
        if answer == NO:
            return self.no
        return 0


@dataclass(frozen=True)
class PricingRules:
    """
    Read-only table of price adjustments.
    
    `questions` holds the yes/no pairs; `groups` holds every enumerated or
    additive group (lensCondition, accessories, age, ...). The table is
    sparse: a missing group or key prices at zero.
    """
    questions: Mapping[str, YesNoPrice] = field(default_factory=lambda: MappingProxyType({}))
    groups: Mapping[str, Mapping[str, int]] = field(default_factory=lambda: MappingProxyType({}))
    
    def question_delta(self, question: str, answer: str) -> int:
        price = self.questions.get(question)
        if price is None:
            return 0
        return price.for_answer(answer)
    
    def group_delta(self, group: str, key: str) -> int:
        table = self.groups.get(group)
        if table is None:
            return 0
        return table.get(key, 0)
    
    def has_rule(self, group: str, key: str) -> bool:
        if group == QUESTIONS_GROUP:
            return key in self.questions
        table = self.groups.get(group)
        return table is not None and key in table
    
    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'PricingRules':
        """
        Build rules from a JSON document.
        
        Malformed entries are dropped (and logged) instead of raised, so a
        partially configured document still prices what it can.
        """
        questions: dict[str, YesNoPrice] = {}
        groups: dict[str, Mapping[str, int]] = {}
        
        if not isinstance(data, Mapping):
            if data is not None:
                logger.warning("Ignoring pricing rules document of type %s", type(data).__name__)
            return cls()
        
        for group_name, table in data.items():
            if not isinstance(table, Mapping):
                logger.warning("Ignoring pricing group %r: expected an object", group_name)
                continue
            
            if group_name == QUESTIONS_GROUP:
                for question, pair in table.items():
                    if not isinstance(pair, Mapping):
                        logger.warning("Ignoring question %r: expected {yes, no}", question)
                        continue
                    yes = coerce_delta(pair.get(YES, 0))
                    no = coerce_delta(pair.get(NO, 0))
                    if yes is None or no is None:
                        logger.warning("Ignoring question %r: non-integer adjustment", question)
                        continue
                    questions[str(question)] = YesNoPrice(yes=yes, no=no)
                continue
            
            parsed: dict[str, int] = {}
            for key, value in table.items():
                delta = coerce_delta(value)
                if delta is None:
                    logger.warning("Ignoring %s.%s: non-integer adjustment %r", group_name, key, value)
                    continue
                parsed[str(key)] = delta
            groups[str(group_name)] = MappingProxyType(parsed)
        
        return cls(questions=MappingProxyType(questions), groups=MappingProxyType(groups))
    
    def to_dict(self) -> dict:
        """Render the JSON document shape."""
        out: dict[str, Any] = {
            QUESTIONS_GROUP: {
                q: {YES: p.yes, NO: p.no} for q, p in self.questions.items()
            }
        }
        for group_name, table in self.groups.items():
            out[group_name] = dict(table)
        return out


@dataclass
class TraceStep:
    """A single step in the valuation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Adjustment:
    """One applied rule: the answer that matched and what it was worth."""
    category: str
    answer: str
    delta: int
    group: str = ""


@dataclass
class PriceBreakdown:
    """Itemised result of a price calculation."""
    base_price: int
    adjustments: list[Adjustment] = field(default_factory=list)
    ignored_answers: list[str] = field(default_factory=list)
    
    @property
    def total_adjustment(self) -> int:
        return sum(a.delta for a in self.adjustments)
    
    @property
    def unclamped_price(self) -> int:
        return self.base_price + self.total_adjustment
    
    @property
    def final_price(self) -> int:
        return max(0, self.unclamped_price)
    
    @property
    def clamped(self) -> bool:
        return self.unclamped_price < 0
    
    def to_dict(self) -> dict:
        return {
            "base_price": self.base_price,
            "adjustments": [
                {"category": a.category, "answer": a.answer, "delta": a.delta, "group": a.group}
                for a in self.adjustments
            ],
            "total_adjustment": self.total_adjustment,
            "unclamped_price": self.unclamped_price,
            "final_price": self.final_price,
            "ignored_answers": list(self.ignored_answers),
        }


@dataclass
class Product:
    """A device model that can be traded in."""
    product_id: str
    category: str
    brand: str
    model: str
    base_price: int  # internal valuation baseline
    display_price: Optional[int] = None  # customer-facing "up to" price
    power_on_percentage: Optional[float] = None


@dataclass
class ValuationRequest:
    """An assessment to be priced for one product."""
    product_id: str
    answers: dict[str, Union[str, list[str]]] = field(default_factory=dict)
    brand: Optional[str] = None


@dataclass
class ValuationResult:
    """Complete result of a valuation."""
    product_id: str
    brand: str
    model: str
    base_price: int
    final_price: int
    rules_source: str  # "product", "global" or "zero"
    breakdown: PriceBreakdown
    answers: dict[str, Union[str, list[str]]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)
    
    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the result-level trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))
    
    def add_warning(self, warning: str):
        """Add a result-level warning."""
        self.warnings.append(warning)
    
    def get_trace_text(self) -> str:
        """Get human-readable result trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
    
    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "brand": self.brand,
            "model": self.model,
            "base_price": self.base_price,
            "final_price": self.final_price,
            "rules_source": self.rules_source,
            "breakdown": self.breakdown.to_dict(),
            "answers": self.answers,
            "warnings": list(self.warnings),
            "trace": [
                {"step": t.step, "description": t.description, "value": t.value}
                for t in self.trace
            ],
        }
