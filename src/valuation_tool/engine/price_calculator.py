"""
Price Calculator - Turns a base price and assessment answers into an offer.

Every recognised answer looks up a signed adjustment in the pricing rules;
the offer is the base price plus the sum of those adjustments, floored at 0.
Categories are evaluated in a fixed order and only ever summed, so the
order of keys in the answer map never changes the result.

Nothing here raises on bad input: an unknown answer key, an answer with no
matching rule or a rules table missing a group all contribute 0.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from .categories import (
    NO,
    YES,
    NO_ISSUES,
    QUESTIONS_GROUP,
    ConditionGroup,
    GroupKind,
    YesNoQuestion,
    is_known_answer_key,
)
from .models import Adjustment, AnswerMap, PriceBreakdown, PricingRules

logger = logging.getLogger(__name__)


def _single_answer(value: Any) -> Optional[str]:
    """A single-select answer; a one-element list counts as that element."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, (list, tuple)) and len(value) == 1 and isinstance(value[0], str):
        return value[0] or None
    return None


def _multi_answers(value: Any) -> list[str]:
    """All selected values of a multi-select answer, duplicates kept."""
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str) and v]
    return []


def _valid_percentage(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Ignoring non-numeric power-on percentage %r", value)
        return None
    if not 0 <= value <= 100:
        logger.warning("Ignoring out-of-range power-on percentage %r", value)
        return None
    return float(value)


def _power_on_deduction(base_price: int, percentage: float) -> int:
    """Share of the base price lost when the device does not power on, half-up to whole rupees."""
    amount = Decimal(base_price) * Decimal(str(percentage)) / Decimal(100)
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _as_rules(rules: Any) -> PricingRules:
    if isinstance(rules, PricingRules):
        return rules
    # Raw JSON documents are accepted as-is
    return PricingRules.from_dict(rules)


def explain_price(
    base_price: int,
    answers: AnswerMap,
    rules: PricingRules,
    brand: str = "",
    *,
    power_on_percentage: Optional[float] = None,
) -> PriceBreakdown:
    """
    Calculate the offer for a device and itemise every applied adjustment.
    
    Args:
        base_price: Internal valuation baseline (not the display price)
        answers: Question id -> answer id, or list of answer ids
        rules: Resolved pricing rules for the product
        brand: Accepted for callers that pass it; no rule depends on it
        power_on_percentage: Optional product setting (0-100). When the
            device does not power on, deducts this share of the base price
            instead of the fixed powerOn.no adjustment.
    
    Returns:
        PriceBreakdown whose final_price is never below 0
    """
    breakdown = PriceBreakdown(base_price=base_price)
    if not isinstance(answers, Mapping):
        return breakdown
    
    rules = _as_rules(rules)
    percentage = _valid_percentage(power_on_percentage)
    
    def apply(group: str, category: str, answer: str, delta: int):
        breakdown.adjustments.append(
            Adjustment(category=category, answer=answer, delta=delta, group=group)
        )
    
    # Basic functionality questions (yes/no)
    for question in YesNoQuestion:
        answer = _single_answer(answers.get(question.value))
        if answer is None:
            continue
        
        if question is YesNoQuestion.POWER_ON and answer == NO and percentage is not None:
            apply("powerOnPercentage", question.value, answer, -_power_on_deduction(base_price, percentage))
            continue
        
        if rules.has_rule(QUESTIONS_GROUP, question.value) and answer in (YES, NO):
            apply(QUESTIONS_GROUP, question.value, answer, rules.question_delta(question.value, answer))
    
    for group in ConditionGroup:
        value = answers.get(group.value)
        if value is None:
            continue
        
        if group.kind is GroupKind.SINGLE_SELECT:
            answer = _single_answer(value)
            if answer is not None and rules.has_rule(group.value, answer):
                apply(group.value, group.value, answer, rules.group_delta(group.value, answer))
        
        elif group.kind is GroupKind.MULTI_SELECT:
            for answer in _multi_answers(value):
                if rules.has_rule(group.value, answer):
                    apply(group.value, group.value, answer, rules.group_delta(group.value, answer))
        
        elif group.kind is GroupKind.FUNCTIONAL_ISSUES:
            selected = _multi_answers(value)
            # "No issues" wins over anything else ticked alongside it
            if NO_ISSUES in selected:
                selected = [NO_ISSUES]
            for answer in selected:
                if rules.has_rule(group.value, answer):
                    apply(group.value, group.value, answer, rules.group_delta(group.value, answer))
    
    for key in answers:
        if not isinstance(key, str) or not is_known_answer_key(key):
            breakdown.ignored_answers.append(str(key))
    if breakdown.ignored_answers:
        breakdown.ignored_answers.sort()
        logger.debug("Ignoring unrecognised answers: %s", ", ".join(breakdown.ignored_answers))
    
    return breakdown


def calculate_price(
    base_price: int,
    answers: AnswerMap,
    rules: PricingRules,
    brand: str = "",
    *,
    power_on_percentage: Optional[float] = None,
) -> int:
    """
    Calculate the final offer: max(0, base_price + sum of adjustments).
    
    `brand` is a passthrough: no current rule category reads it, so two
    calls differing only in brand always return the same price.
    """
    return explain_price(
        base_price,
        answers,
        rules,
        brand,
        power_on_percentage=power_on_percentage,
    ).final_price
