"""
Tests for the pricing rules model, the all-zero default and the category
catalog it is built from.
"""
import sys
import os
import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from valuation_tool.engine import PricingRules, YesNoPrice, ZERO_PRICING_RULES, zero_pricing_rules
from valuation_tool.engine.categories import (
    GROUP_KINDS,
    KNOWN_CONDITIONS,
    ConditionGroup,
    GroupKind,
    YesNoQuestion,
    is_known_answer_key,
    parse_group,
    parse_question,
)
from valuation_tool.engine.labels import format_answer_value, get_assessment_label
from valuation_tool.engine.models import coerce_delta


class TestFromDict:

    def test_parses_questions_and_groups(self):
        rules = PricingRules.from_dict({
            "questions": {"powerOn": {"yes": 0, "no": -5000}},
            "accessories": {"box": 1000},
        })

        assert rules.questions["powerOn"] == YesNoPrice(yes=0, no=-5000)
        assert rules.group_delta("accessories", "box") == 1000
        assert rules.question_delta("powerOn", "no") == -5000

    def test_missing_answer_side_defaults_to_zero(self):
        rules = PricingRules.from_dict({"questions": {"waterDamage": {"yes": -4000}}})
        assert rules.questions["waterDamage"] == YesNoPrice(yes=-4000, no=0)

    def test_integral_floats_accepted(self):
        rules = PricingRules.from_dict({"age": {"aboveTwelveMonths": -4000.0}})
        assert rules.group_delta("age", "aboveTwelveMonths") == -4000

    def test_malformed_entries_dropped(self):
        rules = PricingRules.from_dict({
            "questions": {"powerOn": "bad", "lcdWorking": {"yes": "x", "no": 0}, "flashWorking": {"yes": 0, "no": -1000}},
            "accessories": {"box": 1000, "bag": "cheap", "strap": 1.5, "lid": True},
            "age": "not a table",
        })

        assert list(rules.questions) == ["flashWorking"]
        assert dict(rules.groups["accessories"]) == {"box": 1000}
        assert "age" not in rules.groups

    @pytest.mark.parametrize("document", [None, [], "rules", 42])
    def test_non_mapping_documents_are_empty(self, document):
        rules = PricingRules.from_dict(document)
        assert not rules.questions
        assert not rules.groups

    def test_round_trip_preserves_document(self):
        document = {
            "questions": {"powerOn": {"yes": 0, "no": -5000}},
            "lensCondition": {"good": 0, "fungus": -5000},
            "accessories": {"box": 1000},
        }
        assert PricingRules.from_dict(document).to_dict() == document


class TestLookups:

    @pytest.fixture
    def rules(self):
        return PricingRules.from_dict({
            "questions": {"powerOn": {"yes": 0, "no": -5000}},
            "accessories": {"box": 1000},
        })

    def test_missing_entries_are_zero(self, rules):
        assert rules.question_delta("lcdWorking", "no") == 0
        assert rules.question_delta("powerOn", "maybe") == 0
        assert rules.group_delta("accessories", "tripod") == 0
        assert rules.group_delta("age", "aboveTwelveMonths") == 0

    def test_has_rule(self, rules):
        assert rules.has_rule("questions", "powerOn")
        assert not rules.has_rule("questions", "lcdWorking")
        assert rules.has_rule("accessories", "box")
        assert not rules.has_rule("age", "lessThan3Months")

    def test_rules_are_read_only(self, rules):
        with pytest.raises(TypeError):
            rules.groups["accessories"]["box"] = 5
        with pytest.raises(TypeError):
            rules.questions["flashWorking"] = YesNoPrice()


class TestZeroRules:

    def test_every_question_present_at_zero(self):
        for question in YesNoQuestion:
            assert ZERO_PRICING_RULES.questions[question.value] == YesNoPrice(0, 0)

    def test_every_known_condition_present_at_zero(self):
        for group, labels in KNOWN_CONDITIONS.items():
            for label in labels:
                assert ZERO_PRICING_RULES.has_rule(group.value, label)
                assert ZERO_PRICING_RULES.group_delta(group.value, label) == 0

    def test_every_adjustment_is_zero(self):
        document = ZERO_PRICING_RULES.to_dict()
        assert all(p == {"yes": 0, "no": 0} for p in document["questions"].values())
        assert all(v == 0 for group, table in document.items() if group != "questions" for v in table.values())

    def test_factory_returns_equal_fresh_value(self):
        fresh = zero_pricing_rules()
        assert fresh is not ZERO_PRICING_RULES
        assert fresh.to_dict() == ZERO_PRICING_RULES.to_dict()


class TestCategories:

    def test_every_group_has_a_kind(self):
        assert set(GROUP_KINDS) == set(ConditionGroup)

    def test_functional_issues_is_its_own_kind(self):
        functional = [g for g, kind in GROUP_KINDS.items() if kind is GroupKind.FUNCTIONAL_ISSUES]
        assert functional == [ConditionGroup.FUNCTIONAL_ISSUES]

    def test_accessories_are_multi_select(self):
        assert ConditionGroup.ACCESSORIES.kind is GroupKind.MULTI_SELECT
        assert ConditionGroup.AGE.kind is GroupKind.SINGLE_SELECT

    def test_parsing(self):
        assert parse_question("powerOn") is YesNoQuestion.POWER_ON
        assert parse_group("lensCondition") is ConditionGroup.LENS_CONDITION
        assert parse_question("lensCondition") is None
        assert parse_group("unknownGroup") is None
        assert is_known_answer_key("accessories")
        assert not is_known_answer_key("favouriteColour")


@pytest.mark.parametrize("value,expected", [
    (5, 5),
    (-5000, -5000),
    (3.0, 3),
    (3.5, None),
    (True, None),
    ("100", None),
    (None, None),
])
def test_coerce_delta(value, expected):
    assert coerce_delta(value) == expected


def test_labels():
    assert get_assessment_label("powerOn") == "Powers on"
    assert get_assessment_label("someNewQuestion") == "Some New Question"
    assert format_answer_value(None) == "—"
    assert format_answer_value(["box", "noIssues"]) == "box, No issues"
    assert format_answer_value("fourToTwelveMonths") == "4–12 months"
