"""
Tests for the pricing rules store: resolution order, caching, validation
and persistence.
"""
import json
import sys
import os
import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from valuation_tool.engine import ZERO_PRICING_RULES
from valuation_tool.engine.errors import RulesValidationError
from valuation_tool.services.cache import TTLCache
from valuation_tool.services.rules_service import (
    PricingRulesStore,
    SOURCE_GLOBAL,
    SOURCE_PRODUCT,
    SOURCE_ZERO,
)


GLOBAL_RULES = {
    "questions": {"powerOn": {"yes": 0, "no": -5000}},
    "accessories": {"box": 1000},
}

PRODUCT_RULES = {
    "questions": {"powerOn": {"yes": 0, "no": -20000}},
    "accessories": {"box": 800},
}


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding='utf-8')


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    return PricingRulesStore(tmp_path / 'pricing_rules', cache_ttl=300, clock=clock)


class TestResolution:

    def test_zero_rules_when_nothing_configured(self, store):
        resolved = store.resolve("canon-eos-r6")
        assert resolved.source == SOURCE_ZERO
        assert resolved.rules is ZERO_PRICING_RULES

    def test_global_when_no_override(self, store):
        write_json(store.global_path, {"pricing_rules": GLOBAL_RULES})
        resolved = store.resolve("canon-eos-r6")

        assert resolved.source == SOURCE_GLOBAL
        assert resolved.rules.group_delta("accessories", "box") == 1000

    def test_product_override_wins(self, store):
        write_json(store.global_path, {"pricing_rules": GLOBAL_RULES})
        write_json(store.product_path("iphone-14"), {"pricing_rules": PRODUCT_RULES})

        resolved = store.resolve("iphone-14")
        assert resolved.source == SOURCE_PRODUCT
        assert resolved.rules.question_delta("powerOn", "no") == -20000
        assert store.resolve("iphone-13").source == SOURCE_GLOBAL

    def test_bare_rules_document_accepted(self, store):
        write_json(store.global_path, GLOBAL_RULES)
        assert store.get_global_rules().group_delta("accessories", "box") == 1000

    def test_corrupt_document_treated_as_missing(self, store):
        store.global_path.parent.mkdir(parents=True)
        store.global_path.write_text("{not json", encoding='utf-8')
        assert store.resolve("x").source == SOURCE_ZERO

    def test_non_object_document_treated_as_missing(self, store):
        write_json(store.global_path, ["not", "an", "object"])
        assert store.get_global_rules() is None

    def test_unsafe_product_id_never_reads_files(self, store, tmp_path):
        write_json(store.global_path, {"pricing_rules": GLOBAL_RULES})
        write_json(tmp_path / 'secret.json', {"pricing_rules": PRODUCT_RULES})

        assert store.get_product_rules("../../secret") is None
        assert store.resolve("../../secret").source == SOURCE_GLOBAL


class TestCaching:

    def test_cached_until_ttl_expires(self, store, clock):
        write_json(store.global_path, {"pricing_rules": GLOBAL_RULES})
        assert store.get_global_rules().group_delta("accessories", "box") == 1000

        # Edited behind the store's back: still served from cache
        write_json(store.global_path, {"pricing_rules": {"questions": {}, "accessories": {"box": 1}}})
        clock.advance(299)
        assert store.get_global_rules().group_delta("accessories", "box") == 1000

        clock.advance(2)
        assert store.get_global_rules().group_delta("accessories", "box") == 1

    def test_missing_document_is_cached(self, store, clock):
        assert store.get_product_rules("iphone-14") is None
        write_json(store.product_path("iphone-14"), {"pricing_rules": PRODUCT_RULES})
        assert store.get_product_rules("iphone-14") is None

        clock.advance(301)
        assert store.get_product_rules("iphone-14") is not None

    def test_save_invalidates_cache(self, store):
        store.save_global_rules(GLOBAL_RULES)
        assert store.resolve("iphone-14").source == SOURCE_GLOBAL

        store.save_product_rules("iphone-14", PRODUCT_RULES)
        assert store.resolve("iphone-14").source == SOURCE_PRODUCT

        assert store.delete_product_rules("iphone-14")
        assert store.resolve("iphone-14").source == SOURCE_GLOBAL


class TestTTLCache:

    def test_get_set_and_expiry(self, clock):
        cache = TTLCache(default_ttl=10, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2, ttl=100)

        assert cache.get("a") == 1
        clock.advance(10)
        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_delete_and_clear(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        assert cache.get("a") is None
        cache.clear()
        assert cache.get("b") is None


class TestPersistence:

    def test_save_writes_document_with_metadata(self, store):
        store.save_product_rules("iphone-14", PRODUCT_RULES, updated_by="ops@worthyten")

        document = json.loads(store.product_path("iphone-14").read_text(encoding='utf-8'))
        assert document["pricing_rules"] == PRODUCT_RULES
        assert document["product_id"] == "iphone-14"
        assert document["updated_by"] == "ops@worthyten"
        assert document["updated_at"]

        metadata = store.get_metadata("iphone-14")
        assert metadata["updated_by"] == "ops@worthyten"

    def test_no_temp_files_left_behind(self, store):
        store.save_global_rules(GLOBAL_RULES)
        assert [p.name for p in store.rules_dir.iterdir()] == ["global.json"]

    def test_list_product_overrides(self, store):
        assert store.list_product_overrides() == []
        store.save_product_rules("sony-a7-iv", PRODUCT_RULES)
        store.save_product_rules("iphone-14", PRODUCT_RULES)
        assert store.list_product_overrides() == ["iphone-14", "sony-a7-iv"]

    def test_delete_without_override(self, store):
        assert store.delete_product_rules("iphone-14") is False
        assert store.delete_product_rules("../global") is False

    def test_invalid_rules_not_saved(self, store):
        with pytest.raises(RulesValidationError) as exc_info:
            store.save_global_rules({"accessories": {"box": "lots"}})

        assert "questions is required" in exc_info.value.errors
        assert "accessories.box must be an integer" in exc_info.value.errors
        assert not store.global_path.exists()

    def test_invalid_product_id_not_saved(self, store):
        with pytest.raises(RulesValidationError):
            store.save_product_rules("../escape", PRODUCT_RULES)


class TestValidation:

    def test_valid_document(self, store):
        result = store.validate_rules(GLOBAL_RULES)
        assert result.valid
        assert result.errors == []

    def test_question_needs_both_answers(self, store):
        result = store.validate_rules({"questions": {"powerOn": {"no": -5000}}})
        assert not result.valid
        assert "questions.powerOn.yes is required" in result.errors

    def test_out_of_range_value(self, store):
        result = store.validate_rules({"questions": {}, "age": {"aboveTwelveMonths": -2_000_000}})
        assert not result.valid
        assert result.errors == ["age.aboveTwelveMonths must be between -1000000 and 1000000"]

    def test_boundary_value_accepted(self, store):
        assert store.validate_rules({"questions": {}, "accessories": {"box": 1_000_000}}).valid

    def test_unknown_names_are_warnings(self, store):
        result = store.validate_rules({
            "questions": {"canFly": {"yes": 0, "no": 0}},
            "colour": {"red": 100},
        })
        assert result.valid
        assert len(result.warnings) == 2

    def test_group_must_be_object(self, store):
        result = store.validate_rules({"questions": {}, "accessories": [1, 2]})
        assert "accessories must be an object" in result.errors

    @pytest.mark.parametrize("document", [None, [], "rules"])
    def test_document_must_be_object(self, store, document):
        assert not store.validate_rules(document).valid

    def test_bad_product_id(self, store):
        result = store.validate_rules(GLOBAL_RULES, product_id="has space")
        assert not result.valid
