"""
Rules Service - storage and resolution of pricing rules.

Rules live as JSON documents on disk:
    <rules_dir>/global.json                 global default
    <rules_dir>/products/<product_id>.json  per-product override

Each document is {"pricing_rules": {...}, "updated_at": ..., "updated_by": ...};
a bare rules document is accepted too. Lookups resolve
product override → global default → all-zero rules.
"""
import json
import logging
import os
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from ..engine.categories import QUESTIONS_GROUP, YES, NO, parse_group, parse_question
from ..engine.errors import RulesValidationError
from ..engine.models import PricingRules, coerce_delta
from ..engine.zero_rules import ZERO_PRICING_RULES
from .cache import TTLCache

logger = logging.getLogger(__name__)

SOURCE_PRODUCT = "product"
SOURCE_GLOBAL = "global"
SOURCE_ZERO = "zero"

PRODUCT_ID_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_.\-]{0,99}$')

_MISSING = object()


@dataclass
class ValidationResult:
    """Result of rules validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    
    def add_error(self, error: str):
        self.errors.append(error)
        self.valid = False


@dataclass
class ResolvedRules:
    """Rules chosen for a product and where they came from."""
    rules: PricingRules
    source: str
    product_id: Optional[str] = None


class PricingRulesStore:
    """File-backed pricing rules with a TTL read cache."""
    
    GLOBAL_DOCUMENT = 'global.json'
    PRODUCTS_DIR = 'products'
    
    def __init__(
        self,
        rules_dir: Path,
        cache_ttl: float = 300.0,
        max_rule_value: int = 1_000_000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rules_dir = rules_dir
        self.max_rule_value = max_rule_value
        self.cache = TTLCache(default_ttl=cache_ttl, clock=clock)
    
    # ------------------------------------------------------------------
    # Paths and raw documents
    # ------------------------------------------------------------------
    
    @property
    def global_path(self) -> Path:
        return self.rules_dir / self.GLOBAL_DOCUMENT
    
    def product_path(self, product_id: str) -> Path:
        return self.rules_dir / self.PRODUCTS_DIR / f"{product_id}.json"
    
    @staticmethod
    def is_valid_product_id(product_id: Any) -> bool:
        return isinstance(product_id, str) and bool(PRODUCT_ID_PATTERN.match(product_id))
    
    def _read_document(self, path: Path) -> Optional[dict]:
        """Read a stored document; unreadable files are logged and treated as missing."""
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read pricing rules from %s: %s", path, e)
            return None
        if not isinstance(data, dict):
            logger.error("Pricing rules document %s is not an object", path)
            return None
        return data
    
    @staticmethod
    def _rules_payload(document: dict) -> Any:
        return document['pricing_rules'] if 'pricing_rules' in document else document
    
    def _load_rules(self, cache_key: str, path: Path) -> Optional[PricingRules]:
        cached = self.cache.get(cache_key)
        if cached is not None:
            return None if cached is _MISSING else cached
        
        document = self._read_document(path)
        rules = PricingRules.from_dict(self._rules_payload(document)) if document is not None else None
        self.cache.set(cache_key, _MISSING if rules is None else rules)
        return rules
    
    def _write_document(self, path: Path, rules: PricingRules, updated_by: str, extra: Optional[dict] = None):
        document = {
            "pricing_rules": rules.to_dict(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
            "updated_by": updated_by,
        }
        if extra:
            document.update(extra)
        
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix('.json.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2)
        os.replace(tmp_path, path)
    
    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    
    def get_global_rules(self) -> Optional[PricingRules]:
        """Global default rules, or None when not configured."""
        return self._load_rules('global', self.global_path)
    
    def get_product_rules(self, product_id: str) -> Optional[PricingRules]:
        """Product override, or None when the product has none."""
        if not self.is_valid_product_id(product_id):
            return None
        return self._load_rules(f'product:{product_id}', self.product_path(product_id))
    
    def resolve(self, product_id: Optional[str] = None) -> ResolvedRules:
        """Resolve rules for a product: override → global → zero."""
        if product_id:
            rules = self.get_product_rules(product_id)
            if rules is not None:
                return ResolvedRules(rules=rules, source=SOURCE_PRODUCT, product_id=product_id)
        
        rules = self.get_global_rules()
        if rules is not None:
            return ResolvedRules(rules=rules, source=SOURCE_GLOBAL, product_id=product_id)
        
        return ResolvedRules(rules=ZERO_PRICING_RULES, source=SOURCE_ZERO, product_id=product_id)
    
    def get_metadata(self, product_id: Optional[str] = None) -> Optional[dict]:
        """updated_at / updated_by of a stored document."""
        if product_id is None:
            path = self.global_path
        elif self.is_valid_product_id(product_id):
            path = self.product_path(product_id)
        else:
            return None
        document = self._read_document(path)
        if document is None:
            return None
        return {
            "updated_at": document.get("updated_at"),
            "updated_by": document.get("updated_by"),
        }
    
    def list_product_overrides(self) -> list[str]:
        """Product ids that carry their own rules."""
        products_dir = self.rules_dir / self.PRODUCTS_DIR
        if not products_dir.exists():
            return []
        return sorted(p.stem for p in products_dir.glob('*.json'))
    
    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    
    def _checked_rules(self, rules: Union[PricingRules, Mapping[str, Any]], product_id: Optional[str] = None) -> PricingRules:
        data = rules.to_dict() if isinstance(rules, PricingRules) else rules
        result = self.validate_rules(data, product_id=product_id)
        if not result.valid:
            raise RulesValidationError(result.errors, result.warnings)
        for warning in result.warnings:
            logger.info("Pricing rules warning: %s", warning)
        return rules if isinstance(rules, PricingRules) else PricingRules.from_dict(data)
    
    def save_global_rules(self, rules: Union[PricingRules, Mapping[str, Any]], updated_by: str = 'admin') -> PricingRules:
        """Validate and store the global default rules."""
        checked = self._checked_rules(rules)
        self._write_document(self.global_path, checked, updated_by)
        self.invalidate()
        logger.info("Global pricing rules saved by %s", updated_by)
        return checked
    
    def save_product_rules(
        self,
        product_id: str,
        rules: Union[PricingRules, Mapping[str, Any]],
        updated_by: str = 'admin',
    ) -> PricingRules:
        """Validate and store a product override."""
        checked = self._checked_rules(rules, product_id=product_id)
        self._write_document(self.product_path(product_id), checked, updated_by, {"product_id": product_id})
        self.invalidate(product_id)
        logger.info("Pricing rules saved for product %s by %s", product_id, updated_by)
        return checked
    
    def delete_product_rules(self, product_id: str) -> bool:
        """Remove a product override; returns False when there was none."""
        if not self.is_valid_product_id(product_id):
            return False
        path = self.product_path(product_id)
        if not path.exists():
            return False
        path.unlink()
        self.invalidate(product_id)
        logger.info("Pricing rules override removed for product %s", product_id)
        return True
    
    def invalidate(self, product_id: Optional[str] = None):
        """Drop cached documents (one product, or everything)."""
        if product_id is None:
            self.cache.clear()
        else:
            self.cache.delete(f'product:{product_id}')
    
    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    
    def _check_value(self, result: ValidationResult, where: str, value: Any):
        delta = coerce_delta(value)
        if delta is None:
            result.add_error(f"{where} must be an integer")
        elif abs(delta) > self.max_rule_value:
            result.add_error(f"{where} must be between -{self.max_rule_value} and {self.max_rule_value}")
    
    def validate_rules(self, data: Any, product_id: Optional[str] = None) -> ValidationResult:
        """Validate a rules document before saving."""
        result = ValidationResult(valid=True)
        
        if product_id is not None and not self.is_valid_product_id(product_id):
            result.add_error(
                "productId must be 1-100 characters of letters, digits, '.', '_' or '-'"
            )
        
        if not isinstance(data, Mapping):
            result.add_error("Pricing rules must be an object")
            return result
        
        questions = data.get(QUESTIONS_GROUP)
        if questions is None:
            result.add_error("questions is required")
        elif not isinstance(questions, Mapping):
            result.add_error("questions must be an object")
        else:
            for question, pair in questions.items():
                if not isinstance(pair, Mapping):
                    result.add_error(f"questions.{question} must be an object with yes and no")
                    continue
                for answer in (YES, NO):
                    if answer not in pair:
                        result.add_error(f"questions.{question}.{answer} is required")
                    else:
                        self._check_value(result, f"questions.{question}.{answer}", pair[answer])
                if parse_question(str(question)) is None:
                    result.warnings.append(f"Question '{question}' is not asked by any assessment")
        
        for group_name, table in data.items():
            if group_name == QUESTIONS_GROUP:
                continue
            if not isinstance(table, Mapping):
                result.add_error(f"{group_name} must be an object")
                continue
            for key, value in table.items():
                self._check_value(result, f"{group_name}.{key}", value)
            if parse_group(str(group_name)) is None:
                result.warnings.append(f"Group '{group_name}' is not used by the price calculator")
        
        return result
