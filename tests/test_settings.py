"""
Tests for settings loading and logging setup.
"""
import logging

from valuation_tool.config.logging import init_logging
from valuation_tool.config.settings import Settings, get_package_data_dir


def test_defaults_point_at_packaged_data(monkeypatch):
    monkeypatch.delenv('VALUATION_DATA_DIR', raising=False)
    monkeypatch.delenv('VALUATION_RULES_CACHE_TTL', raising=False)
    settings = Settings.load()

    assert settings.data_dir == get_package_data_dir()
    assert settings.products_csv.name == 'products.csv'
    assert settings.rules_dir == settings.data_dir / 'pricing_rules'
    assert settings.rules_cache_ttl == 300.0
    assert settings.max_rule_value == 1_000_000


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv('VALUATION_DATA_DIR', str(tmp_path))
    monkeypatch.setenv('VALUATION_RULES_CACHE_TTL', '15')
    settings = Settings.load()

    assert settings.data_dir == tmp_path
    assert settings.rules_sheet == tmp_path / 'pricing_rules.csv'
    assert settings.rules_cache_ttl == 15.0


def test_invalid_ttl_keeps_default(monkeypatch):
    monkeypatch.setenv('VALUATION_RULES_CACHE_TTL', 'soon')
    assert Settings.load().rules_cache_ttl == 300.0


def test_explicit_data_dir_wins(monkeypatch, tmp_path):
    monkeypatch.setenv('VALUATION_DATA_DIR', '/somewhere/else')
    assert Settings.load(data_dir=tmp_path).data_dir == tmp_path


def test_init_logging_levels(monkeypatch):
    monkeypatch.setenv('LOG_APP_LEVEL', 'debug')
    monkeypatch.setenv('LOG_THIRD_PARTY_LEVEL', 'nonsense')
    init_logging(root_level="INFO")

    app_logger = logging.getLogger('valuation_tool')
    assert app_logger.level == logging.DEBUG
    assert app_logger.propagate is False
    assert logging.getLogger('streamlit').level == logging.WARNING
