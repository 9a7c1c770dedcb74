"""
Shared fixtures: an engine over a private copy of the shipped sample data,
so tests that save rules never touch the package data directory.
"""
import shutil
import sys
import os
import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from valuation_tool.config.settings import Settings, get_package_data_dir
from valuation_tool.engine.valuation_engine import ValuationEngine


@pytest.fixture
def data_dir(tmp_path):
    """Writable copy of the sample catalog and rules."""
    target = tmp_path / 'data'
    shutil.copytree(get_package_data_dir(), target)
    return target


@pytest.fixture
def settings(data_dir):
    return Settings.load(data_dir=data_dir)


@pytest.fixture
def engine(settings):
    return ValuationEngine(settings=settings)
