"""
Centralized settings and path configuration for the valuation tool.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_package_data_dir() -> Path:
    """Sample catalog and rules shipped inside the package."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""
    
    # Project paths
    project_root: Path
    data_dir: Path
    
    # Input files
    products_csv: Path
    rules_sheet: Path
    
    # Pricing rules documents (global.json + products/<id>.json)
    rules_dir: Path
    
    # Seconds a resolved rules document may be served from cache
    rules_cache_ttl: float = 300.0
    
    # Absolute bound for any single adjustment (INR)
    max_rule_value: int = 1_000_000
    
    @classmethod
    def load(cls, project_root: Optional[Path] = None, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        
        env_data_dir = os.getenv('VALUATION_DATA_DIR')
        data = data_dir or (Path(env_data_dir) if env_data_dir else get_package_data_dir())
        
        ttl = 300.0
        env_ttl = os.getenv('VALUATION_RULES_CACHE_TTL')
        if env_ttl:
            try:
                ttl = float(env_ttl)
            except ValueError:
                logger.warning("Ignoring invalid VALUATION_RULES_CACHE_TTL=%r", env_ttl)
        
        return cls(
            project_root=root,
            data_dir=data,
            products_csv=data / 'products.csv',
            rules_sheet=data / 'pricing_rules.csv',
            rules_dir=data / 'pricing_rules',
            rules_cache_ttl=ttl,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
