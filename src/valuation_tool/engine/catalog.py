"""
Product Catalog - device models and their internal base prices.

Backed by a CSV export of the product collection:
product_id, category, brand, model, base_price, display_price, power_on_percentage
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .models import Product

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = [
    'product_id', 'category', 'brand', 'model',
    'base_price', 'display_price', 'power_on_percentage',
]


class ProductCatalog:
    """
    In-memory product table indexed by product_id.
    
    Rows without a base price are dropped; duplicate ids keep the first row.
    """
    
    def __init__(self, products_csv: Path):
        self.products_csv = products_csv
        self.warnings: list[str] = []
        
        if not products_csv.exists():
            raise FileNotFoundError(f"Product catalog not found at {products_csv}.")
        
        df = pd.read_csv(products_csv, dtype=str)
        for col in CATALOG_COLUMNS:
            if col not in df.columns:
                df[col] = ''
        
        for col in ('product_id', 'category', 'brand', 'model'):
            df[col] = df[col].fillna('').astype(str).str.strip()
        
        df['base_price'] = pd.to_numeric(df['base_price'], errors='coerce')
        df['display_price'] = pd.to_numeric(df['display_price'], errors='coerce')
        df['power_on_percentage'] = pd.to_numeric(df['power_on_percentage'], errors='coerce')
        
        missing = df[(df['product_id'] == '') | df['base_price'].isna()]
        if not missing.empty:
            msg = f"Dropped {len(missing)} catalog rows without product_id or base_price"
            self.warnings.append(msg)
            logger.warning(msg)
        df = df[(df['product_id'] != '') & df['base_price'].notna()]
        
        duplicates = df['product_id'].duplicated()
        if duplicates.any():
            msg = f"Dropped {int(duplicates.sum())} duplicate product ids"
            self.warnings.append(msg)
            logger.warning(msg)
        df = df[~duplicates]
        
        self.df = df.set_index('product_id', drop=False)
    
    def __len__(self) -> int:
        return len(self.df)
    
    def __contains__(self, product_id: str) -> bool:
        return str(product_id) in self.df.index
    
    def _to_product(self, row) -> Product:
        display = row['display_price']
        pct = row['power_on_percentage']
        return Product(
            product_id=str(row['product_id']),
            category=row['category'],
            brand=row['brand'],
            model=row['model'],
            base_price=int(row['base_price']),
            display_price=int(display) if pd.notna(display) else None,
            power_on_percentage=float(pct) if pd.notna(pct) else None,
        )
    
    def get(self, product_id: str) -> Optional[Product]:
        """Get a product by id, or None."""
        product_id = str(product_id).strip()
        if product_id not in self.df.index:
            return None
        return self._to_product(self.df.loc[product_id])
    
    def find(self, brand: str, model: str) -> Optional[Product]:
        """Find a product by brand and model name (case-insensitive)."""
        brand = str(brand).strip().lower()
        model = str(model).strip().lower()
        match = self.df[
            (self.df['brand'].str.lower() == brand) &
            (self.df['model'].str.lower() == model)
        ]
        if match.empty:
            return None
        return self._to_product(match.iloc[0])
    
    def search(self, text: Optional[str] = None, category: Optional[str] = None, brand: Optional[str] = None) -> list[Product]:
        """Filter products by free text, category and brand."""
        df = self.df
        if category:
            df = df[df['category'].str.lower() == category.strip().lower()]
        if brand:
            df = df[df['brand'].str.lower() == brand.strip().lower()]
        if text:
            mask = (
                df['product_id'].str.contains(text, case=False, na=False, regex=False) |
                df['model'].str.contains(text, case=False, na=False, regex=False) |
                df['brand'].str.contains(text, case=False, na=False, regex=False)
            )
            df = df[mask]
        df = df.sort_values(['brand', 'model'])
        return [self._to_product(row) for _, row in df.iterrows()]
    
    def categories(self) -> list[str]:
        return sorted(c for c in self.df['category'].unique() if c)
    
    def brands(self, category: Optional[str] = None) -> list[str]:
        df = self.df
        if category:
            df = df[df['category'].str.lower() == category.strip().lower()]
        return sorted(b for b in df['brand'].unique() if b)
