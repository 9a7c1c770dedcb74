#!/usr/bin/env python
"""
Build pipeline - compiles the pricing rules sheet and runs golden tests.

Usage:
    python scripts/build_all.py [--skip-tests] [--force]

--force overwrites global rules last saved from the API or UI.
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from valuation_tool.config.settings import get_settings
from valuation_tool.engine.catalog import ProductCatalog
from valuation_tool.rules.compile_rules import compile_rules


def main():
    skip_tests = '--skip-tests' in sys.argv[1:]
    force = '--force' in sys.argv[1:]
    settings = get_settings()
    
    print("=" * 60)
    print("VALUATION TOOL BUILD PIPELINE")
    print("=" * 60)
    print()
    
    # Compile rules sheet
    print("[1/3] Compiling pricing rules sheet...")
    success, rules, errors = compile_rules(settings.rules_sheet, settings.rules_dir / 'global.json', force=force)
    
    if not success:
        print("\n❌ BUILD FAILED")
        for error in errors:
            print(f"  ERROR: {error}")
        sys.exit(1)
    
    print()
    print("[2/3] Checking product catalog...")
    catalog = ProductCatalog(settings.products_csv)
    for warning in catalog.warnings:
        print(f"  ⚠️ {warning}")
    
    if not skip_tests:
        print()
        print("[3/3] Running golden tests...")
        
        # Run tests
        import subprocess
        test_result = subprocess.run(
            [sys.executable, '-m', 'pytest', 'tests/test_golden_cases.py', '-v', '--tb=short'],
            cwd=Path(__file__).parent.parent
        )
        
        if test_result.returncode != 0:
            print("\n❌ TESTS FAILED")
            sys.exit(1)
    
    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Products: {len(catalog)}")
    print(f"  Question rules: {len(rules.questions)}")
    for group, table in rules.groups.items():
        print(f"  {group}: {len(table)} conditions")


if __name__ == "__main__":
    main()
