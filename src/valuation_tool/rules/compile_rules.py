"""
Rule Compiler - Validates and compiles a pricing rules sheet from CSV to JSON.

Staff maintain adjustments in a flat spreadsheet, one row per rule:

    group,key,yes,no,value
    questions,powerOn,0,-5000,
    lensCondition,fungus,,,-5000
    accessories,box,,,1000

`questions` rows price both answers of a yes/no question; every other row
prices one label of an enumerated or additive group. The output is a
pricing rules document the rules store can serve.
"""
import csv
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..engine.categories import QUESTIONS_GROUP, parse_group, parse_question
from ..engine.models import PricingRules


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    """Parse optional integer (empty = None)."""
    if value is None or value.strip() == '':
        return None
    return int(value.strip())


def parse_optional_str(value: Optional[str]) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if value is None or value.strip() == '':
        return None
    return value.strip()


def validate_row(row: dict, line_num: int, max_value: int = 1_000_000) -> tuple[Optional[tuple], list[str]]:
    """
    Validate and parse one sheet row.
    
    Returns ((group, key, amount), errors) - amount is a (yes, no) pair for
    questions rows and an int otherwise; the tuple is None on failure.
    """
    errors = []
    
    group = parse_optional_str(row.get('group'))
    key = parse_optional_str(row.get('key'))
    if not group:
        return None, [f"Line {line_num}: group is required"]
    if not key:
        return None, [f"Line {line_num}: key is required"]
    
    if group == QUESTIONS_GROUP:
        try:
            yes = parse_optional_int(row.get('yes'))
            no = parse_optional_int(row.get('no'))
        except ValueError:
            return None, [f"Line {line_num}: yes/no must be integers"]
        if yes is None and no is None:
            return None, [f"Line {line_num}: questions rows need a yes or no amount"]
        amount = (yes or 0, no or 0)
        values = amount
    else:
        try:
            value = parse_optional_int(row.get('value'))
        except ValueError:
            return None, [f"Line {line_num}: value must be an integer"]
        if value is None:
            return None, [f"Line {line_num}: value is required for group '{group}'"]
        amount = value
        values = (value,)
    
    for v in values:
        if abs(v) > max_value:
            errors.append(f"Line {line_num}: {group}.{key} must be between -{max_value} and {max_value}")
    
    if errors:
        return None, errors
    return (group, key, amount), []


SHEET_AUTHOR = 'rules-sheet'


def _last_author(path: Path) -> Optional[str]:
    """updated_by of an existing output document, or None."""
    if not path.exists():
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    return document.get('updated_by') if isinstance(document, dict) else None


def compile_rules(
    rules_csv: Path,
    output_json: Path,
    verbose: bool = True,
    updated_by: str = SHEET_AUTHOR,
    force: bool = False,
) -> tuple[bool, Optional[PricingRules], list[str]]:
    """
    Compile a rules sheet from CSV to a pricing rules JSON document.
    
    An existing output document last saved by someone other than
    `updated_by` (an admin edit through the API or UI) is left alone
    unless `force` is set.
    
    Returns (success, rules, errors).
    """
    all_errors = []
    document: dict = {QUESTIONS_GROUP: {}}
    seen: set[tuple[str, str]] = set()
    unknown: set[str] = set()
    
    if not rules_csv.exists():
        all_errors.append(f"Rules sheet not found: {rules_csv}")
        return False, None, all_errors
    
    with open(rules_csv, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        
        for line_num, row in enumerate(reader, start=2):  # +2 for 1-indexed header row
            parsed, errors = validate_row(row, line_num)
            if errors:
                all_errors.extend(errors)
                continue
            
            group, key, amount = parsed
            if (group, key) in seen:
                all_errors.append(f"Line {line_num}: duplicate rule {group}.{key}")
                continue
            seen.add((group, key))
            
            if group == QUESTIONS_GROUP:
                yes, no = amount
                document[QUESTIONS_GROUP][key] = {"yes": yes, "no": no}
                if parse_question(key) is None:
                    unknown.add(f"{group}.{key}")
            else:
                document.setdefault(group, {})[key] = amount
                if parse_group(group) is None:
                    unknown.add(group)
    
    if all_errors:
        if verbose:
            print("Validation errors:")
            for err in all_errors:
                print(f"  ❌ {err}")
        return False, None, all_errors
    
    author = _last_author(output_json)
    if author is not None and author != updated_by and not force:
        all_errors.append(
            f"{output_json} was last saved by '{author}'; rerun with --force to overwrite"
        )
        if verbose:
            print(f"  ❌ {all_errors[-1]}")
        return False, None, all_errors
    
    rules = PricingRules.from_dict(document)
    
    output_data = {
        "pricing_rules": rules.to_dict(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
        "updated_by": updated_by,
        "source_file": str(rules_csv),
        "total_rules": len(seen),
    }
    
    output_json.parent.mkdir(parents=True, exist_ok=True)
    with open(output_json, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2)
    
    if verbose:
        print(f"✅ Compiled {len(seen)} rules")
        for name in sorted(unknown):
            print(f"   ⚠️ {name} is not read by the price calculator")
        print(f"   Output: {output_json}")
    
    return True, rules, []


def main(argv: Optional[list[str]] = None):
    """CLI entry point: compile_rules [--force] [sheet.csv] [output.json]"""
    from ..config.settings import get_settings
    
    args = sys.argv[1:] if argv is None else argv
    force = '--force' in args
    args = [a for a in args if a != '--force']
    settings = get_settings()
    rules_csv = Path(args[0]) if len(args) > 0 else settings.rules_sheet
    output_json = Path(args[1]) if len(args) > 1 else settings.rules_dir / 'global.json'
    
    print("Compiling pricing rules sheet...")
    success, rules, errors = compile_rules(rules_csv, output_json, force=force)
    
    if not success:
        print(f"\n❌ Compilation failed with {len(errors)} errors")
        sys.exit(1)


if __name__ == "__main__":
    main()
