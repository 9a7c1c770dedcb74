"""
Generate golden test cases by running the current valuation engine on sample
assessments. This captures current behavior as a regression baseline.

Usage:
    python tests/generate_golden_cases.py
"""
import csv
import json
import os
import sys

# Add src to path so we can import valuation_tool
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from valuation_tool.engine.models import ValuationRequest
from valuation_tool.engine.valuation_engine import ValuationEngine

# (case_id, product_id, answers)
SAMPLE_ASSESSMENTS = [
    ("camera-good-with-accessories", "canon-eos-r6",
     {"powerOn": "yes", "bodyCondition": "good", "age": "fourToTwelveMonths", "accessories": ["box", "charger"]}),
    ("phone-dead-old", "iphone-14",
     {"powerOn": "no", "age": "aboveTwelveMonths"}),
    ("phone-no-issues-override", "iphone-14",
     {"functionalIssues": ["speakerIssue", "noIssues"], "displayCondition": "minorCrack"}),
    ("camera-water-fungus", "nikon-d7500",
     {"waterDamage": "yes", "lensCondition": "fungus", "functionalIssues": ["batteryIssue", "speakerIssue"]}),
    ("tablet-untouched", "ipad-air-5", {}),
    ("camera-lens-bonus", "sony-a7-iv",
     {"additionalLens": "yes", "displayCondition": ["good", "fair"], "errorCondition": "minorErrors"}),
    ("phone-battery-camera", "iphone-13",
     {"batteryHealthRange": "battery50to80", "cameraCondition": "frontCameraNotWorking", "accessories": ["box", "bill"]}),
]


def generate_golden_cases():
    engine = ValuationEngine()
    
    cases = []
    for case_id, product_id, answers in SAMPLE_ASSESSMENTS:
        result = engine.quote(ValuationRequest(product_id=product_id, answers=answers))
        cases.append({
            'case_id': case_id,
            'product_id': product_id,
            'answers': json.dumps(answers),
            'expected_price': result.final_price,
            'expected_source': result.rules_source,
        })
    
    output_path = os.path.join(os.path.dirname(__file__), 'golden_cases.csv')
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=list(cases[0].keys()))
        writer.writeheader()
        writer.writerows(cases)
    
    print(f"Generated {len(cases)} golden test cases")
    print(f"Output: {output_path}")


if __name__ == "__main__":
    generate_golden_cases()
