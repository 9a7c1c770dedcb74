"""
Valuation Tool Package

Instant trade-in valuations for used cameras, phones, laptops and tablets.
Resolves a device offer using Base Price → Pricing Rules → Assessment Answers
with a product → global → zero rules fallback.
"""

__version__ = "1.0.0"
