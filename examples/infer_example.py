#!/usr/bin/env python3
"""
Infer Example - Observed Schema of a Document Sample

This example shows how to turn a sample of documents into a field-level
schema: types, presence, numeric stats, masked examples and PII hints,
plus the shape variants found in the sample.

Documents read with pymongo (or exported as Extended JSON) go through
adapters.from_extended_json() / adapters.from_bson() first.

Run from the docshape directory:
    python examples/infer_example.py
"""
import sys
import os
import json
import logging

# Add parent directory to path for local development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from adapters import from_extended_json
from common import RedactingFilter
from discover import VariantAnalyzer
from infer import infer_collection, schema_frame
from validation import load_options


SAMPLE = """
[
    {"_id": {"$oid": "65a1b2c3d4e5f6a7b8c9d0e1"}, "email": "alice@example.com",
     "age": 31, "profile": {"phone": "010-1234-5678", "city": "Seoul"},
     "orders": [{"sku": "A-1", "total": {"$numberLong": "5000000000"}}]},
    {"_id": {"$oid": "65a1b2c3d4e5f6a7b8c9d0e2"}, "email": "bob@example.org",
     "age": 45, "profile": {"city": "Busan"}, "orders": []},
    {"_id": {"$oid": "65a1b2c3d4e5f6a7b8c9d0e3"}, "email": "carol@example.net",
     "age": "unknown", "kakao": {"id": "99887766"}}
]
"""


def print_section(title):
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f" {title}")
    print("=" * 70)


def main():
    handler = logging.StreamHandler()
    handler.addFilter(RedactingFilter())
    logging.basicConfig(level=logging.INFO, handlers=[handler])

    documents = from_extended_json(SAMPLE)

    # DOCSHAPE_* variables (or a .env file) can override any of these
    options = load_options(pii_patterns=["kakao.*"])

    schema = infer_collection("users", documents, options)

    print_section("FIELDS")
    df = schema_frame(schema.fields)
    print(df[['path', 'types', 'present_ratio', 'optional', 'hints', 'min', 'max']].to_string(index=False))

    print_section("MASKED EXAMPLES")
    for f in schema.pii_fields:
        examples = ", ".join(e.value for e in f.examples)
        print(f"{f.path:<20} {examples}")

    print_section("VARIANTS")
    print(VariantAnalyzer().describe(documents))

    print_section("WARNINGS")
    for warning in schema.warnings:
        print(f"  - {warning}")

    # Full JSON-ready output
    # print(json.dumps(schema.to_dict(), indent=2))
    print(f"\nSerialized size: {len(json.dumps(schema.to_dict()))} bytes")


if __name__ == "__main__":
    main()
