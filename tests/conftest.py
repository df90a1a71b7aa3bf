"""Pytest configuration and fixtures for docshape tests"""
import datetime as dt

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.bson_types import Int64Value, ObjectIdValue


@pytest.fixture
def user_documents():
    """Three user documents with an optional field and a PII field"""
    return [
        {
            "_id": ObjectIdValue("65a1b2c3d4e5f6a7b8c9d0e1"),
            "name": "Alice Smith",
            "email": "alice@example.com",
            "age": 31,
            "tags": ["admin", "beta"],
        },
        {
            "_id": ObjectIdValue("65a1b2c3d4e5f6a7b8c9d0e2"),
            "name": "Bob Jones",
            "email": "bob@example.org",
            "age": 45,
            "tags": [],
        },
        {
            "_id": ObjectIdValue("65a1b2c3d4e5f6a7b8c9d0e3"),
            "name": "Carol White",
            "email": "carol@example.net",
            "age": "unknown",
            "nickname": "cw",
        },
    ]


@pytest.fixture
def order_documents():
    """Orders with arrays of objects, nested objects and dates"""
    return [
        {
            "orderId": "ORD-001",
            "createdAt": dt.datetime(2024, 1, 15, 10, 30),
            "total": Int64Value(5000000000),
            "customer": {"tier": "gold", "address": {"city": "Seoul", "zip": "04524"}},
            "items": [
                {"sku": "A-1", "price": 10.5, "qty": 2},
                {"sku": "B-2", "price": 20, "qty": 1},
            ],
        },
        {
            "orderId": "ORD-002",
            "createdAt": dt.datetime(2024, 1, 16, 8, 0),
            "total": 42,
            "customer": {"tier": "silver"},
            "items": [
                {"sku": "C-3", "price": 7, "qty": 5},
            ],
        },
    ]


@pytest.fixture
def deep_document():
    """Document nested six levels deep"""
    return {"l1": {"l2": {"l3": {"l4": {"l5": {"l6": "bottom"}}}}}}
