"""
Docshape Adapters - driver value conversion at the edge of the core.

Example:
    >>> from pymongo import MongoClient
    >>> from adapters import from_bson
    >>>
    >>> docs = [from_bson(d) for d in MongoClient().shop.orders.find().limit(100)]
"""
from .bson_adapter import from_bson, from_extended_json, regex_flags_to_str

__all__ = ['from_bson', 'from_extended_json', 'regex_flags_to_str']
