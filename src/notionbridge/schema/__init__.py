"""Database schema handling: normalization, caching, builders, checks."""

from notionbridge.schema.builder import (
    SimpleFieldSpec,
    build_properties_from_simple_spec,
    build_record_validator,
)
from notionbridge.schema.cache import CacheStats, SchemaCache
from notionbridge.schema.normalizer import normalize_database
from notionbridge.schema.validation import validate_list_request

__all__ = [
    "CacheStats",
    "SchemaCache",
    "SimpleFieldSpec",
    "build_properties_from_simple_spec",
    "build_record_validator",
    "normalize_database",
    "validate_list_request",
]
