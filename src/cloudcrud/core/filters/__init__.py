"""Filters - JSON filter compilation for CloudCrud queries."""

from cloudcrud.core.filters.compiler import (
    KNOWN_OPERATOR_KEYS,
    OPERATORS,
    compile_filters,
    is_operator_object,
)

__all__ = [
    "KNOWN_OPERATOR_KEYS",
    "OPERATORS",
    "compile_filters",
    "is_operator_object",
]
