"""Filters - FilterSpec compiler.

Translates the JSON filter mapping callers send into an ordered list of
store predicates that are combined with AND:

    {"status": "open"}                       -> [eq(status, "open")]
    {"age": {"$gte": 18, "$lte": 65}}        -> [gte(age, 18), lte(age, 65)]
    {"tag": {"$in": ["a", "b"]}}             -> [in(tag, ["a", "b"])]

A mapping value is an operator object unless it is a tagged literal such as
an encoded Date or Pointer. There is no OR, no negation beyond ``$ne`` and
no nesting of sub-specs.
"""

import logging
from collections.abc import Mapping
from typing import Any

from cloudcrud.core.exceptions import ValidationError
from cloudcrud.core.store.codec import decode_value, is_typed_value
from cloudcrud.core.store.types import Predicate, PredicateOp

logger = logging.getLogger(__name__)

# =============================================================================
# OPERATOR DEFINITIONS
# =============================================================================

#: Recognized operator keys, in the order their predicates are emitted.
OPERATORS: tuple[tuple[str, PredicateOp], ...] = (
    ("$gt", "gt"),
    ("$lt", "lt"),
    ("$gte", "gte"),
    ("$lte", "lte"),
    ("$ne", "ne"),
    ("$in", "in"),
)

KNOWN_OPERATOR_KEYS: frozenset[str] = frozenset(key for key, _ in OPERATORS)


def is_operator_object(value: Any) -> bool:
    """Return True if a filter value is an operator object rather than a literal."""
    return isinstance(value, Mapping) and not is_typed_value(value)


def _compile_operator_object(
    field: str, operators: Mapping[str, Any], *, strict: bool
) -> list[Predicate]:
    unknown = sorted(str(key) for key in operators if key not in KNOWN_OPERATOR_KEYS)
    if unknown:
        if strict:
            raise ValidationError(
                f"Unknown filter operator(s) for field '{field}': {', '.join(unknown)}",
                field=field,
            )
        logger.warning("Ignoring unknown filter operator(s) on '%s': %s", field, unknown)

    predicates: list[Predicate] = []
    for key, op in OPERATORS:
        if key not in operators:
            continue
        operand = decode_value(operators[key])
        if op == "in" and not isinstance(operand, list):
            raise ValidationError(
                f"'$in' operand for field '{field}' must be a list, "
                f"got {type(operators[key]).__name__}",
                field=field,
            )
        predicates.append(Predicate(field=field, op=op, value=operand))
    return predicates


# =============================================================================
# MAIN COMPILER FUNCTION
# =============================================================================


def compile_filters(filters: Mapping[str, Any] | None, *, strict: bool = False) -> list[Predicate]:
    """Compile a FilterSpec into a conjunction of predicates.

    Args:
        filters: Field name to literal (equality) or operator object. None and
            an empty mapping both compile to no predicates (match everything).
        strict: If True, unknown operator keys raise ValidationError instead
            of being ignored.

    Returns:
        Predicates in field order; within a field, in operator order
        ``$gt, $lt, $gte, $lte, $ne, $in``.

    Raises:
        ValidationError: If ``filters`` is not a mapping, a ``$in`` operand is
            not a list, a typed literal is malformed, or (strict mode) an
            operator key is unknown.

    Example:
        >>> compile_filters({"score": {"$gte": 10, "$lte": 20}, "done": False})
        [Predicate(field='score', op='gte', value=10),
         Predicate(field='score', op='lte', value=20),
         Predicate(field='done', op='eq', value=False)]
    """
    if filters is None:
        return []
    if not isinstance(filters, Mapping):
        raise ValidationError(
            f"filters must be an object, got {type(filters).__name__}", field="filters"
        )

    predicates: list[Predicate] = []
    for field, value in filters.items():
        if is_operator_object(value):
            predicates.extend(_compile_operator_object(field, value, strict=strict))
        else:
            predicates.append(Predicate(field=field, op="eq", value=decode_value(value)))
    logger.debug("Compiled %d filter field(s) into %d predicate(s)", len(filters), len(predicates))
    return predicates


__all__ = [
    "OPERATORS",
    "KNOWN_OPERATOR_KEYS",
    "is_operator_object",
    "compile_filters",
]
