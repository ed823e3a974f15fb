"""Store - Types and Data Transfer Objects.

Defines the values exchanged between the core layers and the document store:
- FieldValue: The tagged variant a record field may hold.
- FieldType / FieldDescriptor / ClassSchema: Inferred schema of a class.
- Predicate: One compiled filter condition.
- StoredRecord: A persisted record as returned by the store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, Literal, TypeAlias

# =============================================================================
# FIELD VALUES
# =============================================================================


@dataclass(frozen=True, slots=True)
class Pointer:
    """Reference to another record.

    Attributes:
        class_name: Class of the referenced record.
        object_id: Identifier of the referenced record.
    """

    class_name: str
    object_id: str


#: Value a record field may hold. Dates are ``datetime`` instances,
#: references are ``Pointer`` instances, lists and mappings nest freely.
FieldValue: TypeAlias = (
    str
    | int
    | float
    | bool
    | None
    | datetime
    | Pointer
    | list["FieldValue"]
    | dict[str, "FieldValue"]
)

#: Field name to value mapping of a record (user fields only).
Fields: TypeAlias = dict[str, FieldValue]

#: Access control list: principal ("*" for everyone) to permissions.
AccessPolicy: TypeAlias = dict[str, dict[str, bool]]


def public_access() -> AccessPolicy:
    """Return a new access policy granting read and write to everyone."""
    return {"*": {"read": True, "write": True}}


# =============================================================================
# SCHEMA
# =============================================================================


class FieldType(StrEnum):
    """Type descriptor inferred for a class field."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    POINTER = "Pointer"
    ARRAY = "Array"
    OBJECT = "Object"
    ACL = "ACL"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Schema entry for one field.

    Attributes:
        type: Inferred field type.
        target_class: Referenced class, only for Pointer fields.
    """

    type: FieldType
    target_class: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Convert to the wire representation ``{"type": ..., "targetClass": ...}``."""
        result = {"type": self.type.value}
        if self.target_class is not None:
            result["targetClass"] = self.target_class
        return result


#: Fields every class owns regardless of what is written to it.
BUILTIN_FIELDS: dict[str, FieldDescriptor] = {
    "objectId": FieldDescriptor(FieldType.STRING),
    "createdAt": FieldDescriptor(FieldType.DATE),
    "updatedAt": FieldDescriptor(FieldType.DATE),
    "ACL": FieldDescriptor(FieldType.ACL),
}

#: Field names callers may not set through record data.
RESERVED_FIELDS: frozenset[str] = frozenset(BUILTIN_FIELDS)


@dataclass(slots=True)
class ClassSchema:
    """Definition of a class (table) held by the store.

    Attributes:
        class_name: Unique class name.
        fields: Field name to descriptor, built-in fields included.
    """

    class_name: str
    fields: dict[str, FieldDescriptor] = field(default_factory=lambda: dict(BUILTIN_FIELDS))

    def field_names(self) -> list[str]:
        """Return the field names in declaration order."""
        return list(self.fields)

    def fields_to_dict(self) -> dict[str, dict[str, str]]:
        """Return the fields in wire representation."""
        return {name: descriptor.to_dict() for name, descriptor in self.fields.items()}


def infer_field_type(value: FieldValue) -> FieldDescriptor | None:
    """Infer the schema descriptor for a field value.

    Args:
        value: A decoded field value.

    Returns:
        The descriptor, or None for ``None`` values (no type information).

    Raises:
        TypeError: If the value is not a supported field value.
    """
    if value is None:
        return None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return FieldDescriptor(FieldType.BOOLEAN)
    if isinstance(value, (int, float)):
        return FieldDescriptor(FieldType.NUMBER)
    if isinstance(value, str):
        return FieldDescriptor(FieldType.STRING)
    if isinstance(value, datetime):
        return FieldDescriptor(FieldType.DATE)
    if isinstance(value, Pointer):
        return FieldDescriptor(FieldType.POINTER, target_class=value.class_name)
    if isinstance(value, list):
        return FieldDescriptor(FieldType.ARRAY)
    if isinstance(value, dict):
        return FieldDescriptor(FieldType.OBJECT)
    raise TypeError(f"Unsupported field value type: {type(value).__name__}")


# =============================================================================
# PREDICATES
# =============================================================================

#: Comparison performed by a predicate.
PredicateOp: TypeAlias = Literal["eq", "gt", "lt", "gte", "lte", "ne", "in"]


@dataclass(frozen=True, slots=True)
class Predicate:
    """One condition of a conjunctive query: ``field <op> value``.

    Attributes:
        field: Field name the condition applies to.
        op: Comparison operator.
        value: Decoded operand (a list for ``in``).
    """

    field: str
    op: PredicateOp
    value: Any


# =============================================================================
# RECORDS
# =============================================================================


@dataclass(slots=True)
class StoredRecord:
    """A record persisted in a class.

    Attributes:
        class_name: Owning class.
        object_id: Immutable store-assigned identifier.
        fields: User field values.
        acl: Access policy.
        created_at: Creation timestamp (UTC).
        updated_at: Last write timestamp (UTC).
    """

    class_name: str
    object_id: str
    fields: Fields
    acl: AccessPolicy
    created_at: datetime
    updated_at: datetime

    def materialize(self) -> dict[str, Any]:
        """Return every field, built-ins included, as decoded values."""
        return {
            **self.fields,
            "objectId": self.object_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "ACL": self.acl,
        }


__all__ = [
    "Pointer",
    "FieldValue",
    "Fields",
    "AccessPolicy",
    "public_access",
    "FieldType",
    "FieldDescriptor",
    "BUILTIN_FIELDS",
    "RESERVED_FIELDS",
    "ClassSchema",
    "infer_field_type",
    "PredicateOp",
    "Predicate",
    "StoredRecord",
]
