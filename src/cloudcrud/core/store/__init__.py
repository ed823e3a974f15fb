"""Store - Document store capability for CloudCrud.

CloudCrud delegates all durable state to an external document store reached
through the async ``DocumentStore`` protocol. This package defines that
contract, the value types exchanged with it, the JSON wire codec and a
bundled in-memory backend.

Main Components
---------------
- **DocumentStore**: Async protocol every backend implements.
- **InMemoryDocumentStore**: Reference backend for tests and local runs.
- **Predicate**: One compiled filter condition.
- **StoredRecord / ClassSchema**: Records and class definitions.
- **codec**: Date and Pointer encoding on the wire.
"""

from cloudcrud.core.store.codec import (
    decode_fields,
    decode_value,
    encode_record,
    encode_value,
    format_timestamp,
    is_typed_value,
)
from cloudcrud.core.store.factory import create_document_store
from cloudcrud.core.store.memory import InMemoryDocumentStore
from cloudcrud.core.store.protocol import DocumentStore
from cloudcrud.core.store.types import (
    BUILTIN_FIELDS,
    RESERVED_FIELDS,
    AccessPolicy,
    ClassSchema,
    FieldDescriptor,
    Fields,
    FieldType,
    FieldValue,
    Pointer,
    Predicate,
    PredicateOp,
    StoredRecord,
    infer_field_type,
    public_access,
)

__all__ = [
    # Protocol and backends
    "DocumentStore",
    "InMemoryDocumentStore",
    "create_document_store",
    # Types
    "AccessPolicy",
    "BUILTIN_FIELDS",
    "ClassSchema",
    "FieldDescriptor",
    "FieldType",
    "FieldValue",
    "Fields",
    "Pointer",
    "Predicate",
    "PredicateOp",
    "RESERVED_FIELDS",
    "StoredRecord",
    "infer_field_type",
    "public_access",
    # Codec
    "decode_fields",
    "decode_value",
    "encode_record",
    "encode_value",
    "format_timestamp",
    "is_typed_value",
]
