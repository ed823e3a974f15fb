"""Store - In-memory document store.

Reference ``DocumentStore`` backend for tests and local execution. It keeps
every class in process memory and enforces the store-side rules CloudCrud
relies on: name validation, schema inference and type checking, predicate
evaluation, pagination and referential checks on purge.
"""

import logging
import re
import uuid
from collections.abc import Collection
from copy import deepcopy
from datetime import datetime
from typing import Any

from cloudcrud.core.exceptions import NotFoundError, StoreError
from cloudcrud.core.store.codec import utc_now
from cloudcrud.core.store.types import (
    AccessPolicy,
    ClassSchema,
    FieldDescriptor,
    Fields,
    FieldType,
    Predicate,
    StoredRecord,
    infer_field_type,
)

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
OBJECT_ID_LENGTH = 10

_MISSING = object()


def _comparable(left: Any, right: Any) -> bool:
    # bool is an int subclass but never orders against numbers here
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool)
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return True
    if isinstance(left, datetime) and isinstance(right, datetime):
        return True
    return type(left) is type(right) and isinstance(left, str)


def _equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _matches_value(value: Any, operand: Any) -> bool:
    # an Array field matches a scalar operand when one of its elements does
    if _equals(value, operand):
        return True
    if isinstance(value, list) and not isinstance(operand, list):
        return any(_equals(item, operand) for item in value)
    return False


def matches(
    record: StoredRecord,
    predicate: Predicate,
    schema_fields: Collection[str] = (),
) -> bool:
    """Evaluate one predicate against a record.

    A field the class schema does not know never matches. A known field the
    record does not hold satisfies only ``ne``.

    Args:
        record: Record to test.
        predicate: Condition to evaluate.
        schema_fields: Field names of the record's class.
    """
    value = record.materialize().get(predicate.field, _MISSING)
    if value is _MISSING:
        return predicate.op == "ne" and predicate.field in schema_fields

    op = predicate.op
    operand = predicate.value
    if op == "eq":
        return _matches_value(value, operand)
    if op == "ne":
        return not _matches_value(value, operand)
    if op == "in":
        return isinstance(operand, list) and any(_matches_value(value, item) for item in operand)

    if not _comparable(value, operand):
        return False
    if op == "gt":
        return value > operand
    if op == "lt":
        return value < operand
    if op == "gte":
        return value >= operand
    if op == "lte":
        return value <= operand
    raise StoreError(f"Unsupported predicate operator: {op!r}")


class InMemoryDocumentStore:
    """In-memory document store for tests and local execution.

    Records are kept in insertion order, which is the default ordering of
    query results. Object ids are never reused within a class, even after
    the record is deleted.
    """

    def __init__(self, name: str = "memory") -> None:
        self._name = name
        self._schemas: dict[str, ClassSchema] = {}
        self._records: dict[str, dict[str, StoredRecord]] = {}
        self._issued_ids: dict[str, set[str]] = {}
        logger.debug("InMemoryDocumentStore '%s' created.", name)

    @property
    def name(self) -> str:
        return self._name

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _check_class_name(self, class_name: str) -> None:
        if not isinstance(class_name, str) or not NAME_PATTERN.match(class_name):
            raise StoreError(
                f"Invalid classname: {class_name!r}, classnames can only have "
                "alphanumeric characters and _, and must start with an alpha character"
            )

    def _new_object_id(self, class_name: str) -> str:
        issued = self._issued_ids.setdefault(class_name, set())
        while True:
            object_id = uuid.uuid4().hex[:OBJECT_ID_LENGTH]
            if object_id not in issued:
                issued.add(object_id)
                return object_id

    def _merge_schema(
        self,
        class_name: str,
        current: dict[str, FieldDescriptor],
        incoming: dict[str, FieldDescriptor],
    ) -> dict[str, FieldDescriptor]:
        """Return ``current`` extended with ``incoming``, rejecting conflicts."""
        merged = dict(current)
        for field_name, descriptor in incoming.items():
            if not NAME_PATTERN.match(field_name):
                raise StoreError(f"Invalid field name: {field_name}")
            existing = merged.get(field_name)
            if existing is None:
                merged[field_name] = descriptor
            elif existing != descriptor:
                expected = existing.target_class or existing.type.value
                got = descriptor.target_class or descriptor.type.value
                raise StoreError(
                    f"schema mismatch for {class_name}.{field_name}; "
                    f"expected {expected} but got {got}"
                )
        return merged

    def _infer_schema(self, fields: Fields) -> dict[str, FieldDescriptor]:
        inferred: dict[str, FieldDescriptor] = {}
        for field_name, value in fields.items():
            try:
                descriptor = infer_field_type(value)
            except TypeError as e:
                raise StoreError(str(e), cause=e) from e
            if descriptor is not None:
                inferred[field_name] = descriptor
        return inferred

    def _prepare_write(
        self, class_name: str, fields: Fields, schema: dict[str, FieldDescriptor]
    ) -> dict[str, FieldDescriptor]:
        self._check_class_name(class_name)
        return self._merge_schema(class_name, schema, self._infer_schema(fields))

    def _current_schema(self, class_name: str) -> dict[str, FieldDescriptor]:
        schema = self._schemas.get(class_name)
        return dict(schema.fields) if schema else ClassSchema(class_name).fields

    def _commit_schema(self, class_name: str, fields: dict[str, FieldDescriptor]) -> None:
        if class_name not in self._schemas:
            logger.debug("Class '%s' materialized in store '%s'.", class_name, self._name)
            self._records[class_name] = {}
        self._schemas[class_name] = ClassSchema(class_name=class_name, fields=fields)

    def _select(self, class_name: str, predicates: list[Predicate]) -> list[StoredRecord]:
        records = self._records.get(class_name, {}).values()
        schema = self._schemas.get(class_name)
        known = schema.fields if schema else {}
        return [
            deepcopy(record)
            for record in records
            if all(matches(record, predicate, known) for predicate in predicates)
        ]

    # =========================================================================
    # RECORD OPERATIONS
    # =========================================================================

    async def insert(self, class_name: str, fields: Fields, acl: AccessPolicy) -> StoredRecord:
        schema = self._prepare_write(class_name, fields, self._current_schema(class_name))
        self._commit_schema(class_name, schema)
        now = utc_now()
        record = StoredRecord(
            class_name=class_name,
            object_id=self._new_object_id(class_name),
            fields=deepcopy(fields),
            acl=deepcopy(acl),
            created_at=now,
            updated_at=now,
        )
        self._records[class_name][record.object_id] = record
        return deepcopy(record)

    async def get_by_id(self, class_name: str, object_id: str) -> StoredRecord | None:
        record = self._records.get(class_name, {}).get(object_id)
        return deepcopy(record) if record is not None else None

    async def query_with_predicates(
        self,
        class_name: str,
        predicates: list[Predicate],
        *,
        limit: int | None = None,
        skip: int = 0,
    ) -> list[StoredRecord]:
        selected = self._select(class_name, predicates)
        end = None if limit is None else skip + limit
        return selected[skip:end]

    async def update(self, class_name: str, object_id: str, fields: Fields) -> StoredRecord:
        record = self._records.get(class_name, {}).get(object_id)
        if record is None:
            raise NotFoundError(class_name, object_id)
        schema = self._prepare_write(class_name, fields, self._current_schema(class_name))
        self._commit_schema(class_name, schema)
        record.fields = deepcopy(fields)
        record.updated_at = utc_now()
        return deepcopy(record)

    async def delete(self, class_name: str, object_id: str) -> None:
        records = self._records.get(class_name, {})
        if object_id not in records:
            raise NotFoundError(class_name, object_id)
        del records[object_id]

    async def bulk_insert(
        self, class_name: str, items: list[tuple[Fields, AccessPolicy]]
    ) -> list[StoredRecord]:
        # Validate the whole batch before writing anything
        schema = self._current_schema(class_name)
        for index, (fields, _acl) in enumerate(items):
            try:
                schema = self._prepare_write(class_name, fields, schema)
            except StoreError as e:
                raise StoreError(
                    f"item {index}: {e.message}", cause=e, context={"index": index}
                ) from e
        self._commit_schema(class_name, schema)

        now = utc_now()
        stored: list[StoredRecord] = []
        for fields, acl in items:
            record = StoredRecord(
                class_name=class_name,
                object_id=self._new_object_id(class_name),
                fields=deepcopy(fields),
                acl=deepcopy(acl),
                created_at=now,
                updated_at=now,
            )
            self._records[class_name][record.object_id] = record
            stored.append(deepcopy(record))
        return stored

    async def count(self, class_name: str, predicates: list[Predicate]) -> int:
        return len(self._select(class_name, predicates))

    # =========================================================================
    # SCHEMA OPERATIONS
    # =========================================================================

    async def list_classes(self) -> list[ClassSchema]:
        return [deepcopy(schema) for schema in self._schemas.values()]

    async def get_class_fields(self, class_name: str) -> dict[str, FieldDescriptor] | None:
        schema = self._schemas.get(class_name)
        return dict(schema.fields) if schema else None

    async def declare_class(
        self, class_name: str, fields: dict[str, FieldDescriptor]
    ) -> ClassSchema:
        self._check_class_name(class_name)
        merged = self._merge_schema(class_name, self._current_schema(class_name), fields)
        self._commit_schema(class_name, merged)
        return deepcopy(self._schemas[class_name])

    async def purge_class(self, class_name: str) -> None:
        if class_name not in self._schemas:
            raise NotFoundError(class_name)
        referrers = sorted(
            f"{other.class_name}.{field_name}"
            for other in self._schemas.values()
            if other.class_name != class_name
            for field_name, descriptor in other.fields.items()
            if descriptor.type is FieldType.POINTER and descriptor.target_class == class_name
        )
        if referrers:
            raise StoreError(
                f"Class '{class_name}' is referenced by {', '.join(referrers)}",
                context={"referrers": referrers},
            )
        del self._schemas[class_name]
        del self._records[class_name]
        logger.debug("Class '%s' purged from store '%s'.", class_name, self._name)


__all__ = ["InMemoryDocumentStore", "matches"]
