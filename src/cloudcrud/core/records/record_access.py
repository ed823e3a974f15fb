"""RecordAccess - CRUD, batch and count over records of a named class.

Incoming record data is JSON (typed values as tagged mappings); it is
decoded before reaching the store. Read and count compile their filters
with ``compile_filters``. Every write gives records the public access
policy.

No locking or versioning happens here: concurrent updates of one record
race and the last write to reach the store wins.
"""

import logging
from collections.abc import Mapping
from typing import Any

from cloudcrud.core.exceptions import NotFoundError, ValidationError
from cloudcrud.core.filters.compiler import compile_filters
from cloudcrud.core.store.codec import decode_fields
from cloudcrud.core.store.protocol import DocumentStore
from cloudcrud.core.store.types import RESERVED_FIELDS, Fields, StoredRecord, public_access

logger = logging.getLogger(__name__)


class RecordAccess:
    """Record-level operations against the document store.

    Holds no mutable state between calls besides its configuration.

    Args:
        store: Document store capability.
        strict_filters: Reject unknown filter operators instead of ignoring them.
    """

    def __init__(self, store: DocumentStore, *, strict_filters: bool = False):
        self._store = store
        self._strict_filters = strict_filters
        logger.debug("RecordAccess created (strict_filters=%s).", strict_filters)

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    @staticmethod
    def _require(class_name: str | None, **named: Any) -> None:
        if not class_name:
            raise ValidationError("className is required", field="className")
        for name, value in named.items():
            if value is None or value == "":
                raise ValidationError(f"{name} is required", field=name)

    @staticmethod
    def _decode_data(data: Any, *, label: str = "data") -> Fields:
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"{label} must be an object, got {type(data).__name__}", field=label
            )
        reserved = sorted(RESERVED_FIELDS.intersection(data))
        if reserved:
            raise ValidationError(
                f"Reserved field(s) cannot be set: {', '.join(reserved)}", field=reserved[0]
            )
        return decode_fields(dict(data))

    @staticmethod
    def _check_window(limit: int | None, skip: int) -> None:
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int) or limit < 0
        ):
            raise ValidationError(f"limit must be a non-negative integer, got {limit!r}")
        if isinstance(skip, bool) or not isinstance(skip, int) or skip < 0:
            raise ValidationError(f"skip must be a non-negative integer, got {skip!r}")

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def create(self, class_name: str, data: Mapping[str, Any]) -> StoredRecord:
        """Persist a new public record built from ``data``.

        Returns:
            The stored record, carrying its generated ``object_id``.

        Raises:
            ValidationError: If ``class_name`` or ``data`` is absent or invalid.
            StoreError: If the store rejects the write.
        """
        self._require(class_name, data=data)
        fields = self._decode_data(data)
        record = await self._store.insert(class_name, fields, public_access())
        logger.debug("Created record '%s' in '%s'.", record.object_id, class_name)
        return record

    async def read(
        self,
        class_name: str,
        filters: Mapping[str, Any] | None = None,
        limit: int | None = 100,
        skip: int = 0,
    ) -> list[StoredRecord]:
        """Return one page of the records matching ``filters``.

        Args:
            class_name: Class to read.
            filters: FilterSpec; None or empty matches every record.
            limit: Page size, None for no limit.
            skip: Number of matching records to skip.

        Returns:
            The page of records, in the store's default order.
        """
        self._require(class_name)
        self._check_window(limit, skip)
        predicates = compile_filters(filters, strict=self._strict_filters)
        records = await self._store.query_with_predicates(
            class_name, predicates, limit=limit, skip=skip
        )
        logger.debug(
            "Read %d record(s) from '%s' (limit=%s, skip=%s).",
            len(records),
            class_name,
            limit,
            skip,
        )
        return records

    async def update(
        self, class_name: str, object_id: str, data: Mapping[str, Any]
    ) -> StoredRecord:
        """Merge ``data`` over a record's fields and persist it.

        Fields absent from ``data`` keep their value. No concurrency check
        is made; the last write wins per field.

        Raises:
            NotFoundError: If the record does not exist.
        """
        self._require(class_name, objectId=object_id, data=data)
        patch = self._decode_data(data)
        existing = await self._store.get_by_id(class_name, object_id)
        if existing is None:
            raise NotFoundError(class_name, object_id)
        merged = {**existing.fields, **patch}
        record = await self._store.update(class_name, object_id, merged)
        logger.debug("Updated record '%s' in '%s': %s", object_id, class_name, sorted(patch))
        return record

    async def delete(self, class_name: str, object_id: str) -> None:
        """Remove a record.

        Raises:
            NotFoundError: If the record does not exist in ``class_name``.
        """
        self._require(class_name, objectId=object_id)
        existing = await self._store.get_by_id(class_name, object_id)
        if existing is None:
            raise NotFoundError(class_name, object_id)
        await self._store.delete(class_name, object_id)
        logger.debug("Deleted record '%s' from '%s'.", object_id, class_name)

    async def batch_create(
        self, class_name: str, records: list[Mapping[str, Any]]
    ) -> list[StoredRecord]:
        """Persist several public records in a single bulk operation.

        Returns:
            Stored records in the same order as ``records``. Partial-failure
            behavior is that of the store's bulk write; nothing is rolled
            back or retried here.
        """
        self._require(class_name)
        if not isinstance(records, list):
            raise ValidationError("className and records array are required", field="records")
        items = [
            (self._decode_data(entry, label=f"records[{index}]"), public_access())
            for index, entry in enumerate(records)
        ]
        stored = await self._store.bulk_insert(class_name, items)
        logger.debug("Batch created %d record(s) in '%s'.", len(stored), class_name)
        return stored

    async def count(self, class_name: str, filters: Mapping[str, Any] | None = None) -> int:
        """Count the records matching ``filters``, ignoring any pagination."""
        self._require(class_name)
        predicates = compile_filters(filters, strict=self._strict_filters)
        return await self._store.count(class_name, predicates)


__all__ = ["RecordAccess"]
