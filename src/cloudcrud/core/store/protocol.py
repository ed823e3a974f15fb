"""Store - Document store capability (contract).

The document store is an external collaborator: it owns persistence,
indexing and schema inference. CloudCrud reaches it only through the
``DocumentStore`` protocol below, so any backend can be injected.

Every method is a single awaitable call. CloudCrud imposes no timeout,
retry or cancellation of its own on top of it.
"""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from cloudcrud.core.store.types import (
    AccessPolicy,
    ClassSchema,
    FieldDescriptor,
    Fields,
    Predicate,
    StoredRecord,
)


@runtime_checkable
class DocumentStore(Protocol):
    """Async contract every document store backend must implement.

    Note:
        - Class names identify collections; a class is created implicitly by
          the first write that introduces it.
        - Writes extend the class schema with the inferred type of new fields.
        - Failures are raised as ``StoreError`` (or ``NotFoundError`` where
          stated); anything else raised is treated as a store failure by the
          layers above.
    """

    @property
    def name(self) -> str:
        """Human-readable name for this store instance."""
        ...

    # =========================================================================
    # RECORD OPERATIONS
    # =========================================================================

    @abstractmethod
    async def insert(self, class_name: str, fields: Fields, acl: AccessPolicy) -> StoredRecord:
        """Persist a new record and return it with its generated id.

        Raises:
            StoreError: If the class name, a field name or a field type is
                rejected by the store.
        """
        ...

    @abstractmethod
    async def get_by_id(self, class_name: str, object_id: str) -> StoredRecord | None:
        """Fetch one record, or None if the class or id is unknown."""
        ...

    @abstractmethod
    async def query_with_predicates(
        self,
        class_name: str,
        predicates: list[Predicate],
        *,
        limit: int | None = None,
        skip: int = 0,
    ) -> list[StoredRecord]:
        """Return the records matching every predicate.

        Args:
            class_name: Class to query. Unknown classes match nothing.
            predicates: Conditions combined with AND. Empty matches all.
            limit: Maximum number of records, None for no limit.
            skip: Number of matching records to skip first.
        """
        ...

    @abstractmethod
    async def update(self, class_name: str, object_id: str, fields: Fields) -> StoredRecord:
        """Replace the user fields of a record and return it.

        Raises:
            NotFoundError: If the record does not exist.
            StoreError: If a field is rejected by the store.
        """
        ...

    @abstractmethod
    async def delete(self, class_name: str, object_id: str) -> None:
        """Remove a record.

        Raises:
            NotFoundError: If the record does not exist.
        """
        ...

    @abstractmethod
    async def bulk_insert(
        self, class_name: str, items: list[tuple[Fields, AccessPolicy]]
    ) -> list[StoredRecord]:
        """Persist several records in one operation.

        Returns:
            The stored records, in the same order as ``items``.

        Raises:
            StoreError: If the bulk write fails. Partial-failure semantics
                are those of the backend.
        """
        ...

    @abstractmethod
    async def count(self, class_name: str, predicates: list[Predicate]) -> int:
        """Count the records matching every predicate."""
        ...

    # =========================================================================
    # SCHEMA OPERATIONS
    # =========================================================================

    @abstractmethod
    async def list_classes(self) -> list[ClassSchema]:
        """Return every class with its current fields."""
        ...

    @abstractmethod
    async def get_class_fields(self, class_name: str) -> dict[str, FieldDescriptor] | None:
        """Return the fields of a class, or None if the class is unknown."""
        ...

    @abstractmethod
    async def declare_class(
        self, class_name: str, fields: dict[str, FieldDescriptor]
    ) -> ClassSchema:
        """Create a class, or extend an existing one, without writing records.

        Raises:
            StoreError: If a declared type conflicts with the existing schema.
        """
        ...

    @abstractmethod
    async def purge_class(self, class_name: str) -> None:
        """Delete every record of a class and its definition.

        Raises:
            NotFoundError: If the class is unknown.
            StoreError: If other classes hold Pointer fields targeting it.
        """
        ...


__all__ = ["DocumentStore"]
