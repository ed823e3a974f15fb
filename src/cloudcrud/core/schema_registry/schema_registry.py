"""SchemaRegistry - Table (class) lifecycle management.

SchemaRegistry creates, lists, describes and purges classes through the
schema operations of the document store.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cloudcrud.core.exceptions import NotFoundError, ValidationError
from cloudcrud.core.store.codec import decode_fields
from cloudcrud.core.store.protocol import DocumentStore
from cloudcrud.core.store.types import (
    RESERVED_FIELDS,
    ClassSchema,
    FieldDescriptor,
    infer_field_type,
    public_access,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TableCreation:
    """Outcome of ``SchemaRegistry.create_table``.

    Attributes:
        class_name: The class that was created or extended.
        seed_object_id: Id of the seed record when legacy seeding ran.
    """

    class_name: str
    seed_object_id: str | None = None


class SchemaRegistry:
    """Manage class definitions held by the document store.

    Args:
        store: Document store capability.
        seed_record: Default for ``create_table``: when True, initial fields
            are committed by persisting one public seed record (legacy
            behavior) instead of a metadata-only declaration.
    """

    def __init__(self, store: DocumentStore, *, seed_record: bool = False):
        self._store = store
        self._seed_record = seed_record
        logger.debug("SchemaRegistry created (seed_record=%s).", seed_record)

    async def declare_table(
        self, class_name: str, field_types: dict[str, FieldDescriptor] | None = None
    ) -> ClassSchema:
        """Create or extend a class from explicit field types, writing no record.

        Args:
            class_name: Class to declare.
            field_types: Field name to descriptor. Built-in fields are implied.

        Returns:
            The class definition after the declaration.
        """
        schema = await self._store.declare_class(class_name, field_types or {})
        logger.info("Table '%s' declared with %d field(s).", class_name, len(schema.fields))
        return schema

    async def create_table(
        self,
        class_name: str,
        initial_fields: Mapping[str, Any] | None = None,
        *,
        seed_record: bool | None = None,
    ) -> TableCreation:
        """Materialize a class, optionally with initial fields.

        Field types are inferred from the values of ``initial_fields``. By
        default they are declared as metadata only. With ``seed_record``
        (or the registry default) enabled, one public record carrying those
        values is persisted instead and stays in the class afterwards.

        Args:
            class_name: Class to create.
            initial_fields: Optional field name to sample value mapping
                (JSON representation).
            seed_record: Overrides the registry default for this call.

        Returns:
            TableCreation, with the seed record id when one was written.

        Raises:
            ValidationError: If ``initial_fields`` is not a mapping, an initial
                field is reserved or malformed, or ``seed_record`` is not a bool.
            StoreError: If the store rejects the class or a field.
        """
        if not class_name:
            raise ValidationError("className is required", field="className")

        if initial_fields is not None and not isinstance(initial_fields, Mapping):
            raise ValidationError(
                f"schema must be an object, got {type(initial_fields).__name__}", field="schema"
            )
        if seed_record is not None and not isinstance(seed_record, bool):
            raise ValidationError(
                f"seedRecord must be a boolean, got {type(seed_record).__name__}",
                field="seedRecord",
            )

        fields = decode_fields(dict(initial_fields or {}))
        reserved = sorted(RESERVED_FIELDS.intersection(fields))
        if reserved:
            raise ValidationError(
                f"Reserved field(s) cannot be set: {', '.join(reserved)}", field=reserved[0]
            )

        use_seed = self._seed_record if seed_record is None else seed_record
        if use_seed and fields:
            record = await self._store.insert(class_name, fields, public_access())
            logger.info(
                "Table '%s' created with seed record '%s'.", class_name, record.object_id
            )
            return TableCreation(class_name=class_name, seed_object_id=record.object_id)

        field_types: dict[str, FieldDescriptor] = {}
        for name, value in fields.items():
            try:
                descriptor = infer_field_type(value)
            except TypeError as e:
                raise ValidationError(str(e), field=name) from e
            if descriptor is not None:
                field_types[name] = descriptor
        await self.declare_table(class_name, field_types)
        return TableCreation(class_name=class_name)

    async def list_tables(self) -> list[ClassSchema]:
        """Return every class with its current fields."""
        return await self._store.list_classes()

    async def get_table_schema(self, class_name: str) -> dict[str, FieldDescriptor]:
        """Return the fields of a class.

        Raises:
            NotFoundError: If the class is unknown.
        """
        fields = await self._store.get_class_fields(class_name)
        if fields is None:
            raise NotFoundError(class_name)
        return fields

    async def delete_table(self, class_name: str) -> None:
        """Purge every record of a class and its definition.

        Raises:
            NotFoundError: If the class is unknown.
            StoreError: If other classes reference it.
        """
        await self._store.purge_class(class_name)
        logger.info("Table '%s' deleted.", class_name)


__all__ = ["SchemaRegistry", "TableCreation"]
