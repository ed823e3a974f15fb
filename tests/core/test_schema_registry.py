"""Tests for SchemaRegistry table lifecycle."""

import pytest

from cloudcrud.core.exceptions import NotFoundError, StoreError, ValidationError
from cloudcrud.core.schema_registry import SchemaRegistry
from cloudcrud.core.store import FieldDescriptor, FieldType, InMemoryDocumentStore


class TestCreateTable:
    @pytest.mark.asyncio
    async def test_without_fields_declares_class(self, registry: SchemaRegistry, store):
        created = await registry.create_table("Task")
        assert created.class_name == "Task"
        assert created.seed_object_id is None
        assert await store.count("Task", []) == 0
        assert "objectId" in await registry.get_table_schema("Task")

    @pytest.mark.asyncio
    async def test_initial_fields_declared_without_record(self, registry: SchemaRegistry, store):
        due_at = {"__type": "Date", "iso": "2024-01-01T00:00:00Z"}
        created = await registry.create_table(
            "Task", {"title": "sample", "priority": 1, "dueAt": due_at}
        )
        assert created.seed_object_id is None
        fields = await registry.get_table_schema("Task")
        assert fields["title"] == FieldDescriptor(FieldType.STRING)
        assert fields["priority"] == FieldDescriptor(FieldType.NUMBER)
        assert fields["dueAt"] == FieldDescriptor(FieldType.DATE)
        assert await store.count("Task", []) == 0

    @pytest.mark.asyncio
    async def test_legacy_seed_record(self, store: InMemoryDocumentStore):
        registry = SchemaRegistry(store, seed_record=True)
        created = await registry.create_table("Task", {"title": "sample"})
        assert created.seed_object_id is not None
        seed = await store.get_by_id("Task", created.seed_object_id)
        assert seed.fields == {"title": "sample"}
        assert seed.acl == {"*": {"read": True, "write": True}}

    @pytest.mark.asyncio
    async def test_seed_record_override_per_call(self, registry: SchemaRegistry, store):
        created = await registry.create_table("Task", {"title": "x"}, seed_record=True)
        assert await store.count("Task", []) == 1
        assert created.seed_object_id is not None

    @pytest.mark.asyncio
    async def test_seed_without_fields_writes_nothing(self, store: InMemoryDocumentStore):
        registry = SchemaRegistry(store, seed_record=True)
        await registry.create_table("Task")
        assert await store.count("Task", []) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("schema", [["a"], "title", 3])
    async def test_non_mapping_schema_rejected(self, registry: SchemaRegistry, store, schema):
        with pytest.raises(ValidationError, match="schema must be an object") as excinfo:
            await registry.create_table("Task", schema)
        assert excinfo.value.field == "schema"
        assert await store.list_classes() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed_record", ["false", 0, 1])
    async def test_seed_record_must_be_bool(self, registry: SchemaRegistry, store, seed_record):
        with pytest.raises(ValidationError, match="seedRecord must be a boolean"):
            await registry.create_table("Task", {"title": "x"}, seed_record=seed_record)
        assert await store.count("Task", []) == 0

    @pytest.mark.asyncio
    async def test_reserved_field_rejected(self, registry: SchemaRegistry):
        with pytest.raises(ValidationError, match="Reserved field"):
            await registry.create_table("Task", {"objectId": "abc"})

    @pytest.mark.asyncio
    async def test_conflicting_redeclaration(self, registry: SchemaRegistry):
        await registry.create_table("Task", {"priority": 1})
        with pytest.raises(StoreError, match="schema mismatch"):
            await registry.create_table("Task", {"priority": "high"})

    @pytest.mark.asyncio
    async def test_class_name_required(self, registry: SchemaRegistry):
        with pytest.raises(ValidationError, match="className is required"):
            await registry.create_table("")


class TestDeclareTable:
    @pytest.mark.asyncio
    async def test_declare_pointer_field(self, registry: SchemaRegistry):
        schema = await registry.declare_table(
            "Book", {"author": FieldDescriptor(FieldType.POINTER, "Author")}
        )
        assert schema.fields_to_dict()["author"] == {"type": "Pointer", "targetClass": "Author"}


class TestListAndDelete:
    @pytest.mark.asyncio
    async def test_list_tables(self, registry: SchemaRegistry):
        await registry.create_table("Task", {"title": "x"})
        await registry.create_table("Note")
        schemas = await registry.list_tables()
        tables = {schema.class_name: schema.field_names() for schema in schemas}
        assert set(tables) == {"Task", "Note"}
        assert "title" in tables["Task"]

    @pytest.mark.asyncio
    async def test_delete_table(self, registry: SchemaRegistry):
        await registry.create_table("Task", {"title": "x"}, seed_record=True)
        await registry.delete_table("Task")
        assert await registry.list_tables() == []
        with pytest.raises(NotFoundError, match="Class 'Task' not found"):
            await registry.get_table_schema("Task")

    @pytest.mark.asyncio
    async def test_delete_referenced_table(self, registry: SchemaRegistry):
        await registry.create_table("Author")
        await registry.declare_table(
            "Book", {"author": FieldDescriptor(FieldType.POINTER, "Author")}
        )
        with pytest.raises(StoreError):
            await registry.delete_table("Author")

    @pytest.mark.asyncio
    async def test_delete_unknown_table(self, registry: SchemaRegistry):
        with pytest.raises(NotFoundError):
            await registry.delete_table("Nope")
