"""End-to-end tests through the CloudCrud facade."""

import pytest

from cloudcrud.core.cloudcrud import CloudCrud
from cloudcrud.core.exceptions import NotFoundError, StoreError, ValidationError
from cloudcrud.core.store import InMemoryDocumentStore
from tests.utils import TASKS, user_fields


def test_direct_construction_is_blocked():
    with pytest.raises(RuntimeError, match="CloudCrud.create"):
        CloudCrud()


class TestFacade:
    @pytest.mark.asyncio
    async def test_default_store_from_config(self):
        instance = await CloudCrud.create(config={"store": {"backend": "memory", "name": "local"}})
        assert isinstance(instance.store, InMemoryDocumentStore)
        assert instance.store.name == "local"

    @pytest.mark.asyncio
    async def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            await CloudCrud.create(config={"store": {"backend": "carrier-pigeon"}})

    @pytest.mark.asyncio
    async def test_injected_store(self, cloudcrud: CloudCrud, store):
        assert cloudcrud.store is store
        assert cloudcrud.record_manager is cloudcrud.records

    @pytest.mark.asyncio
    async def test_strict_filters_from_config(self, store):
        instance = await CloudCrud.create(
            store=store, config={"cloudcrud": {"strict_filter_operators": True}}
        )
        with pytest.raises(ValidationError, match="Unknown filter operator"):
            await instance.run("readTable", {"className": "Task", "filters": {"a": {"$x": 1}}})

    @pytest.mark.asyncio
    async def test_legacy_seed_from_config(self, store):
        instance = await CloudCrud.create(
            store=store, config={"cloudcrud": {"seed_record_on_create_table": True}}
        )
        await instance.run("createTable", {"className": "Task", "schema": {"title": "seed"}})
        page = await instance.run("readTable", {"className": "Task"})
        assert [user_fields(item) for item in page["data"]] == [{"title": "seed"}]


class TestProperties:
    @pytest.mark.asyncio
    async def test_create_then_read_by_id(self, cloudcrud: CloudCrud):
        data = {"title": "A", "n": 2.5, "tags": ["x"], "meta": {"k": [1, {"d": True}]}}
        created = await cloudcrud.run("createRecord", {"className": "Note", "data": data})
        page = await cloudcrud.run(
            "readTable", {"className": "Note", "filters": {"objectId": created["objectId"]}}
        )
        assert page["count"] == 1
        assert user_fields(page["data"][0]) == data

    @pytest.mark.asyncio
    async def test_greater_than_subset(self, cloudcrud: CloudCrud):
        await cloudcrud.run("batchCreateRecords", {"className": "Task", "records": TASKS})
        await cloudcrud.run("createRecord", {"className": "Task", "data": {"title": "No prio"}})
        page = await cloudcrud.run(
            "readTable", {"className": "Task", "filters": {"priority": {"$gt": 3}}}
        )
        expected = sorted(task["title"] for task in TASKS if task["priority"] > 3)
        assert sorted(item["title"] for item in page["data"]) == expected
        assert all("priority" in item for item in page["data"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "filters",
        [
            {},
            {"done": False},
            {"priority": {"$gte": 3, "$lte": 5}},
            {"tags": {"$in": [["bug"], ["docs"]]}},
            {"title": {"$ne": "Fix parser"}},
        ],
    )
    async def test_count_equals_unbounded_read(self, cloudcrud: CloudCrud, filters):
        many = TASKS * 40
        await cloudcrud.run("batchCreateRecords", {"className": "Task", "records": many})
        counted = await cloudcrud.run("countRecords", {"className": "Task", "filters": filters})
        page = await cloudcrud.run(
            "readTable", {"className": "Task", "filters": filters, "limit": len(many), "skip": 0}
        )
        assert counted["count"] == page["count"]

    @pytest.mark.asyncio
    async def test_update_preserves_untouched_fields(self, cloudcrud: CloudCrud):
        created = await cloudcrud.run("createRecord", {"className": "T", "data": {"a": 1, "b": 2}})
        updated = await cloudcrud.run(
            "updateRecord", {"className": "T", "objectId": created["objectId"], "data": {"a": 9}}
        )
        assert user_fields(updated["data"]) == {"a": 9, "b": 2}

    @pytest.mark.asyncio
    async def test_delete_table_removes_it(self, cloudcrud: CloudCrud):
        await cloudcrud.run("createRecord", {"className": "Temp", "data": {"x": 1}})
        await cloudcrud.run("deleteTable", {"className": "Temp"})
        listed = await cloudcrud.run("listTables")
        assert "Temp" not in [table["className"] for table in listed["tables"]]
        with pytest.raises(NotFoundError):
            await cloudcrud.run("getTableSchema", {"className": "Temp"})

    @pytest.mark.asyncio
    async def test_batch_ids_in_input_order(self, cloudcrud: CloudCrud):
        result = await cloudcrud.run("batchCreateRecords", {"className": "Task", "records": TASKS})
        assert result["count"] == len(TASKS)
        for object_id, data in zip(result["objectIds"], TASKS, strict=True):
            page = await cloudcrud.run(
                "readTable", {"className": "Task", "filters": {"objectId": object_id}}
            )
            assert [user_fields(item) for item in page["data"]] == [data]

    @pytest.mark.asyncio
    async def test_unknown_operator_same_as_no_filter(self, cloudcrud: CloudCrud):
        await cloudcrud.run("batchCreateRecords", {"className": "Task", "records": TASKS})
        bogus = await cloudcrud.run(
            "readTable", {"className": "Task", "filters": {"priority": {"bogus": 5}}}
        )
        plain = await cloudcrud.run("readTable", {"className": "Task"})
        assert [item["objectId"] for item in bogus["data"]] == [
            item["objectId"] for item in plain["data"]
        ]


@pytest.mark.asyncio
async def test_task_scenario(cloudcrud: CloudCrud):
    created = await cloudcrud.run(
        "createRecord", {"className": "Task", "data": {"title": "A", "done": False}}
    )
    object_id = created["objectId"]

    await cloudcrud.run(
        "updateRecord", {"className": "Task", "objectId": object_id, "data": {"done": True}}
    )

    page = await cloudcrud.run(
        "readTable", {"className": "Task", "filters": {"objectId": object_id}}
    )
    assert page["success"] is True
    assert page["className"] == "Task"
    assert page["count"] == 1
    assert user_fields(page["data"][0]) == {"title": "A", "done": True}


@pytest.mark.asyncio
async def test_pointer_and_date_round_trip(cloudcrud: CloudCrud):
    author = await cloudcrud.run("createRecord", {"className": "Author", "data": {"name": "Ada"}})
    pointer = {"__type": "Pointer", "className": "Author", "objectId": author["objectId"]}
    published = {"__type": "Date", "iso": "2021-03-04T05:06:07.000Z"}
    await cloudcrud.run(
        "createRecord",
        {"className": "Book", "data": {"author": pointer, "published": published}},
    )

    page = await cloudcrud.run(
        "readTable",
        {
            "className": "Book",
            "filters": {
                "author": pointer,
                "published": {"$gte": {"__type": "Date", "iso": "2021-01-01T00:00:00Z"}},
            },
        },
    )
    assert page["count"] == 1
    assert page["data"][0]["author"] == pointer
    assert page["data"][0]["published"] == published

    schema = await cloudcrud.run("getTableSchema", {"className": "Book"})
    assert schema["fields"]["author"] == {"type": "Pointer", "targetClass": "Author"}
    with pytest.raises(StoreError, match="^Failed to delete table: Class 'Author' is referenced"):
        await cloudcrud.run("deleteTable", {"className": "Author"})
