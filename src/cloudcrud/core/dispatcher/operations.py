"""Named operations exposed by the Dispatcher.

Each operation validates nothing itself: required parameters are declared
on the decorator and checked by the Dispatcher before the function runs.
The function delegates to the SchemaRegistry or RecordAccess and wraps the
result in its envelope.
"""

import logging
from typing import TYPE_CHECKING, Any

from cloudcrud.core.dispatcher.decorators import operation
from cloudcrud.core.dto.operation_dto import (
    BatchCreateEnvelope,
    CountEnvelope,
    CreateTableEnvelope,
    DeleteRecordEnvelope,
    DeleteTableEnvelope,
    HealthEnvelope,
    ListTablesEnvelope,
    ReadTableEnvelope,
    RecordEnvelope,
    ServerInfoEnvelope,
    TableSchemaEnvelope,
    TableSummary,
)
from cloudcrud.core.store.codec import encode_record
from cloudcrud.core.store.types import ClassSchema
from cloudcrud.core.utils import iso_timestamp

if TYPE_CHECKING:
    from cloudcrud.core.dispatcher.dispatcher import OperationContext

logger = logging.getLogger(__name__)


# ==================== TABLE MANAGEMENT ====================


@operation("createTable", required=("className",), failure="Failed to create table")
async def create_table(ctx: "OperationContext", params: dict[str, Any]) -> CreateTableEnvelope:
    class_name = params["className"]
    created = await ctx.schema_registry.create_table(
        class_name, params.get("schema"), seed_record=params.get("seedRecord")
    )
    return CreateTableEnvelope(
        message=f"Table '{class_name}' created successfully",
        class_name=class_name,
        seed_object_id=created.seed_object_id,
    )


@operation("listTables", failure="Failed to list tables")
async def list_tables(ctx: "OperationContext", params: dict[str, Any]) -> ListTablesEnvelope:
    schemas: list[ClassSchema] = await ctx.schema_registry.list_tables()
    tables = [
        TableSummary(class_name=schema.class_name, fields=schema.field_names())
        for schema in schemas
    ]
    return ListTablesEnvelope(tables=tables, count=len(tables))


@operation("getTableSchema", required=("className",), failure="Failed to get schema")
async def get_table_schema(ctx: "OperationContext", params: dict[str, Any]) -> TableSchemaEnvelope:
    class_name = params["className"]
    fields = await ctx.schema_registry.get_table_schema(class_name)
    return TableSchemaEnvelope(
        class_name=class_name,
        fields={name: descriptor.to_dict() for name, descriptor in fields.items()},
    )


@operation("deleteTable", required=("className",), failure="Failed to delete table")
async def delete_table(ctx: "OperationContext", params: dict[str, Any]) -> DeleteTableEnvelope:
    class_name = params["className"]
    await ctx.schema_registry.delete_table(class_name)
    return DeleteTableEnvelope(message=f"Table '{class_name}' deleted successfully")


# ==================== RECORD OPERATIONS ====================


@operation("createRecord", required=("className", "data"), failure="Failed to create record")
async def create_record(ctx: "OperationContext", params: dict[str, Any]) -> RecordEnvelope:
    record = await ctx.records.create(params["className"], params["data"])
    return RecordEnvelope(
        message="Record created successfully",
        object_id=record.object_id,
        data=encode_record(record),
    )


@operation("readTable", required=("className",), failure="Failed to read records")
async def read_table(ctx: "OperationContext", params: dict[str, Any]) -> ReadTableEnvelope:
    class_name = params["className"]
    limit = params.get("limit")
    if limit is None:
        limit = ctx.default_limit
    if ctx.max_limit is not None and isinstance(limit, int) and limit > ctx.max_limit:
        logger.debug("Clamping limit %s to max_limit %s", limit, ctx.max_limit)
        limit = ctx.max_limit
    skip = params.get("skip")
    records = await ctx.records.read(
        class_name,
        params.get("filters") or {},
        limit=limit,
        skip=0 if skip is None else skip,
    )
    return ReadTableEnvelope(
        class_name=class_name,
        count=len(records),
        data=[encode_record(record) for record in records],
    )


@operation(
    "updateRecord",
    required=("className", "objectId", "data"),
    failure="Failed to update record",
)
async def update_record(ctx: "OperationContext", params: dict[str, Any]) -> RecordEnvelope:
    record = await ctx.records.update(params["className"], params["objectId"], params["data"])
    return RecordEnvelope(
        message="Record updated successfully",
        object_id=record.object_id,
        data=encode_record(record),
    )


@operation("deleteRecord", required=("className", "objectId"), failure="Failed to delete record")
async def delete_record(ctx: "OperationContext", params: dict[str, Any]) -> DeleteRecordEnvelope:
    object_id = params["objectId"]
    await ctx.records.delete(params["className"], object_id)
    return DeleteRecordEnvelope(message="Record deleted successfully", object_id=object_id)


@operation(
    "batchCreateRecords",
    required=("className",),
    arrays=("records",),
    failure="Failed to batch create records",
)
async def batch_create_records(
    ctx: "OperationContext", params: dict[str, Any]
) -> BatchCreateEnvelope:
    stored = await ctx.records.batch_create(params["className"], params["records"])
    return BatchCreateEnvelope(
        message=f"{len(stored)} records created successfully",
        count=len(stored),
        object_ids=[record.object_id for record in stored],
    )


@operation("countRecords", required=("className",), failure="Failed to count records")
async def count_records(ctx: "OperationContext", params: dict[str, Any]) -> CountEnvelope:
    class_name = params["className"]
    count = await ctx.records.count(class_name, params.get("filters") or {})
    return CountEnvelope(class_name=class_name, count=count)


# ==================== UTILITY FUNCTIONS ====================


@operation("getServerInfo")
async def get_server_info(ctx: "OperationContext", params: dict[str, Any]) -> ServerInfoEnvelope:
    return ServerInfoEnvelope(
        server_version=ctx.server_version,
        timestamp=iso_timestamp(),
        features=dict(ctx.features),
    )


@operation("healthCheck")
async def health_check(ctx: "OperationContext", params: dict[str, Any]) -> HealthEnvelope:
    return HealthEnvelope(status="healthy", timestamp=iso_timestamp())
