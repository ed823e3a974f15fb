"""Operation envelope DTOs.

One envelope class per named operation, each carrying that operation's
payload on top of the base ``success``/``message`` fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cloudcrud.core.dto.result_dto import Envelope

# =============================================================================
# TABLE MANAGEMENT
# =============================================================================


class CreateTableEnvelope(Envelope):
    """Result of createTable.

    Attributes:
        class_name: Name of the created class.
        seed_object_id: Id of the seed record, only when legacy seeding ran.
    """

    class_name: str = Field(alias="className")
    seed_object_id: str | None = Field(default=None, alias="seedObjectId")


class TableSummary(BaseModel):
    """One entry of listTables."""

    class_name: str = Field(alias="className")
    fields: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ListTablesEnvelope(Envelope):
    """Result of listTables."""

    tables: list[TableSummary] = Field(default_factory=list)
    count: int = 0


class TableSchemaEnvelope(Envelope):
    """Result of getTableSchema.

    Attributes:
        fields: Field name to ``{"type": ..., "targetClass": ...}``.
    """

    class_name: str = Field(alias="className")
    fields: dict[str, dict[str, str]] = Field(default_factory=dict)


class DeleteTableEnvelope(Envelope):
    """Result of deleteTable."""


# =============================================================================
# RECORD OPERATIONS
# =============================================================================


class RecordEnvelope(Envelope):
    """Result of createRecord and updateRecord."""

    object_id: str = Field(alias="objectId")
    data: dict[str, Any] = Field(default_factory=dict)


class ReadTableEnvelope(Envelope):
    """Result of readTable.

    Attributes:
        count: Number of records in this page, not the total match count.
    """

    class_name: str = Field(alias="className")
    count: int = 0
    data: list[dict[str, Any]] = Field(default_factory=list)


class DeleteRecordEnvelope(Envelope):
    """Result of deleteRecord."""

    object_id: str = Field(alias="objectId")


class BatchCreateEnvelope(Envelope):
    """Result of batchCreateRecords.

    Attributes:
        object_ids: Generated ids, in the order of the input records.
    """

    count: int = 0
    object_ids: list[str] = Field(default_factory=list, alias="objectIds")


class CountEnvelope(Envelope):
    """Result of countRecords."""

    class_name: str = Field(alias="className")
    count: int = 0


# =============================================================================
# UTILITY
# =============================================================================


class ServerInfoEnvelope(Envelope):
    """Result of getServerInfo."""

    server_version: str = Field(alias="serverVersion")
    timestamp: str
    features: dict[str, bool] = Field(default_factory=dict)


class HealthEnvelope(Envelope):
    """Result of healthCheck."""

    status: str = "healthy"
    timestamp: str


__all__ = [
    "CreateTableEnvelope",
    "TableSummary",
    "ListTablesEnvelope",
    "TableSchemaEnvelope",
    "DeleteTableEnvelope",
    "RecordEnvelope",
    "ReadTableEnvelope",
    "DeleteRecordEnvelope",
    "BatchCreateEnvelope",
    "CountEnvelope",
    "ServerInfoEnvelope",
    "HealthEnvelope",
]
