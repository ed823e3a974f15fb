"""DTO package for CloudCrud.

Provides the uniform response envelope returned by every named operation.
"""

from .operation_dto import (
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
from .result_dto import Envelope

__all__ = [
    "Envelope",
    "BatchCreateEnvelope",
    "CountEnvelope",
    "CreateTableEnvelope",
    "DeleteRecordEnvelope",
    "DeleteTableEnvelope",
    "HealthEnvelope",
    "ListTablesEnvelope",
    "ReadTableEnvelope",
    "RecordEnvelope",
    "ServerInfoEnvelope",
    "TableSchemaEnvelope",
    "TableSummary",
]
