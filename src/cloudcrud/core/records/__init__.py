"""RecordAccess - Record CRUD for CloudCrud."""

from cloudcrud.core.records.record_access import RecordAccess

__all__ = ["RecordAccess"]
