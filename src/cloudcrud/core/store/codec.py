"""Store - JSON wire codec.

Converts between the JSON representation callers send and receive and the
decoded field values the store works with. Typed values travel as tagged
mappings:

    {"__type": "Date", "iso": "2024-05-01T10:00:00.000Z"}
    {"__type": "Pointer", "className": "Author", "objectId": "a1B2c3D4e5"}

Any other mapping or list is decoded recursively.
"""

from datetime import UTC, datetime
from typing import Any

from cloudcrud.core.exceptions import ValidationError
from cloudcrud.core.store.types import Fields, FieldValue, Pointer, StoredRecord

TYPE_KEY = "__type"


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    """Return the current time, truncated to milliseconds like the wire format."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def is_typed_value(raw: Any) -> bool:
    """Return True if ``raw`` is a tagged mapping such as an encoded Date."""
    return isinstance(raw, dict) and TYPE_KEY in raw


def decode_value(raw: Any) -> FieldValue:
    """Decode a JSON value into a field value.

    Args:
        raw: Value as received from the caller.

    Returns:
        The decoded value.

    Raises:
        ValidationError: If a tagged mapping is malformed or of unknown type.
    """
    if isinstance(raw, dict):
        if TYPE_KEY not in raw:
            return {key: decode_value(item) for key, item in raw.items()}
        kind = raw[TYPE_KEY]
        if kind == "Date":
            iso = raw.get("iso")
            if not isinstance(iso, str):
                raise ValidationError(
                    "Date value requires an 'iso' string", context={"value": raw}
                )
            try:
                parsed = datetime.fromisoformat(iso)
            except ValueError as e:
                raise ValidationError(f"Invalid date: {iso!r}") from e
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
        if kind == "Pointer":
            class_name = raw.get("className")
            object_id = raw.get("objectId")
            if not isinstance(class_name, str) or not isinstance(object_id, str):
                raise ValidationError("Pointer value requires 'className' and 'objectId'")
            return Pointer(class_name=class_name, object_id=object_id)
        raise ValidationError(f"Unsupported value type: {kind!r}")
    if isinstance(raw, (list, tuple)):
        return [decode_value(item) for item in raw]
    return raw


def encode_value(value: Any) -> Any:
    """Encode a field value into its JSON representation."""
    if isinstance(value, datetime):
        return {TYPE_KEY: "Date", "iso": format_timestamp(value)}
    if isinstance(value, Pointer):
        return {TYPE_KEY: "Pointer", "className": value.class_name, "objectId": value.object_id}
    if isinstance(value, dict):
        return {key: encode_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [encode_value(item) for item in value]
    return value


def decode_fields(data: dict[str, Any]) -> Fields:
    """Decode every top-level field of a record payload."""
    return {key: decode_value(value) for key, value in data.items()}


def encode_record(record: StoredRecord) -> dict[str, Any]:
    """Materialize a stored record as JSON.

    User fields are encoded with ``encode_value``; ``createdAt`` and
    ``updatedAt`` are plain ISO strings.
    """
    result = {key: encode_value(value) for key, value in record.fields.items()}
    result["objectId"] = record.object_id
    result["createdAt"] = format_timestamp(record.created_at)
    result["updatedAt"] = format_timestamp(record.updated_at)
    result["ACL"] = {principal: dict(perms) for principal, perms in record.acl.items()}
    return result


__all__ = [
    "TYPE_KEY",
    "format_timestamp",
    "utc_now",
    "is_typed_value",
    "decode_value",
    "encode_value",
    "decode_fields",
    "encode_record",
]
