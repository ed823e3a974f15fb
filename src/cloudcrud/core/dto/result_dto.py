"""Base envelope type for CloudCrud operations.

Every named operation answers with the same envelope shape:

    {"success": true, "message": "...", <operation payload>}

Failures are not encoded in the envelope: they raise a ``CloudCrudError``
whose message is prefixed with the failing operation. ``success`` is
therefore always True on a returned envelope.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    """Base class for all operation envelopes.

    Subclasses add the operation payload. Field names are snake_case in
    Python and camelCase on the wire (``object_id`` -> ``objectId``).

    Example:
        >>> envelope = DeleteRecordEnvelope(object_id="a1b2", message="Record deleted")
        >>> envelope.to_wire()
        {'success': True, 'message': 'Record deleted', 'objectId': 'a1b2'}
    """

    success: bool = Field(default=True, description="Always True on a returned envelope")
    message: str | None = Field(default=None, description="Human-readable outcome")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible dict returned to callers."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


__all__ = ["Envelope"]
