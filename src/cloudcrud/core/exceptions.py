"""CloudCrud - Exceptions.

Every failure surfaced by CloudCrud carries a single human-readable message.
There is no structured error code: callers match on the message text.

Exception Hierarchy
-------------------
- **CloudCrudError**: Base for all CloudCrud exceptions.
- **ValidationError**: Input is missing or malformed.
- **NotFoundError**: Referenced class or record does not exist.
- **StoreError**: The document store collaborator failed.
"""

import copy
from typing import Any


class CloudCrudError(Exception):
    """Base exception for all CloudCrud errors.

    Attributes:
        message: Human-readable description.
        context: Diagnostic data (safe to log).
    """

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        """Initialize the exception.

        Args:
            message: Error description.
            context: Optional diagnostic context for tracing.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def prefixed(self, prefix: str) -> "CloudCrudError":
        """Return a copy of this error whose message starts with ``prefix``.

        The copy keeps the concrete class and context so callers can still
        branch on the kind of failure.

        Args:
            prefix: Operation-specific prefix, e.g. "Failed to create record".

        Returns:
            A new exception of the same type.
        """
        clone = copy.copy(self)
        clone.message = f"{prefix}: {self.message}"
        clone.args = (clone.message,)
        return clone

    def __str__(self) -> str:
        return self.message


class ValidationError(CloudCrudError):
    """Raised when a required parameter is missing or an input is malformed.

    Attributes:
        field: Optional name of the offending parameter or field.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.field = field


class NotFoundError(CloudCrudError):
    """Raised when a referenced class or record id does not exist.

    Attributes:
        class_name: The class that was looked up.
        object_id: The record id, when a record lookup failed.
    """

    def __init__(self, class_name: str, object_id: str | None = None):
        self.class_name = class_name
        self.object_id = object_id
        if object_id is None:
            message = f"Class '{class_name}' not found"
        else:
            message = f"Object '{object_id}' not found in class '{class_name}'"
        super().__init__(message, context={"className": class_name, "objectId": object_id})


class StoreError(CloudCrudError):
    """Raised when the underlying document store fails.

    Wraps connectivity, permission, constraint and bulk-write failures.

    Attributes:
        cause: Optional original exception from the store.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


__all__ = [
    "CloudCrudError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
]
