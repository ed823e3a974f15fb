"""Dispatcher - Named-operation router for CloudCrud.

The Dispatcher receives an operation name and a parameter mapping, checks
the operation's required parameters, runs it and returns the uniform
envelope. Failures are re-raised with the operation's message prefix
("Failed to create record: ...") and keep their exception class.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from inspect import getmembers
from types import ModuleType
from typing import Any

from cloudcrud.core.dispatcher import operations as builtin_operations
from cloudcrud.core.dispatcher.decorators import Operation
from cloudcrud.core.exceptions import CloudCrudError, StoreError, ValidationError
from cloudcrud.core.records.record_access import RecordAccess
from cloudcrud.core.schema_registry.schema_registry import SchemaRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OperationContext:
    """Collaborators and settings handed to every operation.

    Attributes:
        schema_registry: Table lifecycle manager.
        records: Record access layer.
        default_limit: readTable page size when no limit is given.
        max_limit: Optional upper bound applied to readTable limits.
        server_version: Version reported by getServerInfo.
        features: Capability flags reported by getServerInfo.
    """

    schema_registry: SchemaRegistry
    records: RecordAccess
    default_limit: int = 100
    max_limit: int | None = None
    server_version: str = ""
    features: dict[str, bool] = field(default_factory=dict)


class Dispatcher:
    """Route named operations and normalize their results.

    Operations are discovered from modules holding ``@operation``-decorated
    functions; the built-in operations module is always loaded first.

    Example:
        >>> dispatcher = Dispatcher(context)
        >>> await dispatcher.run("countRecords", {"className": "Task"})
        {'success': True, 'className': 'Task', 'count': 3}
    """

    def __init__(
        self,
        context: OperationContext,
        *,
        modules: Iterable[ModuleType] = (),
    ):
        """Create a Dispatcher.

        Args:
            context: Collaborators handed to operations.
            modules: Extra modules to scan for operations.
        """
        self._context = context
        self._operations: dict[str, Operation] = {}
        for module in (builtin_operations, *modules):
            self.load_module(module)
        logger.debug("Dispatcher created with %d operation(s).", len(self._operations))

    @staticmethod
    def _is_operation(obj: Any) -> bool:
        return isinstance(obj, Operation)

    def load_module(self, module: ModuleType) -> None:
        """Register every ``Operation`` defined in ``module``."""
        # getmembers returns a tuple
        for _, op in getmembers(module, self._is_operation):
            self.register(op)

    def register(self, op: Operation) -> None:
        """Register one operation.

        Raises:
            ValueError: If an operation with the same name is registered.
        """
        if op.name in self._operations:
            raise ValueError(f"Operation already registered: {op.name!r}")
        self._operations[op.name] = op

    @property
    def operation_names(self) -> list[str]:
        """Names of the registered operations, sorted."""
        return sorted(self._operations)

    async def run(self, name: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run a named operation.

        Args:
            name: Operation name, e.g. "createRecord".
            params: Operation parameters.

        Returns:
            The envelope as a JSON-compatible dict with ``success: True``.

        Raises:
            ValidationError: If the operation is unknown or a required
                parameter is missing. Raised before any store access and
                without prefix.
            CloudCrudError: Any other failure, with the operation prefix.
                Exceptions that are not CloudCrudError are wrapped in
                StoreError.
        """
        op = self._operations.get(name)
        if op is None:
            raise ValidationError(f"Unknown operation: {name!r}", field="operation")

        params = dict(params or {})
        message = op.missing_message(params)
        if message is not None:
            logger.debug("Operation '%s' rejected: %s", name, message)
            raise ValidationError(message)

        logger.debug("Running operation '%s'", name)
        try:
            envelope = await op.function(self._context, params)
        except CloudCrudError as e:
            if op.failure is None:
                raise
            logger.error("Operation '%s' failed: %s", name, e.message)
            raise e.prefixed(op.failure) from e
        except Exception as e:
            if op.failure is None:
                raise
            logger.error("Operation '%s' failed: %s: %s", name, type(e).__name__, e)
            raise StoreError(str(e), cause=e).prefixed(op.failure) from e

        return envelope.to_wire()


__all__ = ["Dispatcher", "OperationContext"]
