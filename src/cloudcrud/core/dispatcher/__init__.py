"""Dispatcher - Named-operation routing for CloudCrud.

Main Components
---------------
- **Dispatcher**: Validates parameters, runs operations, wraps errors.
- **Operation / operation**: Declaration of a named operation.
- **OperationContext**: Collaborators handed to operations.
"""

from cloudcrud.core.dispatcher.decorators import Operation, operation
from cloudcrud.core.dispatcher.dispatcher import Dispatcher, OperationContext

__all__ = ["Dispatcher", "Operation", "OperationContext", "operation"]
