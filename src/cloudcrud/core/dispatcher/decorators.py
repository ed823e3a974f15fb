"""Operation decorator and related data structures."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

from cloudcrud.core.dto.result_dto import Envelope

OperationFunction: TypeAlias = Callable[[Any, dict[str, Any]], Awaitable[Envelope]]


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


# class to represent an @operation
class Operation:
    """A named operation exposed by the Dispatcher."""

    def __init__(
        self,
        name: str,
        func: OperationFunction,
        *,
        required: tuple[str, ...] = (),
        arrays: tuple[str, ...] = (),
        failure: str | None = None,
    ):
        """Create an Operation.

        Args:
            name: Operation name callers invoke.
            func: Coroutine function ``(context, params) -> Envelope``.
            required: Parameter names that must be present and non-empty.
            arrays: Required parameters that must also be lists.
            failure: Prefix for error messages, e.g. "Failed to create record".
                None leaves errors unprefixed.
        """
        self.function = func
        self.name = name
        self.required = required
        self.arrays = arrays
        self.failure = failure

    def missing_message(self, params: Mapping[str, Any]) -> str | None:
        """Return the validation message if a required parameter is missing.

        The message names every required parameter, as in
        "className and data are required".
        """
        missing = [name for name in self.required if _is_missing(params.get(name))]
        missing += [name for name in self.arrays if not isinstance(params.get(name), list)]
        if not missing:
            return None
        names = [f"{name} array" if name in self.arrays else name for name in self.required]
        verb = "is" if len(names) == 1 else "are"
        return f"{_join_names(names)} {verb} required"

    def __repr__(self) -> str:
        """Return a compact debug representation."""
        return f"Operation(name={self.name}, required={self.required})"


def operation(
    name: str,
    *,
    required: tuple[str, ...] = (),
    arrays: tuple[str, ...] = (),
    failure: str | None = None,
) -> Callable[[OperationFunction], Operation]:
    """Decorate a coroutine function as a Dispatcher operation.

    Example:
        >>> @operation("countRecords", required=("className",), failure="Failed to count records")
        ... async def count_records(ctx, params):
        ...     ...

    Args:
        name: Operation name callers invoke.
        required: Parameter names that must be present and non-empty.
        arrays: Parameters that must be lists; they are also required.
        failure: Error message prefix for this operation.

    Returns:
        A decorator that wraps the function into an Operation.
    """

    def _make_operation(func: OperationFunction) -> Operation:
        return Operation(
            name,
            func,
            required=tuple(required) + tuple(a for a in arrays if a not in required),
            arrays=tuple(arrays),
            failure=failure,
        )

    return _make_operation
