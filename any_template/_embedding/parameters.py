"""Resolution of embedded call arguments against template parameters."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .protocol import Argument, Literal, ParamRef

__all__ = ["MISSING_VALUE", "resolve_argument", "resolve_arguments"]

MISSING_VALUE = ""


def resolve_argument(argument: Argument, parameters: Mapping[str, Any]) -> Any:
    """Return the value for a single argument.

    Literals come back unchanged. Parameter references that are not set
    resolve to an empty string; templates routinely reference optional values.
    """

    match argument:
        case Literal(value=value):
            return value
        case ParamRef(name=name):
            return parameters.get(name, MISSING_VALUE)
    raise TypeError(f"Unsupported embedded call argument {argument!r}")


def resolve_arguments(
    arguments: Iterable[Argument], parameters: Mapping[str, Any]
) -> list[Any]:
    return [resolve_argument(argument, parameters) for argument in arguments]
