"""Dispatch of embedded calls to the host's run modes."""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Iterable, Mapping, Protocol

from .errors import UnknownHandlerError
from .parameters import resolve_arguments
from .protocol import EmbeddedCall, validate_handler_name
from .state import ContainingTemplate, RenderedOutput, TemplateContext

__all__ = ["ComponentHandler", "EmbeddingHost", "Invocable", "coerce_output"]

logger = logging.getLogger(__name__)


class EmbeddingHost(Protocol):
    """Dispatch table consulted for embedded handler names."""

    def resolve(self, name: str) -> Callable[..., Any] | None:
        """Return the run mode registered as ``name`` or ``None``."""


class Invocable(Protocol):
    """Object bound into native engines that can call methods from templates."""

    def embed(self, name: str, *args: Any) -> str:
        """Run ``name`` and return its output."""


class ComponentHandler:
    """Invoke run modes on behalf of one render of one template.

    The handler keeps only a weak reference to the host so that a template
    never keeps the application object alive.
    """

    def __init__(self, host: EmbeddingHost | None, containing: TemplateContext) -> None:
        self._host_ref = weakref.ref(host) if host is not None else None
        self._containing = containing.readonly()

    @property
    def containing(self) -> ContainingTemplate:
        return self._containing

    def embed(self, name: Any, *args: Any) -> str:
        return self.invoke(validate_handler_name(name), args)

    dispatch = embed

    def invoke_call(self, call: EmbeddedCall, parameters: Mapping[str, Any]) -> str:
        arguments = resolve_arguments(call.arguments, parameters)
        return self.invoke(call.handler, arguments)

    def invoke(self, name: str, arguments: Iterable[Any]) -> str:
        host = self._host_ref() if self._host_ref is not None else None
        if host is None:
            raise UnknownHandlerError(
                name, f"No embedding host is available to resolve '{name}'"
            )
        run_mode = host.resolve(name)
        if run_mode is None:
            raise UnknownHandlerError(name)
        logger.debug("Embedding run mode %s from %s template", name, self._containing.backend)
        return coerce_output(run_mode(self._containing, *arguments))


def coerce_output(value: Any) -> str:
    """Turn a run mode return value into substitution text."""

    match value:
        case str():
            return value
        case None:
            return ""
        case RenderedOutput(text=text):
            return text
    output = getattr(value, "output", None)
    if callable(output):
        return coerce_output(output())
    return str(value)
