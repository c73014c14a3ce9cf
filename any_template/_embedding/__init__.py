"""Internal helpers for embedded component calls used by the drivers."""

from .errors import (
    ConfigurationError,
    MalformedCallError,
    RenderError,
    TemplateError,
    UnknownHandlerError,
)
from .handler import ComponentHandler, EmbeddingHost, Invocable
from .parameters import resolve_argument, resolve_arguments
from .protocol import (
    DEFAULT_MARKER,
    CallMatch,
    EmbeddedCall,
    Literal,
    ParamRef,
    parse_call,
    scan_calls,
    validate_marker,
)
from .state import ContainingTemplate, RenderedOutput, TemplateContext

__all__ = [
    "DEFAULT_MARKER",
    "CallMatch",
    "ComponentHandler",
    "ConfigurationError",
    "ContainingTemplate",
    "EmbeddedCall",
    "EmbeddingHost",
    "Invocable",
    "Literal",
    "MalformedCallError",
    "ParamRef",
    "RenderError",
    "RenderedOutput",
    "TemplateContext",
    "TemplateError",
    "UnknownHandlerError",
    "parse_call",
    "resolve_argument",
    "resolve_arguments",
    "scan_calls",
    "validate_marker",
]
