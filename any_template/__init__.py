"""Load, fill and render templates through one interface across backends.

Templates may embed other run modes with ``cgiapp.embed('name', args...)``;
the output of the run mode is spliced into the template at the call site.
"""

from ._embedding import (
    ComponentHandler,
    ConfigurationError,
    ContainingTemplate,
    EmbeddedCall,
    Invocable,
    Literal,
    MalformedCallError,
    ParamRef,
    RenderedOutput,
    RenderError,
    TemplateContext,
    TemplateError,
    UnknownHandlerError,
    parse_call,
    resolve_argument,
    resolve_arguments,
    scan_calls,
)
from .config import TemplateConfig
from .drivers import Driver, DriverRegistry, EmbeddingStrategy, default_registry
from .host import TemplateHost

__all__ = [
    "ComponentHandler",
    "ConfigurationError",
    "ContainingTemplate",
    "Driver",
    "DriverRegistry",
    "EmbeddedCall",
    "EmbeddingStrategy",
    "Invocable",
    "Literal",
    "MalformedCallError",
    "ParamRef",
    "RenderError",
    "RenderedOutput",
    "TemplateConfig",
    "TemplateContext",
    "TemplateError",
    "TemplateHost",
    "UnknownHandlerError",
    "default_registry",
    "parse_call",
    "resolve_argument",
    "resolve_arguments",
    "scan_calls",
]
