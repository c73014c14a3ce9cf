"""Error types raised while loading and rendering templates."""

from __future__ import annotations


class TemplateError(RuntimeError):
    """Base class for every error raised by :mod:`any_template`."""

    __slots__ = ()


class ConfigurationError(TemplateError):
    """Raised when a template is loaded with invalid or contradictory setup."""

    __slots__ = ()


class MalformedCallError(TemplateError):
    """Raised when an embedded call cannot be parsed or names an invalid handler."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position


class UnknownHandlerError(TemplateError):
    """Raised when an embedded call names a handler the host cannot resolve."""

    def __init__(self, handler_name: str, message: str | None = None) -> None:
        super().__init__(message or f"Unknown embedded handler '{handler_name}'")
        self.handler_name = handler_name


class RenderError(TemplateError):
    """Raised when the native template engine fails."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(f"[{backend}] {message}")
        self.backend = backend
