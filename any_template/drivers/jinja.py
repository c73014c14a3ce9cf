"""Jinja2 driver.

Jinja evaluates method calls on template values, so the component handler
is bound directly under the marker name::

    {{ cgiapp.embed('some_run_mode', param1, 'literal string') }}

Argument expressions are evaluated by Jinja itself; undefined values are
passed to the run mode as empty strings.
"""

from __future__ import annotations

from typing import Any, ClassVar

from .._embedding.errors import MalformedCallError
from .._embedding.handler import ComponentHandler
from .._embedding.parameters import MISSING_VALUE
from .base import Driver, EmbeddingStrategy

__all__ = ["JinjaDriver"]


class _JinjaInvocable:
    """Expose a component handler to Jinja with Jinja-aware arguments."""

    def __init__(self, handler: ComponentHandler) -> None:
        self._handler = handler

    def embed(self, *args: Any) -> Any:
        from jinja2 import Undefined
        from markupsafe import Markup

        if not args:
            raise MalformedCallError("Embedded call must name a handler")
        name, *rest = args
        if isinstance(name, Undefined):
            raise MalformedCallError("Embedded handler name must be a quoted literal")
        arguments = [MISSING_VALUE if isinstance(arg, Undefined) else arg for arg in rest]
        # Run mode output is finished markup; autoescaping must not touch it.
        return Markup(self._handler.embed(name, *arguments))

    dispatch = embed


class JinjaDriver(Driver):
    backend: ClassVar[str] = "jinja2"
    strategy: ClassVar[EmbeddingStrategy] = EmbeddingStrategy.NATIVE_CALLBACK
    required_modules: ClassVar[tuple[str, ...]] = ("jinja2", "markupsafe")

    def initialize(self) -> Any:
        from jinja2 import Environment, FileSystemLoader

        search_path = [str(path) for path in self.context.include_paths]
        filename = self.context.filename
        if filename is not None and filename.is_absolute():
            search_path.insert(0, str(filename.parent))
            filename = filename.relative_to(filename.parent)
        environment = Environment(
            loader=FileSystemLoader(search_path or ["."]),
            **self.context.native_config,
        )
        if filename is not None:
            return environment.get_template(filename.as_posix())
        return environment.from_string(self.context.string)

    def render_template(self) -> str:
        parameters = self.context.snapshot()
        parameters[self.marker] = _JinjaInvocable(self.component_handler())
        return self._native.render(parameters)
