"""Driver for the built-in ``{{ name }}`` placeholder engine.

The placeholder engine only substitutes values, so embedded calls are
resolved before it renders. The driver asks the engine which tags it will
substitute, runs every tag that is an embedded call, and points those tags
at synthesized parameters holding the run mode output.

Parameter references inside embedded calls are resolved from the
parameters set before :meth:`render` starts. A value that only appears
while the render is running (for example, set by a run mode) is not seen
and resolves to an empty string.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from .._embedding.errors import ConfigurationError
from .._embedding.protocol import EmbeddedCall, parse_call
from .._embedding.renderer import PlaceholderTemplate
from .base import Driver, EmbeddingStrategy, synthesized_keys

__all__ = ["PlaceholderDriver"]

logger = logging.getLogger(__name__)


class PlaceholderDriver(Driver):
    backend: ClassVar[str] = "placeholder"
    strategy: ClassVar[EmbeddingStrategy] = EmbeddingStrategy.PRE_SCAN

    @classmethod
    def driver_config_keys(cls) -> tuple[str, ...]:
        return (*super().driver_config_keys(), "associate_query")

    @classmethod
    def default_driver_config(cls) -> dict[str, Any]:
        return {**super().default_driver_config(), "associate_query": False}

    def initialize(self) -> PlaceholderTemplate:
        options = dict(self.context.native_config)
        if self.driver_config["associate_query"] and "associate" not in options:
            query = getattr(self.host, "query", None)
            if query is None:
                raise ConfigurationError(
                    f"{self.backend}: associate_query requires a host with a request query"
                )
            options["associate"] = query
        if self.context.filename is not None:
            return PlaceholderTemplate.from_file(
                self.context.filename, self.context.include_paths, **options
            )
        return PlaceholderTemplate(self.context.string or "", **options)

    def reset_native_params(self) -> None:
        self._native.clear_params()

    def render_template(self) -> str:
        template: PlaceholderTemplate = self._native
        parameters = self.context.snapshot()
        template.param(parameters)

        calls: dict[int, EmbeddedCall] = {}
        for index, expression in enumerate(template.query()):
            call = parse_call(expression, self.marker)
            if call is not None:
                calls[index] = call
        if not calls:
            return template.output()

        handler = self.component_handler()
        keys = synthesized_keys(self.marker, parameters)
        substitutions: dict[int, str] = {}
        values: dict[str, str] = {}
        for index, call in calls.items():
            key = next(keys)
            logger.debug("Pre-scanned %s.%s('%s') into %s", self.marker, call.method, call.handler, key)
            values[key] = handler.invoke_call(call, parameters)
            substitutions[index] = key

        rewritten = template.rewrite(substitutions)
        rewritten.param(values)
        return rewritten.output()
