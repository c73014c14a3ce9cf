"""Driver for :class:`string.Template` sources.

``string.Template`` only substitutes flat names, so the driver scans the
raw source for calls wrapped in braced placeholders::

    Hello ${cgiapp.embed('header')}!

Each call is run before substitution and its tag is rewritten to a
synthesized name. Like every pre-scan backend, parameter references are
resolved from the parameters present when :meth:`render` starts.
"""

from __future__ import annotations

import logging
import re
import string
from typing import Any, ClassVar, Iterator

from .._embedding.errors import ConfigurationError, MalformedCallError
from .._embedding.protocol import CallMatch, match_call
from .base import Driver, EmbeddingStrategy, find_template_file, synthesized_keys

__all__ = ["StringTemplateDriver"]

logger = logging.getLogger(__name__)


class StringTemplateDriver(Driver):
    backend: ClassVar[str] = "string_template"
    strategy: ClassVar[EmbeddingStrategy] = EmbeddingStrategy.PRE_SCAN

    @classmethod
    def default_driver_config(cls) -> dict[str, Any]:
        return {**super().default_driver_config(), "template_extension": ".txt"}

    def initialize(self) -> string.Template:
        options = dict(self.context.native_config)
        self._delimiter = str(options.pop("delimiter", "$"))
        self._safe = bool(options.pop("safe", True))
        if options:
            raise ConfigurationError(
                f"{self.backend}: unsupported native options: {', '.join(sorted(options))}"
            )
        self._template_class = type(
            "DriverTemplate", (string.Template,), {"delimiter": self._delimiter}
        )
        self._opening = re.compile(
            rf"{re.escape(self._delimiter)}(?:(?P<escaped>{re.escape(self._delimiter)})|\{{)"
        )
        if self.context.filename is not None:
            path = find_template_file(self.context.filename, self.context.include_paths)
            return self._template_class(path.read_text(encoding="utf-8"))
        return self._template_class(self.context.string or "")

    def render_template(self) -> str:
        source = self._native.template
        parameters = self.context.snapshot()
        matches = list(self._scan(source))

        template = self._native
        values: dict[str, str] = {}
        if matches:
            handler = self.component_handler()
            keys = synthesized_keys(self.marker, parameters)
            pieces: list[str] = []
            position = 0
            for match in matches:
                key = next(keys)
                logger.debug("Pre-scanned %s('%s') into %s", self.marker, match.call.handler, key)
                values[key] = handler.invoke_call(match.call, parameters)
                pieces.append(source[position:match.start])
                pieces.append(f"{self._delimiter}{{{key}}}")
                position = match.end
            pieces.append(source[position:])
            template = self._template_class("".join(pieces))

        mapping = {**parameters, **values}
        if self._safe:
            return template.safe_substitute(mapping)
        return template.substitute(mapping)

    def _scan(self, source: str) -> Iterator[CallMatch]:
        position = 0
        while True:
            opening = self._opening.search(source, position)
            if opening is None:
                return
            position = opening.end()
            if opening.group("escaped"):
                continue
            start = _skip_whitespace(source, position)
            match = match_call(source, start, self.marker)
            if match is None:
                continue
            close = _skip_whitespace(source, match.end)
            if close >= len(source) or source[close] != "}":
                raise MalformedCallError(
                    "Embedded call is missing its closing '}'", position=close
                )
            position = close + 1
            yield CallMatch(call=match.call, start=opening.start(), end=position)


def _skip_whitespace(source: str, position: int) -> int:
    while position < len(source) and source[position].isspace():
        position += 1
    return position
