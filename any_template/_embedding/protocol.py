"""Grammar and parsing for embedded component calls.

An embedded call has the shape ``marker.embed('handler', arg, "literal")``.
The marker is configured per template (``cgiapp`` by default) and compared
case-sensitively. Quoted arguments are literals; bare identifiers name a
parameter of the containing template.
"""

from __future__ import annotations

import enum
import re
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

from .errors import ConfigurationError, MalformedCallError

__all__ = [
    "DEFAULT_MARKER",
    "EMBED_METHODS",
    "Argument",
    "CallMatch",
    "EmbeddedCall",
    "Literal",
    "ParamRef",
    "is_identifier",
    "match_call",
    "parse_call",
    "scan_calls",
    "validate_handler_name",
    "validate_marker",
]

DEFAULT_MARKER = "cgiapp"
EMBED_METHODS = ("embed", "dispatch")

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_CHARS = _NAME_START | frozenset(string.digits)
_QUOTES = frozenset("'\"")


@dataclass(frozen=True)
class Literal:
    """Quoted argument, passed through with its quotes removed."""

    value: str


@dataclass(frozen=True)
class ParamRef:
    """Bare argument naming a parameter of the containing template."""

    name: str


Argument = Literal | ParamRef


@dataclass(frozen=True)
class EmbeddedCall:
    """A parsed ``marker.embed(...)`` invocation."""

    handler: str
    arguments: tuple[Argument, ...] = ()
    method: str = "embed"


@dataclass(frozen=True)
class CallMatch:
    """An embedded call located inside a larger piece of text."""

    call: EmbeddedCall
    start: int
    end: int


def is_identifier(value: object) -> bool:
    return isinstance(value, str) and _IDENTIFIER.fullmatch(value) is not None


def validate_marker(marker: object) -> str:
    """Return ``marker`` if it is usable as a call marker."""

    if not is_identifier(marker):
        raise ConfigurationError(
            f"Embed tag name {marker!r} must contain only letters, digits and "
            "underscores and must not start with a digit"
        )
    return marker  # type: ignore[return-value]


def validate_handler_name(name: object) -> str:
    if not is_identifier(name):
        raise MalformedCallError(f"Invalid embedded handler name {name!r}")
    return name  # type: ignore[return-value]


@lru_cache(maxsize=64)
def _call_head(marker: str) -> re.Pattern[str]:
    methods = "|".join(EMBED_METHODS)
    return re.compile(
        rf"(?<![A-Za-z0-9_.]){re.escape(marker)}\s*\.\s*({methods})\s*\("
    )


@lru_cache(maxsize=64)
def _bare_reference(marker: str) -> re.Pattern[str]:
    methods = "|".join(EMBED_METHODS)
    return re.compile(rf"{re.escape(marker)}\s*\.\s*({methods})\b")


class _State(enum.Enum):
    START = "start"
    ARGUMENT = "argument"
    LITERAL = "literal"
    NAME = "name"
    AFTER = "after"


def _parse_arguments(text: str, pos: int) -> tuple[tuple[Argument, ...], int]:
    """Parse an argument list starting just after ``(``.

    Returns the arguments and the offset just past the closing ``)``.
    """

    arguments: list[Argument] = []
    state = _State.START
    quote = ""
    token_start = pos
    index = pos
    while index < len(text):
        char = text[index]
        if state is _State.LITERAL:
            if char == quote:
                arguments.append(Literal(text[token_start:index]))
                state = _State.AFTER
            index += 1
            continue
        if state is _State.NAME:
            if char in _NAME_CHARS:
                index += 1
                continue
            arguments.append(ParamRef(text[token_start:index]))
            state = _State.AFTER
        if char.isspace():
            index += 1
            continue
        if state is _State.AFTER:
            if char == ",":
                state = _State.ARGUMENT
            elif char == ")":
                return tuple(arguments), index + 1
            else:
                raise MalformedCallError(
                    f"Expected ',' or ')' in embedded call, found {char!r}",
                    position=index,
                )
        elif char in _QUOTES:
            quote = char
            token_start = index + 1
            state = _State.LITERAL
        elif char in _NAME_START:
            token_start = index
            state = _State.NAME
        elif char == ")" and state is _State.START:
            return tuple(arguments), index + 1
        else:
            raise MalformedCallError(
                f"Unexpected {char!r} in embedded call arguments", position=index
            )
        index += 1

    if state is _State.LITERAL:
        raise MalformedCallError("Unterminated string literal", position=token_start - 1)
    raise MalformedCallError("Embedded call is missing a closing ')'", position=len(text))


def _build_call(method: str, arguments: tuple[Argument, ...], position: int) -> EmbeddedCall:
    if not arguments:
        raise MalformedCallError("Embedded call must name a handler", position=position)
    target, *rest = arguments
    if not isinstance(target, Literal):
        raise MalformedCallError(
            f"Embedded handler name must be a quoted literal, not '{target.name}'",
            position=position,
        )
    return EmbeddedCall(
        handler=validate_handler_name(target.value),
        arguments=tuple(rest),
        method=method,
    )


def match_call(text: str, pos: int, marker: str) -> CallMatch | None:
    """Parse a call starting exactly at ``pos`` or return ``None``.

    ``None`` means the text at ``pos`` is not a call for ``marker``; a call
    head that is followed by a broken argument list raises
    :class:`MalformedCallError`.
    """

    head = _call_head(marker).match(text, pos)
    if head is None:
        return None
    arguments, end = _parse_arguments(text, head.end())
    call = _build_call(head.group(1), arguments, head.start())
    return CallMatch(call=call, start=head.start(), end=end)


def parse_call(expression: str, marker: str) -> EmbeddedCall | None:
    """Parse a whole tag expression such as ``cgiapp.embed('header')``.

    Expressions that do not start with ``marker`` are not embedded calls and
    yield ``None``.
    """

    stripped = expression.strip()
    match = match_call(stripped, 0, marker)
    if match is None:
        if _bare_reference(marker).fullmatch(stripped):
            raise MalformedCallError(
                f"Embedded call '{stripped}' is missing its argument list"
            )
        return None
    trailing = stripped[match.end:]
    if trailing.strip():
        raise MalformedCallError(
            f"Unexpected text after embedded call: {trailing.strip()!r}",
            position=match.end,
        )
    return match.call


def scan_calls(text: str, marker: str) -> Iterator[CallMatch]:
    """Yield every embedded call found in ``text`` in source order."""

    pattern = _call_head(marker)
    pos = 0
    while True:
        head = pattern.search(text, pos)
        if head is None:
            return
        match = match_call(text, head.start(), marker)
        if match is None:
            pos = head.end()
            continue
        yield match
        pos = match.end
