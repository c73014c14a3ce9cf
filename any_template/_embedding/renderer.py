"""Flat ``{{ name }}`` substitution engine used by the placeholder backend."""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, NamedTuple

__all__ = ["PlaceholderError", "PlaceholderTemplate", "stringify"]

_MISSING = object()
_OPEN = "{{"
_CLOSE = "}}"
_QUOTES = frozenset("'\"")


class PlaceholderError(ValueError):
    """Raised when a placeholder template cannot be rendered."""


class _Tag(NamedTuple):
    start: int
    end: int
    expression: str


class PlaceholderTemplate:
    """Substitute ``{{ expression }}`` tags from a cached parameter mapping.

    Expressions are a parameter name optionally followed by attribute or key
    access (``user.name``, ``rows[0]``) and a pipeline of modifiers
    (``{{ title | coalesce('untitled') | upper }}``). Quoted text inside a
    tag may contain ``}}``. Parameters stay cached on the instance until
    :meth:`clear_params`.

    Outside strict mode unset names and expressions the engine does not
    evaluate (calls, arithmetic) render as an empty string.
    """

    def __init__(
        self,
        source: str,
        *,
        strict: bool = False,
        associate: Mapping[str, Any] | None = None,
    ) -> None:
        self._source = source
        self._options: Dict[str, Any] = {"strict": strict, "associate": associate}
        self._strict = strict
        self._associate: Mapping[str, Any] = associate or {}
        self._params: Dict[str, Any] = {}
        self._tags = tuple(_iter_tags(source))
        self._modifier_handlers: Dict[str, Callable[[Any, list[Any], dict[str, Any]], Any]] = {
            "coalesce": self._handle_coalesce,
            "upper": self._handle_upper,
            "lower": self._handle_lower,
        }

    @classmethod
    def from_file(
        cls, path: Path, search_paths: Iterable[Path] = (), **options: Any
    ) -> "PlaceholderTemplate":
        for candidate in _candidates(Path(path), search_paths):
            if candidate.is_file():
                return cls(candidate.read_text(encoding="utf-8"), **options)
        raise PlaceholderError(f"Template file '{path}' not found")

    @property
    def source(self) -> str:
        return self._source

    def param(self, values: Mapping[str, Any]) -> None:
        self._params.update(values)

    def params(self) -> Mapping[str, Any]:
        return dict(self._params)

    def clear_params(self) -> None:
        self._params.clear()

    def query(self) -> tuple[str, ...]:
        """Return the expression of every tag, one entry per occurrence."""

        return tuple(tag.expression for tag in self._tags)

    def rewrite(self, substitutions: Mapping[int, str]) -> "PlaceholderTemplate":
        """Return a copy whose tags at the given positions point at new names.

        Keys of ``substitutions`` index into :meth:`query`.
        """

        pieces: list[str] = []
        position = 0
        for index, tag in enumerate(self._tags):
            replacement = substitutions.get(index)
            if replacement is None:
                continue
            pieces.append(self._source[position:tag.start])
            pieces.append(f"{_OPEN} {replacement} {_CLOSE}")
            position = tag.end
        pieces.append(self._source[position:])

        clone = type(self)("".join(pieces), **self._options)
        clone.param(self._params)
        return clone

    def output(self) -> str:
        pieces: list[str] = []
        position = 0
        for tag in self._tags:
            pieces.append(self._source[position:tag.start])
            pieces.append(stringify(self._evaluate_expression(tag.expression)))
            position = tag.end
        pieces.append(self._source[position:])
        return "".join(pieces)

    def _evaluate_expression(self, expression: str) -> Any:
        base, *modifier_segments = _split_pipeline(expression)
        if not base:
            raise PlaceholderError("Empty template expression")
        value = self._resolve_path(base)
        for modifier in filter(None, modifier_segments):
            value = self._apply_modifier(value, modifier)
        return value

    def _resolve_path(self, path_expression: str) -> Any:
        try:
            node = ast.parse(path_expression, mode="eval").body
        except SyntaxError as exc:
            raise PlaceholderError(f"Invalid expression '{path_expression}'") from exc
        value = self._eval_ast(node)
        return None if value is _MISSING else value

    def _eval_ast(self, node: ast.AST) -> Any:
        if isinstance(node, ast.Name):
            return self._lookup(node.id)
        if isinstance(node, ast.Attribute):
            value = self._eval_ast(node.value)
            return _MISSING if value is _MISSING else self._resolve_getattr(value, node.attr)
        if isinstance(node, ast.Subscript):
            value = self._eval_ast(node.value)
            key = self._eval_ast(node.slice)
            return _MISSING if value is _MISSING else self._resolve_getitem(value, key)
        if isinstance(node, ast.Constant):
            return node.value
        if self._strict:
            raise PlaceholderError("Unsupported expression in template")
        return _MISSING

    def _lookup(self, name: str) -> Any:
        if name in self._params:
            return self._params[name]
        if name in self._associate:
            return self._associate[name]
        if self._strict:
            raise PlaceholderError(f"Parameter '{name}' is not set")
        return _MISSING

    def _resolve_getattr(self, value: Any, attr: str) -> Any:
        if isinstance(value, Mapping):
            if attr in value:
                return value[attr]
        elif not attr.startswith("_") and hasattr(value, attr):
            return getattr(value, attr)
        if self._strict:
            raise PlaceholderError(f"Attribute '{attr}' is not accessible in templates")
        return _MISSING

    def _resolve_getitem(self, value: Any, key: Any) -> Any:
        try:
            return value[key]
        except (KeyError, IndexError, TypeError) as exc:
            if self._strict:
                raise PlaceholderError(f"Key {key!r} does not exist") from exc
            return _MISSING

    def _apply_modifier(self, value: Any, modifier: str) -> Any:
        try:
            call = ast.parse(modifier, mode="eval").body
        except SyntaxError as exc:
            raise PlaceholderError(f"Invalid modifier '{modifier}'") from exc
        if isinstance(call, ast.Name):
            call = ast.Call(func=call, args=[], keywords=[])
        if not isinstance(call, ast.Call) or not isinstance(call.func, ast.Name):
            raise PlaceholderError("Modifiers must be names or function calls")
        args = [self._literal_eval(arg) for arg in call.args]
        kwargs = {kw.arg: self._literal_eval(kw.value) for kw in call.keywords}

        handler = self._modifier_handlers.get(call.func.id)
        if handler is None:
            raise PlaceholderError(f"Unknown modifier '{call.func.id}'")
        return handler(value, args, kwargs)

    def _handle_coalesce(self, value: Any, args: list[Any], kwargs: dict[str, Any]) -> Any:
        default = args[0] if args else kwargs.get("default", "")
        return value if value is not None else default

    def _handle_upper(self, value: Any, args: list[Any], kwargs: dict[str, Any]) -> Any:
        return stringify(value).upper()

    def _handle_lower(self, value: Any, args: list[Any], kwargs: dict[str, Any]) -> Any:
        return stringify(value).lower()

    def _literal_eval(self, node: ast.AST) -> Any:
        try:
            return ast.literal_eval(node)
        except ValueError as exc:
            raise PlaceholderError("Modifiers accept literal arguments") from exc


def stringify(value: Any) -> str:
    """Render a parameter value as template text."""

    match value:
        case None:
            return ""
        case bool() as boolean:
            return "true" if boolean else "false"
    return str(value)


def _iter_tags(source: str) -> Iterator[_Tag]:
    """Yield every ``{{ ... }}`` tag, skipping ``}}`` inside quoted text.

    An opening ``{{`` without a closing ``}}`` outside quotes is plain text.
    """

    search_from = 0
    while True:
        start = source.find(_OPEN, search_from)
        if start == -1:
            return
        close = _find_close(source, start + len(_OPEN))
        if close == -1:
            search_from = start + len(_OPEN)
            continue
        end = close + len(_CLOSE)
        yield _Tag(start, end, source[start + len(_OPEN):close].strip())
        search_from = end


def _find_close(source: str, index: int) -> int:
    quote = ""
    while index < len(source):
        char = source[index]
        if quote:
            if char == quote:
                quote = ""
        elif char in _QUOTES:
            quote = char
        elif source.startswith(_CLOSE, index):
            return index
        index += 1
    return -1


def _split_pipeline(expression: str) -> list[str]:
    segments: list[str] = []
    quote = ""
    current: list[str] = []
    for char in expression:
        if quote:
            if char == quote:
                quote = ""
        elif char in _QUOTES:
            quote = char
        elif char == "|":
            segments.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    segments.append("".join(current).strip())
    return segments


def _candidates(path: Path, search_paths: Iterable[Path]) -> Iterable[Path]:
    if path.is_absolute():
        yield path
        return
    for directory in search_paths:
        yield Path(directory) / path
    yield path
