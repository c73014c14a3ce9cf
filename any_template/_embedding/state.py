"""Per-template state shared by drivers and the component handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .errors import ConfigurationError

__all__ = ["ContainingTemplate", "RenderedOutput", "TemplateContext"]


@dataclass
class TemplateContext:
    """Everything one load/render cycle knows about its template.

    Exactly one of ``filename`` and ``string`` is set. ``parameters`` is
    merged into with last-write-wins semantics and only emptied by
    :meth:`clear`.
    """

    backend: str
    filename: Path | None = None
    string: str | None = None
    include_paths: tuple[Path, ...] = ()
    driver_config: Mapping[str, Any] = field(default_factory=dict)
    native_config: Mapping[str, Any] = field(default_factory=dict)
    return_references: bool = False
    conf_name: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if (self.filename is None) == (self.string is None):
            raise ConfigurationError(
                f"{self.backend}: exactly one of a filename or a template string "
                "must be specified"
            )
        if self.filename is not None:
            self.filename = Path(self.filename)
        self.include_paths = tuple(Path(path) for path in self.include_paths)
        self.driver_config = dict(self.driver_config)
        self.native_config = dict(self.native_config)

    def update(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        self.parameters.update(values)

    def clear(self) -> None:
        self.parameters.clear()

    def snapshot(self) -> dict[str, Any]:
        return dict(self.parameters)

    def readonly(self) -> "ContainingTemplate":
        return ContainingTemplate(
            backend=self.backend,
            filename=self.filename,
            string=self.string,
            params=MappingProxyType(self.parameters),
        )


@dataclass(frozen=True)
class ContainingTemplate:
    """Read-only view of the template that issued an embedded call."""

    backend: str
    filename: Path | None
    string: str | None
    params: Mapping[str, Any]


@dataclass
class RenderedOutput:
    """Mutable holder for rendered text handed to post-process hooks."""

    text: str

    def __str__(self) -> str:
        return self.text
