"""Template configuration consumed by :class:`~any_template.host.TemplateHost`."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ._embedding.errors import ConfigurationError

__all__ = ["DEFAULT_BACKEND", "DEFAULT_CONF_NAME", "TemplateConfig"]

DEFAULT_BACKEND = "placeholder"
DEFAULT_CONF_NAME = "default"

_MANIFEST_KEYS = frozenset(
    {
        "type",
        "include_paths",
        "auto_add_template_extension",
        "return_references",
        "backends",
    }
)


@dataclass(frozen=True)
class TemplateConfig:
    """One named template configuration.

    ``backends`` maps a backend name to its options. Options the backend's
    driver knows about (``embed_tag_name``, ``template_extension`` and so on)
    configure the driver; everything else is passed to the native engine.
    """

    type: str = DEFAULT_BACKEND
    include_paths: tuple[Path, ...] = ()
    auto_add_template_extension: bool = True
    return_references: bool = False
    backends: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not self.type:
            raise ConfigurationError("Template config 'type' must be a backend name")
        object.__setattr__(self, "include_paths", _freeze_paths(self.include_paths))
        if not isinstance(self.backends, Mapping):
            raise ConfigurationError("Template config 'backends' must be a mapping")
        frozen: dict[str, Mapping[str, Any]] = {}
        for name, options in self.backends.items():
            if not isinstance(options, Mapping):
                raise ConfigurationError(f"Options for backend '{name}' must be a mapping")
            frozen[name] = MappingProxyType(dict(options))
        object.__setattr__(self, "backends", MappingProxyType(frozen))

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "TemplateConfig":
        if not isinstance(manifest, Mapping):
            raise ConfigurationError("Template config must be a mapping")
        unknown = set(manifest) - _MANIFEST_KEYS
        if unknown:
            raise ConfigurationError(
                f"Unknown template config keys: {', '.join(sorted(map(str, unknown)))}"
            )
        for flag in ("auto_add_template_extension", "return_references"):
            if flag in manifest and not isinstance(manifest[flag], bool):
                raise ConfigurationError(f"Template config '{flag}' must be a boolean")
        return cls(**manifest)

    def options_for(self, backend: str) -> dict[str, Any]:
        return dict(self.backends.get(backend, {}))


def _freeze_paths(value: Any) -> tuple[Path, ...]:
    if isinstance(value, (str, Path)):
        return (Path(value),)
    if not isinstance(value, Iterable):
        raise ConfigurationError("Template config 'include_paths' must be a path or list of paths")
    return tuple(Path(path) for path in value)
