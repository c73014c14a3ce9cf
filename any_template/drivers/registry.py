"""Registry mapping backend names to driver classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

from .._embedding.errors import ConfigurationError
from .._embedding.handler import ComponentHandler, EmbeddingHost
from .._embedding.state import TemplateContext
from .base import Driver, EmbeddingStrategy
from .jinja import JinjaDriver
from .placeholder import PlaceholderDriver
from .string_template import StringTemplateDriver

__all__ = ["DriverRegistry", "default_registry"]


@dataclass
class DriverRegistry:
    """Explicit factory for drivers, built once and handed to template hosts."""

    _drivers: dict[str, type[Driver]] = field(default_factory=dict)

    def register(self, driver_class: type[Driver], *, name: str | None = None) -> None:
        backend = (name or getattr(driver_class, "backend", "")).strip()
        if not backend:
            raise ConfigurationError("Driver backend name cannot be empty")
        if backend in self._drivers:
            raise ConfigurationError(f"Template backend '{backend}' is already registered")
        self._drivers[backend] = driver_class

    def register_many(self, driver_classes: Iterable[type[Driver]]) -> None:
        for driver_class in driver_classes:
            self.register(driver_class)

    def get(self, backend: str) -> type[Driver]:
        driver_class = self._drivers.get(backend)
        if driver_class is None:
            valid = ", ".join(sorted(self._drivers))
            raise ConfigurationError(
                f"Unknown template backend '{backend}'. Valid backends: {valid}"
            )
        return driver_class

    def backends(self) -> tuple[str, ...]:
        return tuple(self._drivers)

    def strategy_for(self, backend: str) -> EmbeddingStrategy:
        return self.get(backend).strategy

    def create(
        self,
        backend: str,
        *,
        filename: str | Path | None = None,
        string: str | None = None,
        include_paths: Iterable[str | Path] = (),
        options: Mapping[str, Any] | None = None,
        host: EmbeddingHost | None = None,
        return_references: bool = False,
        conf_name: str | None = None,
        component_handler_class: type[ComponentHandler] = ComponentHandler,
    ) -> Driver:
        driver_class = self.get(backend)
        driver_config, native_config = driver_class.split_options(options or {})
        context = TemplateContext(
            backend=backend,
            filename=Path(filename) if filename is not None else None,
            string=string,
            include_paths=tuple(Path(path) for path in include_paths),
            driver_config=driver_config,
            native_config=native_config,
            return_references=return_references,
            conf_name=conf_name,
        )
        return driver_class(
            context, host=host, component_handler_class=component_handler_class
        )


def default_registry() -> DriverRegistry:
    """Return a new registry holding the built-in backends."""

    registry = DriverRegistry()
    registry.register_many((JinjaDriver, PlaceholderDriver, StringTemplateDriver))
    return registry
