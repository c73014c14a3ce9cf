"""Embedding host: run mode dispatch table, hooks and template loading."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, TypeVar

from ._embedding.errors import ConfigurationError, UnknownHandlerError
from ._embedding.handler import ComponentHandler, coerce_output
from ._embedding.protocol import is_identifier
from .config import DEFAULT_CONF_NAME, TemplateConfig
from .drivers.base import Driver
from .drivers.registry import DriverRegistry, default_registry

__all__ = ["HOOKS", "RunMode", "TemplateHost"]

logger = logging.getLogger(__name__)

HOOKS = ("template_pre_process", "template_post_process")

RunMode = Callable[..., Any]
_F = TypeVar("_F", bound=RunMode)


class TemplateHost:
    """Application object that owns run modes and loads templates.

    Run modes are called as ``run_mode(containing, *args)``. ``containing``
    is a read-only view of the template that embedded the call, or ``None``
    when the run mode is dispatched directly through :meth:`run`.

    One host serves one request: ``query`` holds that request's parameters
    and drivers loaded from the host are never shared across requests.
    """

    def __init__(
        self,
        config: TemplateConfig | Mapping[str, Any] | None = None,
        *,
        configs: Mapping[str, TemplateConfig | Mapping[str, Any]] | None = None,
        registry: DriverRegistry | None = None,
        query: Mapping[str, Any] | None = None,
        component_handler_class: type[ComponentHandler] = ComponentHandler,
    ) -> None:
        named: dict[str, TemplateConfig] = {
            name: _coerce_config(value) for name, value in (configs or {}).items()
        }
        if config is not None or DEFAULT_CONF_NAME not in named:
            named[DEFAULT_CONF_NAME] = _coerce_config(config or TemplateConfig())
        self._configs = named
        self.registry = registry or default_registry()
        self.query: dict[str, Any] = dict(query or {})
        self.component_handler_class = component_handler_class
        self._run_modes: dict[str, RunMode] = {}
        self._hooks: dict[str, list[Callable[..., Any]]] = {name: [] for name in HOOKS}

    def register_run_mode(self, name: str, run_mode: RunMode) -> None:
        if not is_identifier(name):
            raise ConfigurationError(f"Run mode name {name!r} is not a valid identifier")
        if not callable(run_mode):
            raise ConfigurationError(f"Run mode '{name}' must be callable")
        self._run_modes[name] = run_mode

    def run_mode(self, name: str | None = None) -> Callable[[_F], _F]:
        """Decorator registering a function as a run mode."""

        def decorator(function: _F) -> _F:
            self.register_run_mode(name or function.__name__, function)
            return function

        return decorator

    def resolve(self, name: str) -> RunMode | None:
        return self._run_modes.get(name)

    def run_modes(self) -> tuple[str, ...]:
        return tuple(self._run_modes)

    def run(self, name: str) -> str:
        run_mode = self.resolve(name)
        if run_mode is None:
            raise UnknownHandlerError(name, f"Unknown run mode '{name}'")
        logger.debug("Dispatching run mode %s", name)
        return coerce_output(run_mode(None))

    def add_hook(self, name: str, callback: Callable[..., Any]) -> None:
        if name not in self._hooks:
            raise ConfigurationError(
                f"Unknown hook '{name}'. Valid hooks: {', '.join(HOOKS)}"
            )
        self._hooks[name].append(callback)

    def call_hook(self, name: str, *args: Any) -> None:
        if name not in self._hooks:
            raise ConfigurationError(f"Unknown hook '{name}'")
        for callback in self._hooks[name]:
            callback(*args)

    def config(self, conf_name: str | None = None) -> TemplateConfig:
        name = conf_name or DEFAULT_CONF_NAME
        try:
            return self._configs[name]
        except KeyError:
            valid = ", ".join(sorted(self._configs))
            raise ConfigurationError(
                f"Unknown template configuration '{name}'. Valid configurations: {valid}"
            ) from None

    def load_tmpl(
        self,
        filename: str | Path | None = None,
        *,
        string: str | None = None,
        conf_name: str | None = None,
        backend: str | None = None,
        add_include_paths: Iterable[str | Path] = (),
    ) -> Driver:
        """Load a template file or string with a named configuration."""

        config = self.config(conf_name)
        backend = backend or config.type
        driver_class = self.registry.get(backend)
        options = config.options_for(backend)
        if filename is not None and config.auto_add_template_extension:
            filename = _with_extension(filename, driver_class, options)
        include_paths = (*map(Path, add_include_paths), *config.include_paths)
        return self.registry.create(
            backend,
            filename=filename,
            string=string,
            include_paths=include_paths,
            options=options,
            host=self,
            return_references=config.return_references,
            conf_name=conf_name or DEFAULT_CONF_NAME,
            component_handler_class=self.component_handler_class,
        )


def _coerce_config(value: TemplateConfig | Mapping[str, Any]) -> TemplateConfig:
    if isinstance(value, TemplateConfig):
        return value
    return TemplateConfig.from_manifest(value)


def _with_extension(
    filename: str | Path, driver_class: type[Driver], options: Mapping[str, Any]
) -> Path:
    path = Path(filename)
    if path.suffix:
        return path
    extension = options.get(
        "template_extension", driver_class.default_driver_config()["template_extension"]
    )
    return path.with_name(path.name + extension)
