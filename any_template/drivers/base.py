"""Uniform driver contract shared by every template backend."""

from __future__ import annotations

import enum
import importlib
import logging
import weakref
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Iterable, Iterator, Mapping

from .._embedding.errors import ConfigurationError, RenderError, TemplateError
from .._embedding.handler import ComponentHandler, EmbeddingHost
from .._embedding.protocol import DEFAULT_MARKER, validate_marker
from .._embedding.state import RenderedOutput, TemplateContext

__all__ = ["Driver", "EmbeddingStrategy", "find_template_file", "synthesized_keys"]

logger = logging.getLogger(__name__)


class EmbeddingStrategy(enum.Enum):
    """How a backend routes embedded calls to the component handler."""

    NATIVE_CALLBACK = "native_callback"
    PRE_SCAN = "pre_scan"


class Driver(ABC):
    """Adapter between one native template engine and the embedding host.

    Subclasses declare their ``backend`` name and fixed ``strategy``, build
    the native template in :meth:`initialize` and produce text in
    :meth:`render_template`. Everything else (parameters, hooks, error
    wrapping) lives here.
    """

    backend: ClassVar[str]
    strategy: ClassVar[EmbeddingStrategy]
    required_modules: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        context: TemplateContext,
        *,
        host: EmbeddingHost | None = None,
        component_handler_class: type[ComponentHandler] = ComponentHandler,
    ) -> None:
        self._context = context
        self._host_ref = weakref.ref(host) if host is not None else None
        self._component_handler_class = component_handler_class
        self._rendering = False

        self._require_prerequisite_modules()
        unknown = set(context.driver_config) - set(self.driver_config_keys())
        if unknown:
            keys = ", ".join(sorted(unknown))
            raise ConfigurationError(f"{self.backend}: unknown driver config keys: {keys}")
        context.driver_config = {**self.default_driver_config(), **context.driver_config}
        self.marker = validate_marker(context.driver_config["embed_tag_name"])

        try:
            self._native = self.initialize()
        except TemplateError:
            raise
        except Exception as exc:
            raise RenderError(self.backend, f"{type(exc).__name__}: {exc}") from exc
        logger.debug(
            "Loaded %s template (%s strategy, marker %r)",
            self.backend,
            self.strategy.value,
            self.marker,
        )

    @classmethod
    def driver_config_keys(cls) -> tuple[str, ...]:
        return ("embed_tag_name", "template_extension")

    @classmethod
    def default_driver_config(cls) -> dict[str, Any]:
        return {"embed_tag_name": DEFAULT_MARKER, "template_extension": ".html"}

    @classmethod
    def split_options(
        cls, options: Mapping[str, Any]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Split backend options into driver config and native engine options."""

        driver_keys = set(cls.driver_config_keys())
        driver_config = {key: value for key, value in options.items() if key in driver_keys}
        native_config = {key: value for key, value in options.items() if key not in driver_keys}
        return driver_config, native_config

    @classmethod
    def _require_prerequisite_modules(cls) -> None:
        missing = []
        for module in cls.required_modules:
            try:
                importlib.import_module(module)
            except ImportError:
                missing.append(module)
        if missing:
            raise ConfigurationError(
                f"{cls.backend}: missing prerequisite modules: {', '.join(missing)}"
            )

    @abstractmethod
    def initialize(self) -> Any:
        """Build and return the native template instance."""

    @abstractmethod
    def render_template(self) -> str:
        """Fill the native template and return its text."""

    def reset_native_params(self) -> None:
        """Drop parameters cached on the native instance, if it caches any."""

    @property
    def context(self) -> TemplateContext:
        return self._context

    @property
    def host(self) -> EmbeddingHost | None:
        return self._host_ref() if self._host_ref is not None else None

    @property
    def filename(self) -> Path | None:
        return self._context.filename

    @property
    def string(self) -> str | None:
        return self._context.string

    @property
    def object(self) -> Any:
        """The native template instance."""

        return self._native

    @property
    def driver_config(self) -> Mapping[str, Any]:
        return self._context.driver_config

    def set_parameters(self, values: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        if values:
            self._context.update(values)
        if kwargs:
            self._context.update(kwargs)

    def get_param(self, name: str, default: Any = None) -> Any:
        return self._context.parameters.get(name, default)

    def param_names(self) -> list[str]:
        return list(self._context.parameters)

    def get_param_hash(self) -> dict[str, Any]:
        return self._context.snapshot()

    def param(self, *args: Any, **kwargs: Any) -> Any:
        """Get or set parameters.

        ``param()`` lists the names, ``param("name")`` returns one value and
        ``param(mapping)`` or ``param(name=value)`` merges new values.
        """

        if not args and not kwargs:
            return self.param_names()
        if len(args) == 1 and isinstance(args[0], str) and not kwargs:
            return self.get_param(args[0])
        if len(args) > 1:
            raise TypeError("param() takes a single mapping or keyword arguments")
        self.set_parameters(*args, **kwargs)
        return None

    def clear_parameters(self) -> None:
        self._context.clear()
        self.reset_native_params()

    clear_params = clear_parameters

    def component_handler(self) -> ComponentHandler:
        return self._component_handler_class(self.host, self._context)

    def render(self) -> str:
        """Render the template with every embedded call substituted."""

        if self._rendering:
            raise TemplateError(f"{self.backend}: template is already being rendered")
        self._rendering = True
        try:
            return self.render_template()
        except TemplateError:
            raise
        except Exception as exc:
            raise RenderError(self.backend, f"{type(exc).__name__}: {exc}") from exc
        finally:
            self._rendering = False

    def output(self, values: Mapping[str, Any] | None = None, /, **kwargs: Any) -> str | RenderedOutput:
        """Set parameters, run the host's template hooks and render."""

        self.set_parameters(values, **kwargs)
        self._call_hook("template_pre_process", self)
        rendered = RenderedOutput(self.render())
        self._call_hook("template_post_process", self, rendered)
        if self._context.return_references:
            return rendered
        return rendered.text

    def _call_hook(self, name: str, *args: Any) -> None:
        call_hook = getattr(self.host, "call_hook", None)
        if callable(call_hook):
            call_hook(name, *args)


def synthesized_keys(marker: str, taken: Iterable[str]) -> Iterator[str]:
    """Yield parameter names for pre-scanned call output that collide with nothing."""

    reserved = set(taken)
    index = 0
    while True:
        index += 1
        key = f"_{marker}_embed_{index}"
        if key not in reserved:
            reserved.add(key)
            yield key


def find_template_file(filename: Path, include_paths: Iterable[Path]) -> Path:
    if filename.is_absolute():
        candidates = [filename]
    else:
        candidates = [Path(directory) / filename for directory in include_paths]
        candidates.append(filename)
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"Template file '{filename}' not found")
