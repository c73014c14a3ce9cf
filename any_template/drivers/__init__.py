"""Template backend drivers."""

from .base import Driver, EmbeddingStrategy
from .jinja import JinjaDriver
from .placeholder import PlaceholderDriver
from .registry import DriverRegistry, default_registry
from .string_template import StringTemplateDriver

__all__ = [
    "Driver",
    "DriverRegistry",
    "EmbeddingStrategy",
    "JinjaDriver",
    "PlaceholderDriver",
    "StringTemplateDriver",
    "default_registry",
]
