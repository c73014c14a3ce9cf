"""Tests for the driver registry."""

from __future__ import annotations

import pytest

from any_template import ConfigurationError, DriverRegistry, default_registry
from any_template.drivers import JinjaDriver, PlaceholderDriver


def test_default_registry_holds_the_builtin_backends() -> None:
    assert sorted(default_registry().backends()) == ["jinja2", "placeholder", "string_template"]


def test_unknown_backend_lists_valid_choices() -> None:
    with pytest.raises(ConfigurationError, match="Valid backends: jinja2, placeholder"):
        default_registry().get("mako")


def test_duplicate_backends_are_rejected() -> None:
    registry = DriverRegistry()
    registry.register(JinjaDriver)
    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register(JinjaDriver)


def test_drivers_can_be_registered_under_another_name() -> None:
    registry = DriverRegistry()
    registry.register(PlaceholderDriver, name="simple")
    template = registry.create("simple", string="{{ title }}")
    template.param(title="ok")
    assert template.output() == "ok"
    assert template.context.backend == "simple"


def test_create_splits_driver_and_native_options() -> None:
    template = default_registry().create(
        "placeholder",
        string="{{ x }}",
        options={"embed_tag_name": "acme", "strict": True},
    )
    assert template.marker == "acme"
    assert template.driver_config["embed_tag_name"] == "acme"
    assert template.context.native_config == {"strict": True}
