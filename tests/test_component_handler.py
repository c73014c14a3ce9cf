"""Tests for dispatching embedded calls to run modes."""

from __future__ import annotations

import gc
from types import MappingProxyType

import pytest

from any_template import (
    ComponentHandler,
    EmbeddedCall,
    MalformedCallError,
    ParamRef,
    RenderedOutput,
    TemplateContext,
    TemplateHost,
    UnknownHandlerError,
)


@pytest.fixture
def host() -> TemplateHost:
    return TemplateHost()


@pytest.fixture
def context() -> TemplateContext:
    return TemplateContext(backend="placeholder", string="", parameters={"site": "Example"})


def test_invoke_passes_containing_view_and_arguments(host, context) -> None:
    seen = {}

    def record(containing, *args):
        seen["containing"] = containing
        seen["args"] = args
        return "done"

    host.register_run_mode("record", record)
    handler = ComponentHandler(host, context)

    assert handler.invoke("record", ["a", "b"]) == "done"
    assert seen["args"] == ("a", "b")
    assert seen["containing"].backend == "placeholder"
    assert seen["containing"].params["site"] == "Example"


def test_containing_params_are_read_only(host, context) -> None:
    def mutate(containing, *args):
        containing.params["site"] = "changed"

    host.register_run_mode("mutate", mutate)
    handler = ComponentHandler(host, context)

    assert isinstance(handler.containing.params, MappingProxyType)
    with pytest.raises(TypeError):
        handler.invoke("mutate", [])
    assert context.parameters["site"] == "Example"


def test_unknown_handler_raises(host, context) -> None:
    handler = ComponentHandler(host, context)
    with pytest.raises(UnknownHandlerError, match="missing") as excinfo:
        handler.invoke("missing", [])
    assert excinfo.value.handler_name == "missing"


def test_invoke_call_resolves_param_refs(host, context) -> None:
    host.register_run_mode("echo", lambda containing, *args: "|".join(args))
    handler = ComponentHandler(host, context)
    call = EmbeddedCall(handler="echo", arguments=(ParamRef("a"), ParamRef("b")))
    assert handler.invoke_call(call, {"a": "1"}) == "1|"


def test_embed_validates_handler_name(host, context) -> None:
    handler = ComponentHandler(host, context)
    with pytest.raises(MalformedCallError):
        handler.embed("not valid")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("<b>raw</b>", "<b>raw</b>"),
        (None, ""),
        (RenderedOutput("held"), "held"),
        (42, "42"),
    ],
)
def test_return_values_become_substitution_text(host, context, value, expected) -> None:
    host.register_run_mode("value", lambda containing, *args: value)
    assert ComponentHandler(host, context).invoke("value", []) == expected


def test_driver_return_values_are_rendered(host, context) -> None:
    def nested(containing, *args):
        template = host.load_tmpl(string="<i>{{ word }}</i>")
        template.param(word="nested")
        return template

    host.register_run_mode("nested", nested)
    assert ComponentHandler(host, context).invoke("nested", []) == "<i>nested</i>"


def test_handler_does_not_keep_the_host_alive(context) -> None:
    host = TemplateHost()
    host.register_run_mode("header", lambda containing, *args: "HI")
    handler = ComponentHandler(host, context)
    assert handler.invoke("header", []) == "HI"

    del host
    gc.collect()
    with pytest.raises(UnknownHandlerError, match="No embedding host"):
        handler.invoke("header", [])


def test_handler_without_host_cannot_resolve(context) -> None:
    with pytest.raises(UnknownHandlerError):
        ComponentHandler(None, context).invoke("header", [])
