"""Embedded component calls behave the same on every backend."""

from __future__ import annotations

import pytest

from any_template import (
    EmbeddingStrategy,
    MalformedCallError,
    RenderedOutput,
    UnknownHandlerError,
)
from any_template.examples import EXAMPLE_CASES, build_example_host

TAGS = {
    "placeholder": ("{{ ", " }}"),
    "jinja2": ("{{ ", " }}"),
    "string_template": ("${", "}"),
}
PRE_SCAN_BACKENDS = ["placeholder", "string_template"]


def tag(backend: str, expression: str) -> str:
    opening, closing = TAGS[backend]
    return f"{opening}{expression}{closing}"


@pytest.fixture
def host():
    return build_example_host()


@pytest.mark.parametrize("case", EXAMPLE_CASES, ids=lambda case: case.slug)
def test_example_cases_render(case, host) -> None:
    template = host.load_tmpl(string=case.template, backend=case.backend)
    assert template.output(case.parameters) == case.expected


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_scenario_literal_handler(backend, host) -> None:
    template = host.load_tmpl(
        string="Hello " + tag(backend, "cgiapp.embed('header')") + "!", backend=backend
    )
    assert template.output() == "Hello HI!"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_scenario_param_ref_argument(backend, host) -> None:
    template = host.load_tmpl(string=tag(backend, "cgiapp.embed('greet', name)"), backend=backend)
    template.param(name="Ada")
    assert template.output() == "Hi, Ada"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_scenario_unknown_handler_aborts_render(backend, host) -> None:
    template = host.load_tmpl(
        string="before " + tag(backend, "cgiapp.embed('missing')") + " after",
        backend=backend,
    )
    with pytest.raises(UnknownHandlerError, match="missing"):
        template.output()


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_arguments_resolve_in_order(backend, host) -> None:
    host.register_run_mode("join", lambda containing, *args: ",".join(map(str, args)))
    template = host.load_tmpl(
        string=tag(backend, "cgiapp.embed('join', 'literal', paramKey)"), backend=backend
    )
    assert template.output(paramKey="X") == "literal,X"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_custom_marker_scopes_recognised_calls(backend) -> None:
    host = build_example_host({"backends": {backend: {"embed_tag_name": "__acme"}}})
    template = host.load_tmpl(string=tag(backend, "__acme.embed('header')"), backend=backend)
    assert template.output() == "HI"


def test_other_markers_are_left_to_the_native_engine() -> None:
    host = build_example_host()
    template = host.load_tmpl(
        string="${other.embed('header')} ${cgiapp.embed('header')}",
        backend="string_template",
    )
    assert template.output() == "${other.embed('header')} HI"


@pytest.mark.parametrize("backend", PRE_SCAN_BACKENDS)
def test_malformed_call_fails_the_render(backend, host) -> None:
    template = host.load_tmpl(
        string="ok " + tag(backend, "cgiapp.embed('header', 12)"), backend=backend
    )
    with pytest.raises(MalformedCallError):
        template.output()


def test_malformed_handler_name_fails_native_render(host) -> None:
    template = host.load_tmpl(string="{{ cgiapp.embed('no such') }}", backend="jinja2")
    with pytest.raises(MalformedCallError):
        template.output()


def test_call_without_handler_fails_native_render(host) -> None:
    template = host.load_tmpl(string="{{ cgiapp.embed() }}", backend="jinja2")
    with pytest.raises(MalformedCallError, match="must name a handler"):
        template.output()


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_every_call_site_runs_once_per_render(backend, host) -> None:
    calls = []

    def count(containing, *args):
        calls.append(args)
        return str(len(calls))

    host.register_run_mode("count", count)
    call = tag(backend, "cgiapp.embed('count')")
    template = host.load_tmpl(string=call + "-" + call, backend=backend)
    assert template.output() == "1-2"
    assert template.output() == "3-4"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_literals_may_contain_tag_delimiters(backend, host) -> None:
    template = host.load_tmpl(
        string=tag(backend, "cgiapp.embed('greet', '}}')"), backend=backend
    )
    assert template.output() == "Hi, }}"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_clear_parameters_matches_a_fresh_template(backend, host) -> None:
    source = tag(backend, "cgiapp.embed('greet', name)") + " " + tag(backend, "name")
    fresh = host.load_tmpl(string=source, backend=backend).output()

    template = host.load_tmpl(string=source, backend=backend)
    template.param(name="Ada")
    assert template.output() == "Hi, Ada Ada"

    template.clear_parameters()
    assert template.output() == fresh
    template.clear_parameters()
    assert template.param() == []
    assert template.output() == fresh


@pytest.mark.parametrize("backend", PRE_SCAN_BACKENDS)
def test_pre_scan_resolves_params_bound_before_render(backend, host) -> None:
    template = host.load_tmpl(string=tag(backend, "cgiapp.embed('greet', name)"), backend=backend)
    template.param(name="early")
    assert template.output() == "Hi, early"


@pytest.mark.parametrize("backend", PRE_SCAN_BACKENDS)
def test_pre_scan_does_not_see_params_bound_during_render(backend, host) -> None:
    # Documented limitation of pre-scan backends: arguments resolve from the
    # parameters present when the render starts.
    template = host.load_tmpl(
        string=tag(backend, "cgiapp.embed('setter')") + tag(backend, "cgiapp.embed('greet', late)"),
        backend=backend,
    )

    def setter(containing, *args):
        template.param(late="too late")
        return ""

    host.register_run_mode("setter", setter)
    assert host.registry.strategy_for(backend) is EmbeddingStrategy.PRE_SCAN
    assert template.output() == "Hi, "
    assert template.param("late") == "too late"


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_parameters_do_not_leak_synthesized_keys(backend, host) -> None:
    template = host.load_tmpl(string=tag(backend, "cgiapp.embed('header')"), backend=backend)
    template.param(title="t")
    template.output()
    assert template.param() == ["title"]


@pytest.mark.parametrize("backend", sorted(TAGS))
def test_template_hooks_wrap_the_render(backend, host) -> None:
    calls = []

    def pre(template):
        calls.append("pre")
        template.param(name="from hook")

    def post(template, rendered):
        calls.append("post")
        rendered.text = rendered.text.upper()

    host.add_hook("template_pre_process", pre)
    host.add_hook("template_post_process", post)
    template = host.load_tmpl(string=tag(backend, "cgiapp.embed('greet', name)"), backend=backend)
    assert template.output() == "HI, FROM HOOK"
    assert calls == ["pre", "post"]


def test_return_references_yields_the_output_holder() -> None:
    host = build_example_host({"return_references": True})
    result = host.load_tmpl(string="{{ cgiapp.embed('header') }}").output()
    assert isinstance(result, RenderedOutput)
    assert result.text == "HI"


def test_embedded_templates_render_independently(host) -> None:
    template = host.load_tmpl(string="{{ cgiapp.embed('nav', section) }} {{ section }}")
    template.param(section="docs")
    assert template.output() == "<nav>DOCS</nav> docs"
