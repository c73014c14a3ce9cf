"""Example run modes and embedding cases for documentation and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..config import TemplateConfig
from ..host import TemplateHost

__all__ = [
    "EXAMPLE_CASES",
    "EmbedCase",
    "NAV_TEMPLATES",
    "build_example_host",
]


@dataclass(frozen=True)
class EmbedCase:
    """A template using embedded calls and the output it should produce."""

    slug: str
    backend: str
    template: str
    expected: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    description: str = ""


NAV_TEMPLATES: Mapping[str, str] = {
    "placeholder": "<nav>{{ section | upper }}</nav>",
    "jinja2": "<nav>{{ section | upper }}</nav>",
    "string_template": "<nav>${section}</nav>",
}


def build_example_host(config: TemplateConfig | Mapping[str, Any] | None = None) -> TemplateHost:
    """Return a host with the run modes used by :data:`EXAMPLE_CASES`."""

    host = TemplateHost(config)

    @host.run_mode()
    def header(containing: Any, *args: Any) -> str:
        return "HI"

    @host.run_mode()
    def greet(containing: Any, name: Any = "", *args: Any) -> str:
        return f"Hi, {name}"

    @host.run_mode()
    def banner(containing: Any, *args: Any) -> str:
        site = containing.params.get("site", "") if containing is not None else ""
        return f"[{site}]"

    @host.run_mode()
    def nav(containing: Any, section: Any = "", *args: Any) -> Any:
        backend = containing.backend if containing is not None else host.config().type
        template = host.load_tmpl(string=NAV_TEMPLATES[backend], backend=backend)
        template.param(section=section)
        return template

    @host.run_mode()
    def page(containing: Any, *args: Any) -> Any:
        template = host.load_tmpl(string="<h1>{{ cgiapp.embed('header') }}</h1>")
        return template.output()

    return host


def _cases_for(backend: str, open_tag: str, close_tag: str) -> tuple[EmbedCase, ...]:
    def tag(expression: str) -> str:
        return f"{open_tag}{expression}{close_tag}"

    return (
        EmbedCase(
            slug=f"{backend}_literal_call",
            backend=backend,
            template="Hello " + tag("cgiapp.embed('header')") + "!",
            expected="Hello HI!",
            description="A call with only a handler name.",
        ),
        EmbedCase(
            slug=f"{backend}_param_ref",
            backend=backend,
            template=tag("cgiapp.embed('greet', name)"),
            expected="Hi, Ada",
            parameters={"name": "Ada"},
            description="A bare argument is looked up in the template parameters.",
        ),
        EmbedCase(
            slug=f"{backend}_missing_param_ref",
            backend=backend,
            template=tag("cgiapp.embed('greet', nobody)"),
            expected="Hi, ",
            description="Unset parameters resolve to an empty string.",
        ),
        EmbedCase(
            slug=f"{backend}_inherited_params",
            backend=backend,
            template=tag('cgiapp.embed("banner")') + " body",
            expected="[Example] body",
            parameters={"site": "Example"},
            description="Run modes can read the containing template's parameters.",
        ),
        EmbedCase(
            slug=f"{backend}_nested_template",
            backend=backend,
            template=tag("cgiapp.embed('nav', 'docs')"),
            expected="<nav>DOCS</nav>" if backend != "string_template" else "<nav>docs</nav>",
            description="A run mode renders its own template, spliced into the parent.",
        ),
    )


EXAMPLE_CASES: tuple[EmbedCase, ...] = (
    *_cases_for("placeholder", "{{ ", " }}"),
    *_cases_for("jinja2", "{{ ", " }}"),
    *_cases_for("string_template", "${", "}"),
)
