"""Tests for the ``string.Template`` driver."""

from __future__ import annotations

import pytest

from any_template import ConfigurationError, MalformedCallError, TemplateHost
from any_template.examples import build_example_host


@pytest.fixture
def host() -> TemplateHost:
    return build_example_host({"type": "string_template"})


def test_plain_placeholders_still_substitute(host) -> None:
    template = host.load_tmpl(string="$name got ${cgiapp.embed('greet', name)}")
    assert template.output(name="Ada") == "Ada got Hi, Ada"


def test_escaped_delimiters_are_left_alone(host) -> None:
    template = host.load_tmpl(string="$${cgiapp.embed('header')} ${cgiapp.embed('header')}")
    assert template.output() == "${cgiapp.embed('header')} HI"


def test_whitespace_inside_braces_is_allowed(host) -> None:
    assert host.load_tmpl(string="${ cgiapp.embed('header') }").output() == "HI"


def test_each_occurrence_is_run(host) -> None:
    calls = []

    def count(containing, *args):
        calls.append(args)
        return str(len(calls))

    host.register_run_mode("count", count)
    template = host.load_tmpl(string="${cgiapp.embed('count')}${cgiapp.embed('count')}")
    assert template.output() == "12"


def test_missing_closing_brace_is_malformed(host) -> None:
    template = host.load_tmpl(string="${cgiapp.embed('header') tail")
    with pytest.raises(MalformedCallError, match="closing"):
        template.output()


def test_custom_delimiter() -> None:
    host = build_example_host(
        {"type": "string_template", "backends": {"string_template": {"delimiter": "%"}}}
    )
    template = host.load_tmpl(string="%name: %{cgiapp.embed('header')} costs $5")
    assert template.output(name="x") == "x: HI costs $5"


def test_unsupported_native_options_are_rejected() -> None:
    host = TemplateHost({"backends": {"string_template": {"autoescape": True}}})
    with pytest.raises(ConfigurationError, match="autoescape"):
        host.load_tmpl(string="", backend="string_template")


def test_files_use_the_txt_extension(tmp_path) -> None:
    (tmp_path / "mail.txt").write_text("Dear ${cgiapp.embed('greet', who)}", encoding="utf-8")
    host = build_example_host({"type": "string_template", "include_paths": [tmp_path]})
    assert host.load_tmpl("mail").output(who="Ada") == "Dear Hi, Ada"
