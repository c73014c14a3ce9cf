#!/usr/bin/env python3
"""Generate markdown documentation for the embedded call example cases."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from any_template.examples import EXAMPLE_CASES, EmbedCase, build_example_host

OUTPUT_DIR = Path("test_docs")

_FENCES = {
    "placeholder": "handlebars",
    "jinja2": "jinja",
    "string_template": "text",
}


def render_case_markdown(case: EmbedCase) -> str:
    host = build_example_host()
    strategy = host.registry.strategy_for(case.backend)
    template = host.load_tmpl(string=case.template, backend=case.backend)
    rendered = template.output(dict(case.parameters))
    lines = [
        f"# {case.slug.replace('_', ' ').title()}",
        "",
        f"Backend: `{case.backend}` ({strategy.value.replace('_', ' ')})",
        "",
        "```html",
        rendered,
        "```",
        "",
        "## Template",
        "",
        f"```{_FENCES.get(case.backend, 'text')}",
        case.template,
        "```",
    ]
    if case.parameters:
        lines.extend(["", "## Parameters", "", "```json", _format_json(case.parameters), "```"])
    if case.description:
        lines.extend(["", case.description])
    lines.append("")
    return "\n".join(lines)


def _format_json(value: Any) -> str:
    return json.dumps(dict(value), default=str, indent=2, sort_keys=True)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args()

    output_dir: Path = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    for case in EXAMPLE_CASES:
        document = render_case_markdown(case)
        path = output_dir / f"{case.slug}.md"
        path.write_text(document, encoding="utf-8")


if __name__ == "__main__":
    main()
