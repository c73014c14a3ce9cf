"""Example hosts and embedding cases used across tests and documentation."""

from .components import EXAMPLE_CASES, NAV_TEMPLATES, EmbedCase, build_example_host

__all__ = ["EXAMPLE_CASES", "NAV_TEMPLATES", "EmbedCase", "build_example_host"]
