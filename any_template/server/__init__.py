"""Web serving helpers for template hosts."""

from .http import RunModeIndex, create_app, create_run_mode_router

__all__ = ["RunModeIndex", "create_app", "create_run_mode_router"]
