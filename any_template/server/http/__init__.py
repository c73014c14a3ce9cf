"""HTTP helpers exposing run modes over FastAPI."""

from .app import create_app, create_run_mode_router
from .models import RunModeIndex

__all__ = ["RunModeIndex", "create_app", "create_run_mode_router"]
