"""Pydantic response models for the run mode HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ...host import TemplateHost


class RunModeIndex(BaseModel):
    """Run modes a host can dispatch, with the backends it can load."""

    run_modes: list[str] = Field(default_factory=list)
    default_backend: str
    backends: dict[str, str] = Field(
        default_factory=dict, description="Backend name mapped to its embedding strategy."
    )

    @classmethod
    def from_host(cls, host: TemplateHost) -> "RunModeIndex":
        registry = host.registry
        return cls(
            run_modes=sorted(host.run_modes()),
            default_backend=host.config().type,
            backends={
                backend: registry.strategy_for(backend).value
                for backend in registry.backends()
            },
        )


__all__ = ["RunModeIndex"]
