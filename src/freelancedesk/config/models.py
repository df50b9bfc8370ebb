"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``freelancedesk.toml`` only
holds overrides.  A working setup needs nothing more than
``[api] base_url`` and ``token``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- freelancedesk.toml sections ---


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    base_url: str = "http://localhost:5000"
    token: str = ""
    timeout: float = 15.0


class DashboardConfig(BaseModel):
    """[dashboard] section."""

    model_config = {"frozen": True}

    dormancy_days: int = Field(default=30, ge=1)
    meeting_window_hours: int = Field(default=24, ge=1)
    followup_days: int = Field(default=7, ge=0)
    dormant_task_limit: int = Field(default=3, ge=0)
    activity_limit: int = Field(default=10, ge=0, le=10)
    insight_limit: int = Field(default=5, ge=0)


class ProjectsConfig(BaseModel):
    """[projects] section."""

    model_config = {"frozen": True}

    leaderboard_size: int = Field(default=5, ge=0)


class DeskConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    api: ApiConfig = Field(default_factory=ApiConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    projects: ProjectsConfig = Field(default_factory=ProjectsConfig)
