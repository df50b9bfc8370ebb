"""Tests for the configuration section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from freelancedesk.config.models import ApiConfig, DashboardConfig, DeskConfig, ProjectsConfig


class TestDefaults:
    def test_root_defaults(self) -> None:
        config = DeskConfig()
        assert config.api.base_url == "http://localhost:5000"
        assert config.api.token == ""
        assert config.dashboard.dormancy_days == 30
        assert config.dashboard.meeting_window_hours == 24
        assert config.dashboard.followup_days == 7
        assert config.dashboard.dormant_task_limit == 3
        assert config.dashboard.activity_limit == 10
        assert config.dashboard.insight_limit == 5
        assert config.projects.leaderboard_size == 5

    def test_sparse_sections(self) -> None:
        config = DeskConfig.model_validate({"dashboard": {"dormancy_days": 60}})
        assert config.dashboard.dormancy_days == 60
        assert config.dashboard.insight_limit == 5
        assert config.api == ApiConfig()


class TestValidation:
    def test_dormancy_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            DashboardConfig(dormancy_days=0)

    def test_activity_limit_capped_at_feed_size(self) -> None:
        assert DashboardConfig(activity_limit=10).activity_limit == 10
        with pytest.raises(ValidationError):
            DashboardConfig(activity_limit=11)

    def test_negative_leaderboard_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProjectsConfig(leaderboard_size=-1)

    def test_frozen(self) -> None:
        config = ApiConfig()
        with pytest.raises(ValidationError):
            config.token = "secret"  # type: ignore[misc]
