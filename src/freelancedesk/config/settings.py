"""DeskSettings: the merged view of flags, environment and ``freelancedesk.toml``.

A value set on the command line beats ``FREELANCEDESK_*`` variables
(``__`` separates nested keys, e.g. ``FREELANCEDESK_API__TIMEOUT``), which
beat the TOML file, which beats the defaults in :mod:`config.models`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from freelancedesk.config.discovery import find_config
from freelancedesk.config.models import ApiConfig, DashboardConfig, ProjectsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Top-level tables of a TOML file, offered to pydantic-settings as one source.

    A malformed file is reported as a ClickException so the CLI prints a
    one-line error instead of a traceback.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class DeskSettings(BaseSettings):
    """Everything a CLI invocation needs, frozen after construction.

    Attributes:
        config_path: The TOML file actually used, or None.
        snapshot_path: Read collections from this JSON file instead of the API.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FREELANCEDESK_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    snapshot_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    api: ApiConfig = Field(default_factory=ApiConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    projects: ProjectsConfig = Field(default_factory=ProjectsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> DeskSettings:
        """Construct settings for one CLI invocation.

        Uses *config_path* when it names a file, otherwise discovers
        ``freelancedesk.toml`` by walking up from *start_dir*.  Flags whose
        value is None are left to the lower-priority sources.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start_dir)

        overrides = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
