"""Locating and reading ``freelancedesk.toml``.

The file is found by walking up from the working directory, so a desk
can be configured per client folder.  ``FREELANCEDESK_CONFIG`` pins a
specific file and disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from freelancedesk.config.models import DeskConfig

CONFIG_FILENAME = "freelancedesk.toml"
CONFIG_ENV_VAR = "FREELANCEDESK_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file that applies at *start* (default: cwd).

    A set ``FREELANCEDESK_CONFIG`` is used as-is and yields None when it
    names a missing file.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> DeskConfig:
    """The validated TOML sections, for use outside the CLI.

    Falls back to defaults when no file is found.
    """
    path = path or find_config(cwd)
    if path is None:
        return DeskConfig()
    with path.open("rb") as fh:
        return DeskConfig.model_validate(tomllib.load(fh))
