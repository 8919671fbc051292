"""Settings loaded from the environment and ``.env`` files.

Values are read at call time (inside :func:`load_settings`) so tests can
monkeypatch the environment freely. Precedence, lowest first: built-in
defaults, the ``.env`` file, the process environment. Empty values are
treated as unset at every level.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

from .urls import InvalidURLError, resolve_url

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "linkwatch"
CONFIG_ENV_FILE = CONFIG_DIR / ".env"

ENV_ROOT_HREF = "LINKWATCH_ROOT_HREF"


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""

    root_href: Optional[str] = None


def find_env_file(
    *, cwd: Optional[Path] = None, config_env_file: Path = CONFIG_ENV_FILE
) -> Optional[Path]:
    """Return the ``.env`` file to read: the local one first, then the user's."""
    local_env = (cwd or Path.cwd()) / ".env"
    if local_env.is_file():
        return local_env
    if config_env_file.is_file():
        return config_env_file
    return None


def load_settings(
    *,
    env_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from ``env_file`` and the environment.

    Args:
        env_file: A ``.env`` file to read. Defaults to :func:`find_env_file`.
        environ: Mapping that overrides the file. Defaults to ``os.environ``.
    """
    path = env_file if env_file is not None else find_env_file()
    values = {}
    if path is not None and path.is_file():
        values.update(_non_empty(dotenv_values(path)))
    values.update(_non_empty(os.environ if environ is None else environ))

    return Settings(root_href=_parse_root_href(values.get(ENV_ROOT_HREF)))


def _non_empty(values: Mapping[str, Optional[str]]) -> dict:
    return {key: value for key, value in values.items() if value}


def _parse_root_href(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        resolve_url(value)
    except InvalidURLError as exc:
        LOGGER.warning("Ignoring invalid %s '%s': %s", ENV_ROOT_HREF, value, exc)
        return None
    return value
