"""
Runtime configuration for project-prefs.

Values come from the dataclass defaults, then the environment, then CLI
flags (applied by the caller).

  PROJECT_PREFS_PATH      backing JSON file
  PROJECT_PREFS_REVISION  revision stamped on a newly created store
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional

if TYPE_CHECKING:
    from project_prefs.store.prefs_store import PrefsStore

__all__ = ["PrefsConfig", "DEFAULT_PREFS_PATH", "open_store"]

logger = logging.getLogger(__name__)

DEFAULT_PREFS_PATH = "~/.project-prefs/prefs.json"

_ENV_PATH     = "PROJECT_PREFS_PATH"
_ENV_REVISION = "PROJECT_PREFS_REVISION"


@dataclass
class PrefsConfig:
    """Where the store lives and what revision a fresh store is stamped with."""
    path:             str = DEFAULT_PREFS_PATH
    default_revision: int = 0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PrefsConfig":
        """
        Build a config from environment variables, falling back to defaults.

        Raises:
            ValueError: PROJECT_PREFS_REVISION is set but is not an integer.
        """
        env = os.environ if environ is None else environ
        config = cls()
        if env.get(_ENV_PATH):
            config.path = env[_ENV_PATH]
        raw_revision = env.get(_ENV_REVISION)
        if raw_revision:
            try:
                config.default_revision = int(raw_revision)
            except ValueError:
                raise ValueError(
                    f"{_ENV_REVISION} must be an integer, got {raw_revision!r}"
                ) from None
        logger.debug("Config: path=%s default_revision=%d",
                     config.path, config.default_revision)
        return config


def open_store(config: PrefsConfig) -> "PrefsStore":
    """Open (or create) the store described by *config*."""
    from project_prefs.store.prefs_store import PrefsStore
    return PrefsStore.open(config.path, default_revision=config.default_revision)
