"""Clock abstraction, environment access and configuration paths."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

_CONFIG_DIR_NAME = ".config"
_APP_NAME = "imgraft"
_CONFIG_FILE_NAME = "config.toml"
_CREDENTIALS_FILE_NAME = "credentials.json"


class Clock(ABC):
    """Source of the current time; tests inject a fixed one."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time."""


class SystemClock(Clock):
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


@dataclass(frozen=True)
class FixedClock(Clock):
    """Clock that always reports the same instant."""

    t: datetime

    def now(self) -> datetime:
        return self.t


def get_with_default(key: str, default_val: str) -> str:
    """Return the environment variable, or ``default_val`` when it is unset.

    A variable set to the empty string yields the empty string.
    """
    return os.environ.get(key, default_val)


def _home_dir() -> str:
    home = os.path.expanduser("~")
    if not home or home == "~":
        raise OSError("home dir: cannot determine the user's home directory")
    return home


def config_dir() -> str:
    """Return the absolute path of ``~/.config/imgraft``."""
    return os.path.join(_home_dir(), _CONFIG_DIR_NAME, _APP_NAME)


def config_file_path() -> str:
    """Return the absolute path of ``~/.config/imgraft/config.toml``."""
    return os.path.join(config_dir(), _CONFIG_FILE_NAME)


def credentials_file_path() -> str:
    """Return the absolute path of ``~/.config/imgraft/credentials.json``."""
    return os.path.join(config_dir(), _CREDENTIALS_FILE_NAME)