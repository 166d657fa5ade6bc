"""Filesystem layout and fixed names shared across the tool."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_PREFIX = "MINIKUBE"
HOME_ENV = "MINIKUBE_HOME"

CONFIG_FILE_NAME = "config.json"
LAST_UPDATE_CHECK_FILE = "last_update_check"

RELEASES_URL = "https://storage.googleapis.com/minikube/releases.json"
GITHUB_RELEASE_URL = "https://github.com/kubernetes/minikube/releases/tag/"
DEFAULT_KUBERNETES_VERSION = "v1.6.0"

# Relative to the root, in creation order.
_SUBDIRS: tuple[tuple[str, ...], ...] = (
    ("certs",),
    ("machines",),
    ("cache",),
    ("cache", "iso"),
    ("cache", "localkube"),
    ("config",),
    ("addons",),
    ("logs",),
)


@dataclass(frozen=True, slots=True)
class MiniPaths:
    """Well-known locations under the minikube root directory."""

    root: Path

    def make(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    @property
    def dirs(self) -> list[Path]:
        return [self.root, *(self.make(*parts) for parts in _SUBDIRS)]

    @property
    def config_file(self) -> Path:
        return self.make("config", CONFIG_FILE_NAME)

    @property
    def logs_dir(self) -> Path:
        return self.make("logs")

    @property
    def last_update_check(self) -> Path:
        return self.make(LAST_UPDATE_CHECK_FILE)

    @property
    def dotenv_file(self) -> Path:
        return self.make(".env")


def default_paths(environ: Mapping[str, str] | None = None) -> MiniPaths:
    """Resolve the root from $MINIKUBE_HOME, falling back to ~/.minikube."""

    env = os.environ if environ is None else environ
    home = env.get(HOME_ENV)
    if home:
        return MiniPaths(Path(home).expanduser())
    return MiniPaths(Path.home() / ".minikube")
