from __future__ import annotations

from pathlib import Path

import pytest

from minikube.config.env import EnvBinder
from minikube.config.store import ConfigStore
from minikube.constants import ENV_PREFIX, MiniPaths
from minikube.observability.logging import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture
def paths(tmp_path: Path) -> MiniPaths:
    return MiniPaths(tmp_path / ".minikube")


@pytest.fixture
def environ() -> dict[str, str]:
    return {}


@pytest.fixture
def store(environ: dict[str, str]) -> ConfigStore:
    return ConfigStore(EnvBinder(ENV_PREFIX, environ))
