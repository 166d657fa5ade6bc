from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping

from dotenv import load_dotenv

from minikube.errors import ConfigError

logger = logging.getLogger(__name__)


class EnvBinder:
    """Maps configuration keys onto prefixed environment variables.

    ``log-dir`` with prefix ``MINIKUBE`` becomes ``MINIKUBE_LOG_DIR``. Any key
    can be looked up; nothing needs registering up front.
    """

    def __init__(self, prefix: str, environ: Mapping[str, str] | None = None):
        self._prefix = prefix.upper()
        self._environ = environ

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def env_key(self, key: str) -> str:
        return f"{self._prefix}_{key.upper().replace('-', '_')}"

    def lookup(self, key: str) -> str | None:
        """Return the variable bound to ``key``; empty values count as unset."""

        value = self.environ.get(self.env_key(key))
        if value is None or value == "":
            return None
        return value

    def check_collisions(self, keys: Iterable[str]) -> None:
        """Fail when two distinct keys would read the same variable.

        Keys are case-insensitive, so ``Foo`` and ``foo`` are the same key.
        """

        seen: dict[str, str] = {}
        clashes: list[str] = []
        for key in keys:
            var = self.env_key(key)
            other = seen.get(var)
            if other is not None and other.lower() != key.lower():
                clashes.append(f"{other!r} and {key!r} both map to {var}")
            seen.setdefault(var, key)

        if clashes:
            raise ConfigError("environment variable collision: " + "; ".join(clashes))

    def load_dotenv_file(self, path: Path) -> bool:
        """Load a .env file without overriding variables that are already set."""

        if self._environ is not None or not path.is_file():
            return False
        loaded = load_dotenv(path, override=False)
        logger.debug("dotenv_loaded", extra={"path": str(path), "loaded": loaded})
        return loaded
