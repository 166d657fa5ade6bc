from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from minikube.config.env import EnvBinder
from minikube.config.loader import load_config_file
from minikube.config.values import parse_bool, parse_int, parse_str
from minikube.errors import ConfigError

logger = logging.getLogger(__name__)


def _norm(key: str) -> str:
    return key.lower()


class ConfigStore:
    """Layered key/value configuration for one process.

    Lookup order, first hit wins:

    1. values pushed with :meth:`set` (explicit command-line flags)
    2. typed values written back by :meth:`set_resolved` after flag resolution
    3. environment variables, via the :class:`EnvBinder`
    4. the config file (``null`` entries count as absent)
    5. defaults registered with :meth:`set_default`

    Keys are case-insensitive. Nothing is written back to disk.
    """

    def __init__(self, env: EnvBinder):
        self._env = env
        self._overrides: dict[str, Any] = {}
        self._resolved: dict[str, tuple[Any, str | None]] = {}
        self._file: dict[str, Any] = {}
        self._defaults: dict[str, Any] = {}
        self._config_file: Path | None = None

    @property
    def env(self) -> EnvBinder:
        return self._env

    @property
    def config_file(self) -> Path | None:
        return self._config_file

    def read_config_file(self, path: Path) -> bool:
        """Ingest the config file into the file layer.

        Only the first call per store does anything. A missing or malformed
        file is logged and leaves the file layer empty.
        """

        if self._config_file is not None:
            logger.debug("config_file_already_read", extra={"path": str(self._config_file)})
            return False

        self._config_file = path
        try:
            raw = load_config_file(path)
        except ConfigError as e:
            logger.warning("Error reading config file at %s: %s", path, e)
            return False

        self.merge_file_values(raw)
        return True

    def merge_file_values(self, values: Mapping[str, Any]) -> None:
        for k, v in values.items():
            if v is None:
                continue
            self._file[_norm(str(k))] = v

    def set_default(self, key: str, value: Any) -> None:
        self._defaults[_norm(key)] = value

    def set(self, key: str, value: Any) -> None:
        self._overrides[_norm(key)] = value

    def set_resolved(self, key: str, value: Any, *, source: str | None) -> None:
        """Record the typed value a flag settled on, keeping where it came from."""

        self._resolved[_norm(key)] = (value, source)

    def _raw_source(self, k: str) -> str | None:
        if k in self._overrides:
            return "flag"
        if self._env.lookup(k) is not None:
            return "env"
        if k in self._file:
            return "file"
        if k in self._defaults:
            return "default"
        return None

    def source_of(self, key: str) -> str | None:
        k = _norm(key)
        if k not in self._overrides and k in self._resolved:
            return self._resolved[k][1]
        return self._raw_source(k)

    def is_set(self, key: str) -> bool:
        return self.source_of(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        k = _norm(key)
        if k in self._overrides:
            return self._overrides[k]
        if k in self._resolved:
            return self._resolved[k][0]
        env_value = self._env.lookup(k)
        if env_value is not None:
            return env_value
        if k in self._file:
            return self._file[k]
        return self._defaults.get(k, default)

    def _typed(self, key: str, parse: Callable[[Any], Any], empty: Any, type_name: str) -> Any:
        value = self.get(key)
        if value is None:
            return empty
        try:
            return parse(value)
        except ValueError:
            logger.warning("config_value_invalid", extra={"key": key, "value": repr(value), "type": type_name})
            fallback = self._defaults.get(_norm(key))
            return empty if fallback is None else parse(fallback)

    def get_bool(self, key: str) -> bool:
        return self._typed(key, parse_bool, False, "bool")

    def get_int(self, key: str) -> int:
        return self._typed(key, parse_int, 0, "int")

    def get_string(self, key: str) -> str:
        return self._typed(key, parse_str, "", "str")

    def all_keys(self) -> list[str]:
        keys = set(self._defaults) | set(self._file) | set(self._overrides) | set(self._resolved)
        return sorted(keys)

    def all_settings(self) -> dict[str, Any]:
        return {k: self.get(k) for k in self.all_keys()}
