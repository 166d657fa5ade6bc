"""JSON config file persistence.

The config file is a single JSON object at ``<root>/config/config.json``.
It is read once at startup and only written by explicit ``config set`` /
``config unset`` calls.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping

from minikube.errors import ConfigError


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Parse the config file into a dict.

    Raises:
        ConfigError: If the file is missing, unreadable, not valid JSON, or
            its top level is not an object.
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError("config file not found", path=str(p)) from None
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}", path=str(p)) from e

    if not text.strip():
        return {}

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON: {e}", path=str(p)) from e

    if not isinstance(raw, dict):
        raise ConfigError("top-level JSON must be an object", path=str(p))
    return raw


def write_config_file(path: str | Path, values: Mapping[str, Any]) -> None:
    """Atomically replace the config file with ``values``."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=p.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(dict(values), fh, indent=4, sort_keys=True)
            fh.write("\n")
        # mkstemp creates the file 0600
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, p)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
