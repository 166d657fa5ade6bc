"""Configuration layers: JSON config file, prefixed environment, defaults.

- JSON config file under <root>/config/config.json (optional)
- MINIKUBE_* environment variables, derived from the key name
- compiled-in defaults
"""

from __future__ import annotations

from minikube.config.env import EnvBinder
from minikube.config.loader import load_config_file, write_config_file
from minikube.config.store import ConfigStore
from minikube.errors import ConfigError

__all__ = ["ConfigError", "ConfigStore", "EnvBinder", "load_config_file", "write_config_file"]
