"""minikube command-line front end.

Startup sequence and layered configuration resolution for the local cluster
manager; subcommands receive a fully resolved runtime context.
"""

from __future__ import annotations

__all__ = [
    "__version__",
]

__version__ = "0.18.0"
