"""Driver/VM layer entry points used during startup."""

from __future__ import annotations

from minikube.machine.client import ClientType, get_client_type

__all__ = ["ClientType", "get_client_type"]
