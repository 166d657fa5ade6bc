from __future__ import annotations

import platform
import shutil
import sys
from typing import Callable, TextIO

from minikube.config.keys import WANT_KUBECTL_DOWNLOAD_MSG
from minikube.config.store import ConfigStore
from minikube.constants import DEFAULT_KUBERNETES_VERSION

_ARCH = {"x86_64": "amd64", "amd64": "amd64", "aarch64": "arm64", "arm64": "arm64"}


def _goos() -> str:
    return platform.system().lower() or "linux"


def _goarch() -> str:
    machine = platform.machine().lower()
    return _ARCH.get(machine, machine or "amd64")


def download_msg(version: str, goos: str, goarch: str) -> str:
    return (
        "========================================\n"
        "kubectl could not be found on your path.  kubectl is a requirement for using minikube\n"
        "To install kubectl, please run the following:\n\n"
        f"curl -Lo kubectl https://storage.googleapis.com/kubernetes-release/release/{version}/bin/{goos}/{goarch}/kubectl"
        " && chmod +x kubectl && sudo mv kubectl /usr/local/bin/\n\n"
        "To disable this message, run the following:\n\n"
        f"minikube config set {WANT_KUBECTL_DOWNLOAD_MSG} false\n"
        "========================================\n"
    )


def maybe_print_kubectl_download_msg(
    store: ConfigStore,
    *,
    out: TextIO | None = None,
    which: Callable[[str], str | None] = shutil.which,
    version: str = DEFAULT_KUBERNETES_VERSION,
) -> bool:
    """Tell the user how to install kubectl when it is not on PATH."""

    if not store.get_bool(WANT_KUBECTL_DOWNLOAD_MSG):
        return False
    if which("kubectl") is not None:
        return False
    (out or sys.stderr).write(download_msg(version, _goos(), _goarch()))
    return True
