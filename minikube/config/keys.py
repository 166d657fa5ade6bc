"""Recognised configuration keys and their compiled-in defaults."""

from __future__ import annotations

from typing import Any

WANT_UPDATE_NOTIFICATION = "WantUpdateNotification"
REMINDER_WAIT_PERIOD_IN_HOURS = "ReminderWaitPeriodInHours"
WANT_REPORT_ERROR = "WantReportError"
WANT_REPORT_ERROR_PROMPT = "WantReportErrorPrompt"
WANT_KUBECTL_DOWNLOAD_MSG = "WantKubectlDownloadMsg"

CONFIG_DEFAULTS: dict[str, Any] = {
    WANT_UPDATE_NOTIFICATION: True,
    REMINDER_WAIT_PERIOD_IN_HOURS: 24,
    WANT_REPORT_ERROR: False,
    WANT_REPORT_ERROR_PROMPT: True,
    WANT_KUBECTL_DOWNLOAD_MSG: True,
}

# Flags whose values may also come from the config file or environment.
# Anything not listed here is command-line only.
FLAG_WHITELIST: tuple[str, ...] = (
    "v",
    "alsologtostderr",
    "log_dir",
)

# Keys accepted by `minikube config set`, with the type values are stored as.
SETTINGS: dict[str, type] = {
    WANT_UPDATE_NOTIFICATION: bool,
    REMINDER_WAIT_PERIOD_IN_HOURS: int,
    WANT_REPORT_ERROR: bool,
    WANT_REPORT_ERROR_PROMPT: bool,
    WANT_KUBECTL_DOWNLOAD_MSG: bool,
    "v": int,
    "alsologtostderr": bool,
    "log_dir": str,
}


def find_setting(name: str) -> tuple[str, type] | None:
    """Case-insensitive lookup returning the canonical key and its type."""

    lowered = name.lower()
    for key, kind in SETTINGS.items():
        if key.lower() == lowered:
            return key, kind
    return None
