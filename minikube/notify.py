"""Update notification.

Compares the running version with the newest published release and prints
an upgrade hint. Checks are rate limited by ``ReminderWaitPeriodInHours``
using a timestamp file under the minikube root.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, TextIO

import requests
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, TypeAdapter

from minikube import __version__
from minikube.config.keys import REMINDER_WAIT_PERIOD_IN_HOURS, WANT_UPDATE_NOTIFICATION
from minikube.config.store import ConfigStore
from minikube.constants import GITHUB_RELEASE_URL, RELEASES_URL

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 3.0


class Release(BaseModel):
    name: str


_RELEASES = TypeAdapter(list[Release])

Fetcher = Callable[[str, float], list[Release]]


def fetch_releases(url: str, timeout_s: float) -> list[Release]:
    resp = requests.get(url, timeout=timeout_s)
    resp.raise_for_status()
    return _RELEASES.validate_python(resp.json())


def parse_version(text: str) -> Version:
    return Version(text[1:] if text.startswith("v") else text)


def read_last_check(path: Path) -> datetime | None:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        logger.warning("last_update_check_invalid", extra={"path": str(path), "value": text})
        return None
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def write_last_check(path: Path, when: datetime) -> None:
    path.write_text(when.isoformat(), encoding="utf-8")


class UpdateNotifier:
    def __init__(
        self,
        *,
        store: ConfigStore,
        last_check_path: Path,
        current_version: str = __version__,
        releases_url: str = RELEASES_URL,
        fetch: Fetcher = fetch_releases,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        out: TextIO | None = None,
        now: Callable[[], datetime] | None = None,
    ):
        self._store = store
        self._last_check_path = last_check_path
        self._current = parse_version(current_version)
        self._url = releases_url
        self._fetch = fetch
        self._timeout_s = timeout_s
        self._out = out
        self._now = now or (lambda: datetime.now(timezone.utc))

    def should_check(self) -> bool:
        if not self._store.get_bool(WANT_UPDATE_NOTIFICATION):
            return False
        last = read_last_check(self._last_check_path)
        if last is None:
            return True
        wait = timedelta(hours=self._store.get_int(REMINDER_WAIT_PERIOD_IN_HOURS))
        return self._now() - last >= wait

    def latest_version(self) -> Version | None:
        newest: Version | None = None
        for release in self._fetch(self._url, self._timeout_s):
            try:
                v = parse_version(release.name)
            except InvalidVersion:
                logger.debug("release_name_skipped", extra={"name": release.name})
                continue
            if newest is None or v > newest:
                newest = v
        return newest

    def maybe_print_update_text(self) -> bool:
        """Print the upgrade hint when a newer release exists."""

        if not self.should_check():
            return False

        latest = self.latest_version()
        if latest is None or latest <= self._current:
            logger.debug(
                "no_update_available",
                extra={"current": str(self._current), "latest": str(latest) if latest else None},
            )
            return False

        try:
            write_last_check(self._last_check_path, self._now())
        except OSError as e:
            logger.warning("last_update_check_write_failed", extra={"error": str(e)})

        out = self._out or sys.stderr
        out.write(
            f"There is a newer version of minikube available (v{latest}).  Download it here:\n"
            f"{GITHUB_RELEASE_URL}v{latest}\n"
            "To disable this notification, run the following:\n"
            f"minikube config set {WANT_UPDATE_NOTIFICATION} false\n"
        )
        return True
