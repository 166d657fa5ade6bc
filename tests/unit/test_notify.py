from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from minikube.config.keys import CONFIG_DEFAULTS, WANT_KUBECTL_DOWNLOAD_MSG, WANT_UPDATE_NOTIFICATION
from minikube.config.store import ConfigStore
from minikube.kubectl import maybe_print_kubectl_download_msg
from minikube.notify import Release, UpdateNotifier, read_last_check, write_last_check

NOW = datetime(2017, 4, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def defaults(store: ConfigStore) -> ConfigStore:
    for k, v in CONFIG_DEFAULTS.items():
        store.set_default(k, v)
    return store


def _notifier(store: ConfigStore, tmp_path: Path, releases: list[str], out: io.StringIO) -> UpdateNotifier:
    def fetch(url: str, timeout_s: float) -> list[Release]:
        return [Release(name=n) for n in releases]

    return UpdateNotifier(
        store=store,
        last_check_path=tmp_path / "last_update_check",
        current_version="0.18.0",
        fetch=fetch,
        out=out,
        now=lambda: NOW,
    )


def test_prints_when_newer_release_exists(defaults: ConfigStore, tmp_path: Path) -> None:
    out = io.StringIO()
    n = _notifier(defaults, tmp_path, ["v0.17.1", "v0.19.0", "v0.18.0"], out)

    assert n.maybe_print_update_text() is True

    text = out.getvalue()
    assert "newer version of minikube available (v0.19.0)" in text
    assert "releases/tag/v0.19.0" in text
    assert f"minikube config set {WANT_UPDATE_NOTIFICATION} false" in text
    assert read_last_check(tmp_path / "last_update_check") == NOW


def test_silent_when_up_to_date(defaults: ConfigStore, tmp_path: Path) -> None:
    out = io.StringIO()
    n = _notifier(defaults, tmp_path, ["v0.17.1", "v0.18.0", "not-a-version"], out)

    assert n.maybe_print_update_text() is False
    assert out.getvalue() == ""


def test_reminder_wait_period_suppresses_check(defaults: ConfigStore, tmp_path: Path) -> None:
    write_last_check(tmp_path / "last_update_check", NOW - timedelta(hours=3))
    out = io.StringIO()
    n = _notifier(defaults, tmp_path, ["v1.0.0"], out)

    assert n.should_check() is False
    assert n.maybe_print_update_text() is False

    defaults.set("ReminderWaitPeriodInHours", 2)
    assert n.should_check() is True


def test_disabled_by_config(defaults: ConfigStore, environ: dict[str, str], tmp_path: Path) -> None:
    environ["MINIKUBE_WANTUPDATENOTIFICATION"] = "false"
    n = _notifier(defaults, tmp_path, ["v1.0.0"], io.StringIO())

    assert n.should_check() is False


def test_invalid_last_check_is_ignored(tmp_path: Path) -> None:
    p = tmp_path / "last_update_check"
    p.write_text("yesterday", encoding="utf-8")

    assert read_last_check(p) is None


def test_kubectl_message_when_missing(defaults: ConfigStore) -> None:
    out = io.StringIO()

    assert maybe_print_kubectl_download_msg(defaults, out=out, which=lambda name: None) is True
    assert "kubectl could not be found on your path" in out.getvalue()
    assert f"minikube config set {WANT_KUBECTL_DOWNLOAD_MSG} false" in out.getvalue()


def test_kubectl_message_skipped_when_installed_or_disabled(defaults: ConfigStore) -> None:
    out = io.StringIO()
    assert maybe_print_kubectl_download_msg(defaults, out=out, which=lambda name: "/usr/bin/kubectl") is False

    defaults.merge_file_values({WANT_KUBECTL_DOWNLOAD_MSG: False})
    assert maybe_print_kubectl_download_msg(defaults, out=out, which=lambda name: None) is False
    assert out.getvalue() == ""
