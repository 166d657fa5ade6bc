from __future__ import annotations

import json
from pathlib import Path

import pytest

from minikube import __version__
from minikube.cmd.root import RootCommand
from minikube.constants import MiniPaths


def _run(paths: MiniPaths, environ: dict[str, str], *argv: str, **kwargs) -> int:
    kwargs.setdefault("update_check", None)
    kwargs.setdefault("kubectl_check", None)
    return RootCommand(environ=environ, paths=paths, **kwargs).execute(list(argv))


def test_no_command_prints_help_without_bootstrap(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(paths, environ) == 0

    assert "usage: minikube" in capsys.readouterr().out
    assert not paths.root.exists()


def test_version(paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(paths, environ, "version") == 0

    assert capsys.readouterr().out == f"minikube version: v{__version__}\n"
    assert all(p.is_dir() for p in paths.dirs)


def test_config_set_then_get(paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(paths, environ, "config", "set", "wantupdatenotification", "false") == 0
    assert json.loads(paths.config_file.read_text(encoding="utf-8")) == {"WantUpdateNotification": False}

    capsys.readouterr()
    assert _run(paths, environ, "config", "get", "WantUpdateNotification") == 0
    assert capsys.readouterr().out == "false\n"


def test_config_get_prefers_flag_then_env(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    _run(paths, environ, "config", "set", "v", "1")
    environ["MINIKUBE_V"] = "4"
    capsys.readouterr()

    assert _run(paths, environ, "config", "get", "v") == 0
    assert capsys.readouterr().out == "4\n"

    assert _run(paths, environ, "config", "get", "v", "--v=2") == 0
    assert capsys.readouterr().out == "2\n"


def test_global_bool_flag_before_subcommand(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(paths, environ, "--alsologtostderr", "config", "get", "alsologtostderr") == 0
    assert capsys.readouterr().out == "true\n"


def test_config_get_unknown_key(paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(paths, environ, "config", "get", "nothing-here") == 1
    assert "could not be found" in capsys.readouterr().err


def test_config_set_rejects_unknown_key_and_bad_value(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(paths, environ, "config", "set", "cpus", "4") == 1
    assert "Cannot find property name" in capsys.readouterr().err

    assert _run(paths, environ, "config", "set", "v", "loud") == 1
    assert "invalid value for v" in capsys.readouterr().err
    assert not paths.config_file.exists()


def test_config_view_and_unset(paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]) -> None:
    _run(paths, environ, "config", "set", "WantReportError", "true")
    _run(paths, environ, "config", "set", "ReminderWaitPeriodInHours", "48")
    capsys.readouterr()

    assert _run(paths, environ, "config", "view") == 0
    assert capsys.readouterr().out == "ReminderWaitPeriodInHours: 48\nWantReportError: true\n"

    assert _run(paths, environ, "config", "unset", "wantreporterror") == 0
    assert json.loads(paths.config_file.read_text(encoding="utf-8")) == {"ReminderWaitPeriodInHours": 48}


def test_config_without_subcommand_prints_help(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(paths, environ, "config") == 0
    out = capsys.readouterr().out
    assert "usage: minikube config" in out
    assert "unset" in out


def test_provisioning_failure_exits_non_zero(
    tmp_path: Path, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "file").write_text("x", encoding="utf-8")
    paths = MiniPaths(tmp_path / "file" / ".minikube")

    assert _run(paths, environ, "version") == 1
    assert "Error creating minikube directory" in capsys.readouterr().err


def test_incomplete_flag_set_fails_startup(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(paths, environ, "version", external_flags=[]) == 2
    err = capsys.readouterr().err
    assert "whitelisted flags are not registered" in err
    assert "log_dir" in err


def test_invalid_flag_value_is_usage_error(paths: MiniPaths, environ: dict[str, str]) -> None:
    assert _run(paths, environ, "version", "--v=abc") == 2


def test_abbreviated_flags_are_rejected(paths: MiniPaths, environ: dict[str, str]) -> None:
    assert _run(paths, environ, "version", "--use") == 2
    assert _run(paths, environ, "version", "--log=/tmp") == 2
    assert _run(paths, environ, "--also", "version") == 2


def test_config_get_reports_resolved_flag_value(
    paths: MiniPaths, environ: dict[str, str], capsys: pytest.CaptureFixture[str]
) -> None:
    environ["MINIKUBE_V"] = "loud"

    assert _run(paths, environ, "config", "get", "v") == 0
    assert capsys.readouterr().out == "0\n"


def test_home_from_environment(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    environ = {"MINIKUBE_HOME": str(tmp_path / "mk")}
    cmd = RootCommand(environ=environ, update_check=None, kubectl_check=None)

    assert cmd.execute(["version"]) == 0
    assert (tmp_path / "mk" / "cache" / "iso").is_dir()
    assert cmd.flags.lookup("log_dir").value == str(tmp_path / "mk" / "logs")
