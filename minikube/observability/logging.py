from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from minikube.flags import Flag, FlagSet

# Logger of the VM/driver layer. Its output is only shown at higher verbosity.
MACHINE_LOGGER = "minikube.machine"

MACHINE_LOGS_LEVEL = 3
MACHINE_DEBUG_LEVEL = 7

LOG_FILE_NAME = "minikube.log"

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter suitable for structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Capture non-standard fields attached via `extra={...}`.
        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def logging_flags(log_dir: str | Path = "") -> FlagSet:
    """The flags this module contributes to the command line."""

    return FlagSet(
        [
            Flag("v", int, 0, "log level for V logs"),
            Flag("alsologtostderr", bool, False, "log to standard error as well as files"),
            Flag("log_dir", str, str(log_dir), "If non-empty, write log files in this directory"),
        ]
    )


@dataclass(frozen=True, slots=True)
class LogSettings:
    verbosity: int = 0
    alsologtostderr: bool = False
    log_dir: str = ""

    @classmethod
    def from_flags(cls, flags: FlagSet) -> LogSettings:
        def _value(name: str, fallback: Any) -> Any:
            f = flags.lookup(name)
            return fallback if f is None else f.value

        return cls(
            verbosity=int(_value("v", 0)),
            alsologtostderr=bool(_value("alsologtostderr", False)),
            log_dir=str(_value("log_dir", "")),
        )

    def v(self, level: int) -> bool:
        return self.verbosity >= level


def _drop_own_handlers(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        if getattr(h, "_minikube_owned", False):
            logger.removeHandler(h)
            h.close()


def _own(handler: logging.Handler) -> logging.Handler:
    setattr(handler, "_minikube_owned", True)
    return handler


def configure_logging(settings: LogSettings) -> None:
    """Install the file and stderr sinks on the root logger.

    Calling this again replaces only the handlers it installed itself.
    """

    root = logging.getLogger()
    _drop_own_handlers(root)
    if not hasattr(root, "_minikube_prior_level"):
        setattr(root, "_minikube_prior_level", root.level)
    root.setLevel(logging.DEBUG if settings.v(1) else logging.INFO)

    stderr_handler = _own(logging.StreamHandler(stream=sys.stderr))
    stderr_handler.setLevel(logging.NOTSET if settings.alsologtostderr else logging.ERROR)
    stderr_handler.setFormatter(JsonFormatter())
    root.addHandler(stderr_handler)

    if settings.log_dir:
        log_path = Path(settings.log_dir) / LOG_FILE_NAME
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = _own(logging.FileHandler(log_path, encoding="utf-8"))
        except OSError as e:
            logging.getLogger(__name__).warning(
                "log_file_unavailable", extra={"path": str(log_path), "error": str(e)}
            )
        else:
            file_handler.setFormatter(JsonFormatter())
            root.addHandler(file_handler)

    route_machine_logs(settings)


def route_machine_logs(settings: LogSettings) -> None:
    """Silence the machine logger below -v=3, enable its debug output at -v=7."""

    machine = logging.getLogger(MACHINE_LOGGER)
    _drop_own_handlers(machine)

    if not settings.v(MACHINE_LOGS_LEVEL):
        machine.addHandler(_own(logging.NullHandler()))
        machine.propagate = False
        machine.disabled = True
        return

    machine.disabled = False
    machine.propagate = True
    machine.setLevel(logging.DEBUG if settings.v(MACHINE_DEBUG_LEVEL) else logging.INFO)


def machine_logs_enabled() -> bool:
    machine = logging.getLogger(MACHINE_LOGGER)
    return not machine.disabled and machine.propagate


def reset_logging() -> None:
    """Undo :func:`configure_logging` (used between test runs)."""

    root = logging.getLogger()
    _drop_own_handlers(root)
    if hasattr(root, "_minikube_prior_level"):
        root.setLevel(getattr(root, "_minikube_prior_level"))
        delattr(root, "_minikube_prior_level")
    machine = logging.getLogger(MACHINE_LOGGER)
    _drop_own_handlers(machine)
    machine.disabled = False
    machine.propagate = True
    machine.setLevel(logging.NOTSET)
