"""One-time startup sequence run before any subcommand.

Order matters and is fixed:

1. create the directory layout (fatal on failure)
2. read the config file, bind the environment, resolve whitelisted flags
3. warn about deprecated flags
4. pick the driver client type
5. route log output according to the resolved verbosity
6. best-effort update / kubectl notices, each bounded by a deadline
"""

from __future__ import annotations

import asyncio
import enum
import logging
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TextIO

from minikube.config.keys import CONFIG_DEFAULTS, FLAG_WHITELIST
from minikube.config.resolver import resolve_flags
from minikube.config.store import ConfigStore
from minikube.constants import MiniPaths
from minikube.flags import FlagSet
from minikube.kubectl import maybe_print_kubectl_download_msg
from minikube.machine.client import ClientType, get_client_type
from minikube.notify import DEFAULT_TIMEOUT_S, UpdateNotifier
from minikube.observability.logging import LogSettings, configure_logging
from minikube.provision import ensure_dirs

logger = logging.getLogger(__name__)

SHOW_LIBMACHINE_LOGS = "show-libmachine-logs"

DEPRECATED_LIBMACHINE_LOGS_MSG = """
--show-libmachine-logs is deprecated.
Please use --v=3 to show libmachine logs, and --v=7 for debug level libmachine logs
"""


class BootstrapState(enum.Enum):
    NOT_RUN = "not_run"
    RUN = "run"


@dataclass(frozen=True, slots=True)
class RuntimeContext:
    """Resolved configuration handed to every subcommand."""

    paths: MiniPaths
    store: ConfigStore
    flags: FlagSet
    client_type: ClientType
    log: LogSettings


Notice = Callable[[RuntimeContext], object]


def default_update_check(ctx: RuntimeContext) -> object:
    notifier = UpdateNotifier(store=ctx.store, last_check_path=ctx.paths.last_update_check)
    return notifier.maybe_print_update_text()


def default_kubectl_check(ctx: RuntimeContext) -> object:
    return maybe_print_kubectl_download_msg(ctx.store)


def _settle(fut: asyncio.Future, result: object, error: BaseException | None) -> None:
    if fut.done():
        return
    if error is not None:
        fut.set_exception(error)
    else:
        fut.set_result(result)


def _start_daemon(loop: asyncio.AbstractEventLoop, name: str, fn: Callable[[], object]) -> asyncio.Future:
    """Run ``fn`` on a daemon thread and report back through a loop future.

    Daemon threads are not joined at interpreter exit, so a notice stuck past
    its deadline cannot hold the process open.
    """

    fut = loop.create_future()

    def target() -> None:
        result: object = None
        error: Exception | None = None
        try:
            result = fn()
        except Exception as e:  # noqa: BLE001
            error = e
        try:
            loop.call_soon_threadsafe(_settle, fut, result, error)
        except RuntimeError:
            # Loop already closed: the deadline passed and nobody is waiting.
            pass

    threading.Thread(target=target, name=f"minikube-notice-{name}", daemon=True).start()
    return fut


async def _bounded(name: str, fn: Callable[[], object], timeout_s: float) -> str:
    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(_start_daemon(loop, name, fn), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.info("notice_timed_out", extra={"notice": name, "timeout_s": timeout_s})
        return "timeout"
    except Exception as e:  # noqa: BLE001
        logger.warning("notice_failed", extra={"notice": name, "error": str(e)})
        return "error"
    return "ok"


async def _gather(notices: Sequence[tuple[str, Callable[[], object]]], timeout_s: float) -> list[str]:
    return await asyncio.gather(*(_bounded(name, fn, timeout_s) for name, fn in notices))


def run_notices(notices: Iterable[tuple[str, Callable[[], object]]], *, timeout_s: float) -> dict[str, str]:
    """Run notices concurrently; give up on each after ``timeout_s``.

    A notice still running at its deadline is abandoned: its daemon thread is
    left to finish on its own (or die with the process) and its result is
    never looked at.
    """

    items = list(notices)
    if not items:
        return {}

    results = asyncio.run(_gather(items, timeout_s))
    return {name: status for (name, _), status in zip(items, results)}


class Bootstrap:
    def __init__(
        self,
        *,
        paths: MiniPaths,
        flags: FlagSet,
        store: ConfigStore,
        whitelist: Sequence[str] = FLAG_WHITELIST,
        update_check: Notice | None = default_update_check,
        kubectl_check: Notice | None = default_kubectl_check,
        notice_timeout_s: float = DEFAULT_TIMEOUT_S,
        log_setup: Callable[[LogSettings], None] = configure_logging,
        out: TextIO | None = None,
    ):
        self._paths = paths
        self._flags = flags
        self._store = store
        self._whitelist = tuple(whitelist)
        self._update_check = update_check
        self._kubectl_check = kubectl_check
        self._notice_timeout_s = notice_timeout_s
        self._log_setup = log_setup
        self._out = out
        self._context: RuntimeContext | None = None
        self.notice_results: dict[str, str] = {}

    @property
    def state(self) -> BootstrapState:
        return BootstrapState.NOT_RUN if self._context is None else BootstrapState.RUN

    def run(self, *, update_notification: bool = True, kubectl_download_msg: bool = True) -> RuntimeContext:
        """Run the startup sequence once and return the resolved context.

        Later calls return the first context without repeating side effects.

        Raises:
            ProvisionError: If the directory layout cannot be created.
            WhitelistError: If a whitelisted flag is not registered.
            ConfigError: If two recognised keys share an environment variable.
        """

        if self._context is not None:
            logger.debug("bootstrap_already_ran")
            return self._context

        ensure_dirs(self._paths.dirs)
        self._load_config()

        if self._flag_value(SHOW_LIBMACHINE_LOGS):
            (self._out or sys.stdout).write(DEPRECATED_LIBMACHINE_LOGS_MSG + "\n")

        client_type = get_client_type(self._flags)

        log = LogSettings.from_flags(self._flags)
        self._log_setup(log)

        ctx = RuntimeContext(
            paths=self._paths,
            store=self._store,
            flags=self._flags,
            client_type=client_type,
            log=log,
        )
        self._context = ctx
        logger.debug(
            "bootstrap_done",
            extra={"root": str(self._paths.root), "client_type": client_type.value, "verbosity": log.verbosity},
        )

        notices: list[tuple[str, Callable[[], object]]] = []
        if update_notification and self._update_check is not None:
            check = self._update_check
            notices.append(("update_notification", lambda: check(ctx)))
        if kubectl_download_msg and self._kubectl_check is not None:
            kcheck = self._kubectl_check
            notices.append(("kubectl_download_msg", lambda: kcheck(ctx)))
        self.notice_results = run_notices(notices, timeout_s=self._notice_timeout_s)

        return ctx

    def _flag_value(self, name: str) -> object:
        f = self._flags.lookup(name)
        return None if f is None else f.value

    def _load_config(self) -> None:
        env = self._store.env
        env.load_dotenv_file(self._paths.dotenv_file)
        self._store.read_config_file(self._paths.config_file)

        env.check_collisions([*CONFIG_DEFAULTS, *self._whitelist, *(f.name for f in self._flags)])

        for key, value in CONFIG_DEFAULTS.items():
            self._store.set_default(key, value)

        resolve_flags(self._flags, self._store, self._whitelist)
