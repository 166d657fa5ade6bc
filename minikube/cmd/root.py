from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Mapping, Sequence

from minikube import __version__
from minikube.cmd import config_cmd
from minikube.config.env import EnvBinder
from minikube.config.keys import FLAG_WHITELIST
from minikube.config.store import ConfigStore
from minikube.constants import ENV_PREFIX, MiniPaths, default_paths
from minikube.errors import ConfigError, ProvisionError, WhitelistError
from minikube.flags import Flag, FlagSet
from minikube.machine.client import USE_VENDORED_DRIVER
from minikube.observability.logging import logging_flags
from minikube.runtime.bootstrap import SHOW_LIBMACHINE_LOGS, Bootstrap, RuntimeContext

logger = logging.getLogger(__name__)


def _version(ctx: RuntimeContext, ns: argparse.Namespace) -> int:
    sys.stdout.write(f"minikube version: v{__version__}\n")
    return 0


def root_flags() -> FlagSet:
    return FlagSet(
        [
            Flag(
                SHOW_LIBMACHINE_LOGS,
                bool,
                False,
                deprecated="To enable libmachine logs, set --v=3 or higher",
            ),
            Flag(USE_VENDORED_DRIVER, bool, False, "Use the vendored in drivers instead of RPC"),
        ]
    )


class RootCommand:
    """Owns the global flags, parses argv and runs bootstrap before the handler.

    Args:
        environ: Environment to read ``MINIKUBE_*`` variables from. Defaults
            to the process environment.
        paths: Filesystem layout; derived from ``environ`` when omitted.
        external_flags: Flag sets contributed by other components. Defaults
            to the logging flags.
        whitelist: Flag names that may also be set from config/environment.
        bootstrap_options: Extra keyword arguments for :class:`Bootstrap`.
    """

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        paths: MiniPaths | None = None,
        external_flags: Sequence[FlagSet] | None = None,
        whitelist: Sequence[str] = FLAG_WHITELIST,
        **bootstrap_options: Any,
    ):
        self.paths = paths or default_paths(environ)
        self.flags = root_flags()
        if external_flags is None:
            external_flags = [logging_flags(log_dir=self.paths.logs_dir)]
        for fs in external_flags:
            self.flags.add_flag_set(fs)

        self.store = ConfigStore(EnvBinder(ENV_PREFIX, environ))
        self.bootstrap = Bootstrap(
            paths=self.paths,
            flags=self.flags,
            store=self.store,
            whitelist=whitelist,
            **bootstrap_options,
        )

    def build_parser(self) -> argparse.ArgumentParser:
        # Global flags are accepted on every level, before or after the subcommand.
        common = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
        self.flags.bind(common)

        parser = argparse.ArgumentParser(
            prog="minikube",
            description=(
                "Minikube is a CLI tool that provisions and manages single-node "
                "Kubernetes clusters optimized for development workflows."
            ),
            parents=[common],
            allow_abbrev=False,
        )
        parser.set_defaults(_handler=None, _help=parser.print_help, _notify=True, _kubectl_msg=True)

        sub = parser.add_subparsers(title="commands", metavar="COMMAND")
        config_cmd.register(sub, parents=[common])

        version_p = sub.add_parser(
            "version", help="Print the version of minikube", parents=[common], allow_abbrev=False
        )
        version_p.set_defaults(_handler=_version, _notify=False, _kubectl_msg=False)

        return parser

    def execute(self, argv: Sequence[str] | None = None) -> int:
        parser = self.build_parser()
        try:
            ns = parser.parse_args(list(argv) if argv is not None else None)
        except SystemExit as e:
            # argparse has already printed help/usage.
            code = e.code
            return int(code) if isinstance(code, int) else 1

        handler = ns._handler
        if handler is None:
            ns._help()
            return 0

        supplied = self.flags.apply(ns)
        logger.debug("flags_parsed", extra={"supplied": supplied})

        try:
            ctx = self.bootstrap.run(update_notification=ns._notify, kubectl_download_msg=ns._kubectl_msg)
        except ProvisionError as e:
            logger.error("provision_failed", extra={"error": str(e)})
            sys.stderr.write(f"{e}\n")
            return 1
        except WhitelistError as e:
            logger.error("flag_wiring_error", extra={"error": str(e)})
            sys.stderr.write(f"ConfigError: {e}\n")
            return 2
        except ConfigError as e:
            logger.error("config_error", extra={"error": str(e)})
            sys.stderr.write(f"ConfigError: {e}\n")
            return 2

        try:
            return handler(ctx, ns)
        except ConfigError as e:
            sys.stderr.write(f"Error: {e}\n")
            return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Console entrypoint referenced by pyproject.toml."""

    return RootCommand().execute(argv)


if __name__ == "__main__":
    raise SystemExit(main())
