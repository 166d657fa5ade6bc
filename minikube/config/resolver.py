"""Whitelisted flag resolution.

Flags owned by other components (the logging flags in particular) read their
final values from the config store, so a value set in the config file or
environment behaves as if it had been passed on the command line.
"""

from __future__ import annotations

import logging
from typing import Iterable

from minikube.config.store import ConfigStore
from minikube.errors import WhitelistError
from minikube.flags import FlagSet

logger = logging.getLogger(__name__)


def check_whitelist(flags: FlagSet, whitelist: Iterable[str]) -> None:
    missing = [name for name in whitelist if flags.lookup(name) is None]
    if missing:
        raise WhitelistError(f"whitelisted flags are not registered: {', '.join(missing)}")


def resolve_flags(flags: FlagSet, store: ConfigStore, whitelist: Iterable[str]) -> None:
    """Push explicit flags into ``store`` and pull resolved values back.

    Precedence, highest first: explicit flag, environment, config file,
    flag default. Every whitelisted flag ends up marked as changed.

    Raises:
        WhitelistError: If a whitelisted name has no registered flag.
    """

    names = list(whitelist)
    check_whitelist(flags, names)

    for name in names:
        flag = flags.lookup(name)
        assert flag is not None

        store.set_default(name, flag.default)
        if flag.changed:
            store.set(name, flag.value)

        resolved = store.get(name)
        source = store.source_of(name)
        try:
            flag.set(resolved)
        except ValueError as e:
            logger.warning(
                "flag_value_invalid",
                extra={"flag": name, "value": repr(resolved), "source": source, "error": str(e)},
            )
            flag.set(flag.default)
            source = "default"
        flag.changed = True
        # The store must hand out the same typed value the flag ended up with.
        store.set_resolved(name, flag.value, source=source)

        logger.debug(
            "flag_resolved",
            extra={"flag": name, "value": flag.value, "source": store.source_of(name)},
        )
