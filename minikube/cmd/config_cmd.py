"""``minikube config`` subcommands.

These are the only code paths that write the config file.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from minikube.config.keys import SETTINGS, find_setting
from minikube.config.loader import load_config_file, write_config_file
from minikube.config.values import coerce, parse_str
from minikube.errors import ConfigError
from minikube.runtime.bootstrap import RuntimeContext


def _read_existing(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    return load_config_file(path)


def _format(value: Any) -> str:
    try:
        return parse_str(value)
    except ValueError:
        return json.dumps(value, sort_keys=True)


def _canonical(name: str) -> tuple[str, type]:
    found = find_setting(name)
    if found is None:
        known = ", ".join(SETTINGS)
        raise ConfigError(f"Cannot find property name {name!r} (known: {known})")
    return found


def view(ctx: RuntimeContext, ns: argparse.Namespace) -> int:
    values = _read_existing(ctx.paths.config_file)
    if values:
        sys.stdout.write(yaml.safe_dump(values, default_flow_style=False, sort_keys=True))
    return 0


def get(ctx: RuntimeContext, ns: argparse.Namespace) -> int:
    key = ns.key
    found = find_setting(key)
    if found is not None:
        key = found[0]

    value = ctx.store.get(key)
    if value is None:
        sys.stderr.write("Error: specified key could not be found in config\n")
        return 1
    sys.stdout.write(f"{_format(value)}\n")
    return 0


def set_(ctx: RuntimeContext, ns: argparse.Namespace) -> int:
    key, kind = _canonical(ns.key)
    try:
        value = coerce(ns.value, kind)
    except ValueError as e:
        raise ConfigError(f"invalid value for {key}: {e}") from e

    path = ctx.paths.config_file
    values = {k: v for k, v in _read_existing(path).items() if k.lower() != key.lower()}
    values[key] = value
    write_config_file(path, values)
    return 0


def unset(ctx: RuntimeContext, ns: argparse.Namespace) -> int:
    path = ctx.paths.config_file
    existing = _read_existing(path)
    values = {k: v for k, v in existing.items() if k.lower() != ns.key.lower()}
    if len(values) != len(existing):
        write_config_file(path, values)
    return 0


def register(sub: argparse._SubParsersAction, *, parents: list[argparse.ArgumentParser]) -> None:
    opts: dict[str, Any] = {"parents": parents, "allow_abbrev": False}
    config_p = sub.add_parser(
        "config",
        help="Modify minikube config",
        description=(
            "config modifies minikube config files using subcommands like "
            '"minikube config set vm-driver kvm". Configurable fields: ' + ", ".join(SETTINGS)
        ),
        **opts,
    )
    config_p.set_defaults(_handler=None, _help=config_p.print_help, _notify=False)
    config_sub = config_p.add_subparsers(title="subcommands", metavar="SUBCOMMAND")

    view_p = config_sub.add_parser("view", help="Display values currently set in the config file", **opts)
    view_p.set_defaults(_handler=view)

    get_p = config_sub.add_parser("get", help="Gets the value of PROPERTY_NAME", **opts)
    get_p.add_argument("key", metavar="PROPERTY_NAME")
    get_p.set_defaults(_handler=get)

    set_p = config_sub.add_parser("set", help="Sets an individual value in the config file", **opts)
    set_p.add_argument("key", metavar="PROPERTY_NAME")
    set_p.add_argument("value", metavar="PROPERTY_VALUE")
    set_p.set_defaults(_handler=set_)

    unset_p = config_sub.add_parser("unset", help="Unsets an individual value in the config file", **opts)
    unset_p.add_argument("key", metavar="PROPERTY_NAME")
    unset_p.set_defaults(_handler=unset)
