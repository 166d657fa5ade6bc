"""Flag definitions shared by the dispatcher and the precedence resolver.

argparse has no notion of "was this flag given", so flags are bound with
``default=argparse.SUPPRESS``: an attribute only shows up on the namespace
when the user supplied it, which is what :attr:`Flag.changed` records.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from minikube.config.values import coerce


@dataclass(slots=True)
class Flag:
    name: str
    kind: type
    default: Any
    usage: str = ""
    deprecated: str | None = None
    value: Any = field(init=False)
    changed: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.default = coerce(self.default, self.kind)
        self.value = self.default

    @property
    def dest(self) -> str:
        return self.name.replace("-", "_")

    @property
    def option_strings(self) -> list[str]:
        if len(self.name) == 1:
            return [f"-{self.name}", f"--{self.name}"]
        return [f"--{self.name}"]

    def set(self, raw: Any) -> None:
        """Assign ``raw`` converted to the flag's type.

        Raises:
            ValueError: If ``raw`` cannot be converted.
        """

        self.value = coerce(raw, self.kind)


class FlagSet:
    """An ordered collection of flags, keyed by name."""

    def __init__(self, flags: Iterable[Flag] = ()):
        self._flags: dict[str, Flag] = {}
        for f in flags:
            self.add(f)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags.values())

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def add(self, flag: Flag) -> Flag:
        if flag.name in self._flags:
            raise ValueError(f"flag redefined: {flag.name}")
        self._flags[flag.name] = flag
        return flag

    def add_flag_set(self, other: FlagSet) -> None:
        """Adopt flags from another set, skipping names already defined here."""

        for f in other:
            if f.name not in self._flags:
                self._flags[f.name] = f

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def bind(self, parser: argparse.ArgumentParser) -> None:
        for f in self:
            help_text = f.usage
            if f.deprecated:
                help_text = f"DEPRECATED: {f.deprecated}"
            kwargs: dict[str, Any] = {
                "dest": f.dest,
                "default": argparse.SUPPRESS,
                "help": f"{help_text} (default: {f.default!r})",
            }
            if f.kind is bool:
                # --flag / --no-flag; never consumes the next argument
                kwargs["action"] = argparse.BooleanOptionalAction
            else:
                kwargs.update(type=f.kind, metavar=f.name.upper().replace("-", "_"))
            parser.add_argument(*f.option_strings, **kwargs)

    def apply(self, ns: argparse.Namespace) -> list[str]:
        """Copy parsed values onto the flags and mark them changed.

        Returns the names of the flags that were supplied.
        """

        supplied: list[str] = []
        values = vars(ns)
        for f in self:
            if f.dest in values:
                f.set(values[f.dest])
                f.changed = True
                supplied.append(f.name)
        return supplied
