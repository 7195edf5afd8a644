"""Session state: the variable store plus the debug verbosity level."""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from vecalc.values import Value

DEFAULT_DEBUG_LEVEL = 1


def debug_print(debug_level: int, message: str) -> None:
    print(f"Debug {debug_level}: {message}")


class Session:
    """Variables and verbosity for one calculator session.

    ``set_var`` always overwrites (so plain assignment may change a variable's
    type); ``change_var`` only accepts a value of the same variant as the one it
    replaces.
    """

    def __init__(self, debug_level: int = DEFAULT_DEBUG_LEVEL):
        self.variables: Dict[str, Value] = {}
        self.debug_level = debug_level

    def set_var(self, name: str, value: Value) -> Optional[Value]:
        previous = self.variables.get(name)
        self.variables[name] = value
        return previous

    def change_var(self, name: str, value: Value) -> bool:
        old = self.variables.get(name)
        if old is None or not value.same_variant(old):
            return False
        self.variables[name] = value
        return True

    def get_var(self, name: str) -> Optional[Value]:
        return self.variables.get(name)

    def contains(self, name: str) -> bool:
        return name in self.variables

    def items(self) -> Iterator[Tuple[str, Value]]:
        return iter(list(self.variables.items()))

    def print_debug(self, min_debug_level: int, message: str) -> None:
        if self.debug_level >= min_debug_level:
            debug_print(min_debug_level, message)
