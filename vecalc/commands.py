"""Top-level command dispatch: assignment, lookup, evaluation and meta-commands."""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Optional, Set

from vecalc.errors import PersistenceError, TokenizationError
from vecalc.evaluator import Evaluator
from vecalc.grammar import (
    Assignment,
    DebugCommand,
    ExitCommand,
    Identifier,
    LoadCommand,
    MetaCommand,
    ModifyCommand,
    Node,
    SaveCommand,
    parse_command,
    parse_value,
)
from vecalc.persistence import load_state, save_state, state_path
from vecalc.readers import LineReader, StreamLineReader
from vecalc.session import Session

logger = logging.getLogger(__name__)

META_COMMANDS: List[str] = ['.debug', '.modify', '.save', '.load', '.exit']


class Calculator:
    """Parses input lines and applies them to a session.

    ``execute`` returns the text to show the user (or None when a statement has
    no output) and raises CalculatorError subclasses for bad input.
    """

    def __init__(self, session: Optional[Session] = None, reader: Optional[LineReader] = None):
        self.session = session if session is not None else Session()
        self.evaluator = Evaluator(self.session)
        self.reader = reader if reader is not None else StreamLineReader()
        self._loading: Set[str] = set()

    def execute(self, line: str) -> Optional[str]:
        try:
            return self._dispatch(line)
        except RecursionError:
            raise TokenizationError("Expression nested too deeply", 0) from None

    def _dispatch(self, line: str) -> Optional[str]:
        node = parse_command(line)
        self.session.print_debug(3, f"{node.rule} : {node.text}")
        if isinstance(node, Assignment):
            self.assign(node)
            return None
        if isinstance(node, Identifier):
            if not self.session.contains(node.name):
                return f"Variable '{node.name}' not found"
            return f"{node.name} = {self.session.get_var(node.name)}"
        if isinstance(node, MetaCommand):
            return self.run_meta(node)
        return str(self.evaluator.evaluate(node))

    def assign(self, node: Assignment) -> None:
        value = self.evaluator.evaluate(node.value)
        previous = self.session.set_var(node.name, value)
        if previous is None:
            self.session.print_debug(2, f"Set {node.name} to {value}")
        else:
            self.session.print_debug(2, f"Changed {node.name} from {previous} to {value}")

    def run_meta(self, node: Node) -> Optional[str]:
        if isinstance(node, DebugCommand):
            if node.level is None:
                return f"Debug level: {self.session.debug_level}"
            self.session.debug_level = node.level
            self.session.print_debug(1, f"Changed debug level to {node.level}")
            return None
        if isinstance(node, ModifyCommand):
            return self.modify_variable(node.name)
        if isinstance(node, SaveCommand):
            return save_state(node.name, self.session)
        if isinstance(node, LoadCommand):
            return self.load(node.name)
        if isinstance(node, ExitCommand):
            logger.info("Exit requested")
            sys.exit(0)
        raise TypeError(f"Unsupported command: {type(node).__name__}")

    def load(self, name: str) -> str:
        key = os.path.abspath(state_path(name))
        if key in self._loading:
            raise PersistenceError(f"State file {state_path(name)} is already being loaded")
        self._loading.add(key)
        try:
            return load_state(name, self.session, self.execute)
        finally:
            self._loading.discard(key)

    def modify_variable(self, name: str) -> str:
        """Interactively replace a variable with a value of the same variant."""
        if not self.session.contains(name):
            return f"Unknown variable {name}"
        current = self.session.get_var(name)

        prompt = f"Change {name} from {current} to: "
        try:
            reply = self.reader.read_line(prompt, default=str(current))
        except (EOFError, KeyboardInterrupt):
            return "Modify cancelled"

        try:
            node = parse_value(reply)
        except TokenizationError as e:
            logger.debug(f"Rejected replacement for {name}: {e}")
            return "Failed to parse value"
        value = self.evaluator.evaluate(node)
        if self.session.change_var(name, value):
            return f"Changed {name}"
        return f"Failed to change {name} because of differing value"
