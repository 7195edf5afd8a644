"""Read-eval-print loop and process entry point."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional, Tuple

from vecalc.commands import META_COMMANDS, Calculator
from vecalc.config import CalculatorConfig, load_config
from vecalc.errors import CalculatorError
from vecalc.evaluator import BUILTIN_NAMES
from vecalc.logging_config import configure_logging
from vecalc.readers import LineReader, PromptToolkitReader, StreamLineReader
from vecalc.session import Session

logger = logging.getLogger(__name__)


class REPL:
    """Reads one statement per line until end of input, interrupt or ``.exit``."""

    def __init__(self, calculator: Calculator, reader: LineReader, prompt: str = ">> "):
        self.calculator = calculator
        self.reader = reader
        self.prompt = prompt

    def evaluate_line(self, line: str) -> Tuple[bool, Optional[str]]:
        """Evaluate a single line. Returns (ok, output)."""
        try:
            return True, self.calculator.execute(line)
        except CalculatorError as e:
            logger.debug(f"Rejected input {line!r}: {e}")
            return False, f"ERR: {e}"
        except Exception as e:
            logger.exception(f"Unexpected error evaluating {line!r}")
            return False, f"ERR: {e}"

    def run(self) -> None:
        while True:
            try:
                line = self.reader.read_line(self.prompt)
            except KeyboardInterrupt:
                print("CTRL-C")
                break
            except EOFError:
                print("CTRL-D")
                break
            if not line.strip():
                continue
            ok, out = self.evaluate_line(line)
            if not ok:
                print(out, file=sys.stderr)
            elif out:
                print(out)


def build_reader(config: CalculatorConfig, session: Session) -> LineReader:
    if not sys.stdin.isatty():
        return StreamLineReader(echo_prompt=False)

    def completions() -> List[str]:
        return META_COMMANDS + BUILTIN_NAMES + list(session.variables)

    return PromptToolkitReader(config.history_file, completions)


def main() -> int:
    config = load_config()
    configure_logging(config.log_level)
    session = Session(config.debug_level)
    reader = build_reader(config, session)
    calculator = Calculator(session, reader)
    REPL(calculator, reader, config.prompt).run()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
