"""Save and load session state as a replayable transcript of commands.

A state file holds one ``name = value`` line per variable followed by a single
``.debug <level>`` line. Loading feeds each line back through the normal command
entry point, so the format is exactly what a user could have typed.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from vecalc.errors import CalculatorError, PersistenceError
from vecalc.session import Session

logger = logging.getLogger(__name__)

STATE_FILE_EXT = "vecalc"


def state_path(name: str) -> str:
    return f"{name}.{STATE_FILE_EXT}"


def dump_state(session: Session) -> str:
    lines = [f"{name} = {value}" for name, value in session.items()]
    lines.append(f".debug {session.debug_level}")
    return "\n".join(lines) + "\n"


def save_state(name: str, session: Session) -> str:
    path = state_path(name)
    for var, value in session.items():
        if not value.is_finite():
            # inf/nan render as text the parser rejects
            logger.warning(f"Variable {var} = {value} is not finite; {path} will fail to load at that line")
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(dump_state(session))
    except OSError as e:
        logger.error(f"Error writing state file {path}: {e}")
        raise PersistenceError(f"Error writing state file: {e}") from e
    logger.info(f"Saved {len(session.variables)} variables to {path}")
    return f"Saved {len(session.variables)} variables to {path}"


def load_state(name: str, session: Session, execute: Callable[[str], Optional[str]]) -> str:
    """Replay a state file through ``execute``.

    Verbosity is reset to 0 before the file is opened. The first line that fails
    to parse or evaluate aborts the load; lines before it stay applied.
    """
    session.debug_level = 0
    path = state_path(name)
    try:
        f = open(path, 'r', encoding='utf-8')
    except OSError as e:
        logger.error(f"Error opening state file {path}: {e}")
        raise PersistenceError(f"Error opening state file: {e}") from e

    output: List[str] = []
    processed = 0
    with f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                result = execute(line)
            except CalculatorError as e:
                logger.error(f"Aborting load of {path} at line {line_number}: {e}")
                raise PersistenceError(str(e), line_number=line_number) from e
            if result:
                output.append(result)
            processed += 1

    logger.info(f"Loaded {processed} lines from {path}")
    output.append(f"Processed {processed} lines")
    output.append("Finished loading state file.")
    return "\n".join(output)
