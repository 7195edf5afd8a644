"""Line readers: where the REPL and the modify command get their input from."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory


class LineReader(ABC):
    """Supplies complete input lines.

    ``read_line`` raises EOFError at end of input and KeyboardInterrupt when the
    user interrupts.
    """

    @abstractmethod
    def read_line(self, prompt: str, default: str = '') -> str:
        ...


class PromptToolkitReader(LineReader):
    """Interactive reader with persistent history and word completion."""

    def __init__(self, history_file: str, completions: Optional[Callable[[], Iterable[str]]] = None):
        self.session = PromptSession(history=FileHistory(history_file))
        self.completions = completions

    def read_line(self, prompt: str, default: str = '') -> str:
        completer = None
        if self.completions is not None:
            completer = WordCompleter(sorted(set(self.completions())), WORD=True)
        return self.session.prompt(prompt, default=default, completer=completer)


class StreamLineReader(LineReader):
    """Reads lines from a plain text stream, e.g. piped stdin.

    A stream cannot be pre-seeded, so ``default`` is ignored.
    """

    def __init__(self, stream: Optional[TextIO] = None, echo_prompt: bool = True):
        self.stream = stream
        self.echo_prompt = echo_prompt

    def read_line(self, prompt: str, default: str = '') -> str:
        if self.echo_prompt:
            sys.stdout.write(prompt)
            sys.stdout.flush()
        line = (self.stream or sys.stdin).readline()
        if line == '':
            raise EOFError()
        return line.rstrip('\r\n')
