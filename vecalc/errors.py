"""Error types raised while parsing, evaluating and persisting calculator input.

Every user-facing failure derives from CalculatorError so the REPL can report it
and keep going. Nothing here is raised for internal defects.
"""

from __future__ import annotations

from typing import Optional


class CalculatorError(Exception):
    """Base class for calculator errors."""
    pass


class TokenizationError(CalculatorError):
    """Raised when input does not match the grammar."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"Tokenization error: {message} at position {position}")


class NumericLiteralError(CalculatorError):
    """Raised when a number token cannot be parsed as a float."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Float parsing error: invalid float literal {text!r}")


class InvalidIdentifierError(CalculatorError):
    """Raised when an expression refers to an undefined variable."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid identifier '{token}'")


class InvalidOperatorError(CalculatorError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid operator '{token}'")


class TypeMismatchError(CalculatorError):
    """Raised when an operation is applied to incompatible value variants."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid expression: {reason}")


class SpannedTypeMismatchError(TypeMismatchError):
    """TypeMismatchError that remembers which part of the input caused it."""

    def __init__(self, reason: str, start: int, end: int):
        self.start = start
        self.end = end
        CalculatorError.__init__(
            self, f"Invalid expression: {reason} in the expression from {start} to {end}"
        )
        self.reason = reason


class UnknownFunctionError(CalculatorError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown function: {name}")


class FunctionArityError(CalculatorError):
    def __init__(self, name: str, expected: int, got: int):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"Function '{name}' takes {expected} argument(s), got {got}")


class PersistenceError(CalculatorError):
    """Raised when a state file cannot be written, opened or replayed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
