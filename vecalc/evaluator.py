"""Evaluates parse tree nodes into Values."""

from __future__ import annotations

from typing import Callable, Dict, List, Tuple

import numpy as np

from vecalc import values
from vecalc.errors import (
    FunctionArityError,
    InvalidIdentifierError,
    NumericLiteralError,
    SpannedTypeMismatchError,
    TypeMismatchError,
    UnknownFunctionError,
)
from vecalc.grammar import (
    Expression,
    FunctionCall,
    Identifier,
    Node,
    NumberLiteral,
    Token,
    VectorLiteral,
)
from vecalc.precedence import climb
from vecalc.session import Session
from vecalc.values import Number, Value, Vector

# --------------------------
# Builtins
# --------------------------

# name -> (arity, function)
BUILTINS: Dict[str, Tuple[int, Callable[..., Value]]] = {
    'mag': (1, values.magnitude),
    'angle': (2, values.angle_between),
}

BUILTIN_NAMES = sorted(BUILTINS)

# Value paired with the source span it was computed from
Spanned = Tuple[Value, Tuple[int, int]]


def parse_float(text: str) -> np.float32:
    try:
        with np.errstate(over="ignore"):
            return np.float32(float(text))
    except ValueError:
        raise NumericLiteralError(text) from None


class Evaluator:
    """Evaluates expression subtrees against a session's variables."""

    def __init__(self, session: Session):
        self.session = session

    def evaluate(self, node: Node) -> Value:
        """Evaluate given node and return the result or raise a CalculatorError."""
        if isinstance(node, Expression):
            return self._climb(node)[0]
        return self.evaluate_primary(node)

    def evaluate_primary(self, node: Node) -> Value:
        self.session.print_debug(3, f"(parse_value) rule: {node.rule}")
        self.session.print_debug(3, f"(parse_value) data: '{node.text}'")
        if isinstance(node, NumberLiteral):
            return Number(parse_float(node.text))
        if isinstance(node, VectorLiteral):
            return Vector([parse_float(c.text) for c in node.components])
        if isinstance(node, Identifier):
            value = self.session.get_var(node.name)
            if value is None:
                raise InvalidIdentifierError(node.name)
            return value
        if isinstance(node, FunctionCall):
            return self._call(node)
        if isinstance(node, Expression):
            return self.evaluate(node)
        raise TypeError(f"Unsupported node: {type(node).__name__}")

    def _climb(self, expr: Expression) -> Spanned:
        def primary(node: Node) -> Spanned:
            return self.evaluate_primary(node), node.span

        def infix(lhs: Spanned, op: Token, rhs: Spanned) -> Spanned:
            span = (lhs[1][0], rhs[1][1])
            try:
                result = values.OPERATIONS[op.value](lhs[0], rhs[0])
            except SpannedTypeMismatchError:
                raise
            except TypeMismatchError as e:
                raise SpannedTypeMismatchError(e.reason, *span) from None
            self.session.print_debug(3, f"{lhs[0]} {op.text} {rhs[0]} -> {result}")
            return result, span

        if expr.operators:
            self.session.print_debug(2, f"expression tree: {expr.tree()}")
        return climb(expr.operands, expr.operators, primary, infix, key=lambda tok: tok.value)

    def _call(self, node: FunctionCall) -> Value:
        if node.name not in BUILTINS:
            raise UnknownFunctionError(node.name)
        arity, func = BUILTINS[node.name]
        if len(node.args) != arity:
            raise FunctionArityError(node.name, arity, len(node.args))
        args: List[Value] = [self.evaluate(arg) for arg in node.args]
        return func(*args)
