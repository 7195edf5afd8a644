"""Operator precedence table and the generic precedence-climbing routine."""

from __future__ import annotations

from typing import Callable, Dict, Sequence, Tuple, TypeVar

from vecalc.errors import InvalidOperatorError

T = TypeVar("T")
O = TypeVar("O")
R = TypeVar("R")

# Canonical operator -> (precedence, right_assoc). Higher number binds tighter.
PRECEDENCE: Dict[str, Tuple[int, bool]] = {
    '+': (1, False),
    '-': (1, False),
    'dot': (2, False),
    'cross': (2, False),
    '*': (3, False),
    '/': (3, False),
    '^': (4, True),
}


def lookup(op: str) -> Tuple[int, bool]:
    try:
        return PRECEDENCE[op]
    except KeyError:
        raise InvalidOperatorError(op) from None


def climb(
    operands: Sequence[T],
    operators: Sequence[O],
    primary: Callable[[T], R],
    infix: Callable[[R, O, R], R],
    key: Callable[[O], str] = lambda op: op,
) -> R:
    """Fold ``operands[0] op[0] operands[1] ...`` according to PRECEDENCE.

    ``primary`` is applied to each operand lazily, left to right, and ``infix``
    combines two folded sides. Exceptions from either callback abort the fold.
    """
    if len(operands) != len(operators) + 1:
        raise ValueError("expected exactly one more operand than operators")
    pos = 0

    def parse(min_prec: int) -> R:
        nonlocal pos
        lhs = primary(operands[pos])
        while pos < len(operators):
            op = operators[pos]
            prec, right_assoc = lookup(key(op))
            if prec < min_prec:
                break
            pos += 1
            rhs = parse(prec if right_assoc else prec + 1)
            lhs = infix(lhs, op, rhs)
        return lhs

    return parse(1)
