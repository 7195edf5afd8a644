"""Lexer, parse tree and recursive-descent parser for calculator statements.

Grammar:
    command     := meta | assignment | expression
    meta        := ".debug" [INT] | ".modify" IDENT | ".save" NAME | ".load" NAME | ".exit"
    assignment  := IDENT "=" expression
    expression  := primary (OP primary)*
    primary     := signed_number | vector | IDENT | call | "(" expression ")"
    vector      := "<" [signed_number ("," signed_number)*] ">" | "<Empty Vector>"
    call        := IDENT "(" [expression ("," expression)*] ")"

Expressions are kept as a flat operand/operator sequence; precedence is applied
later by the evaluator (see vecalc.precedence).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional, Tuple

from vecalc.errors import TokenizationError
from vecalc.precedence import climb
from vecalc.values import EMPTY_VECTOR_TEXT

# --------------------------
# Tokenizer / Lexer
# --------------------------


@dataclass
class Token:
    """Represents a token with type, canonical value, character position and raw text."""
    type: str
    value: Any
    pos: int
    text: str = ''

    @property
    def end(self) -> int:
        return self.pos + len(self.text)

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


# Raw operator spelling -> canonical operator name
_OPERATORS = {
    '+': '+',
    '-': '-',
    '*': '*',
    '/': '/',
    '^': '^',
    '.': 'dot',
    '·': 'dot',
    '×': 'cross',
}
_KEYWORD_OPERATORS = {'dot', 'cross'}
_PUNCTUATION = {
    '<': 'LANGLE',
    '>': 'RANGLE',
    ',': 'COMMA',
    '(': 'LPAREN',
    ')': 'RPAREN',
    '=': 'EQUALS',
}


class Lexer:
    """Tokenizer for calculator expressions.

    Produces tokens: NUMBER, IDENT, OP, LANGLE, RANGLE, COMMA, LPAREN, RPAREN,
    EQUALS, EMPTY_VECTOR, EOF. Numbers are unsigned; a leading '-' is always an
    operator token and the parser folds it into a literal where one is allowed.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.len = len(text)

    def _peek(self, n: int = 0) -> str:
        i = self.pos + n
        return self.text[i] if i < self.len else ''

    def _advance(self, n: int = 1) -> None:
        self.pos += n

    def _skip_whitespace(self) -> None:
        while self._peek() and self._peek().isspace():
            self._advance()

    def _token(self, type_: str, value: Any, start: int) -> Token:
        return Token(type_, value, start, self.text[start:self.pos])

    def _read_number(self) -> Token:
        start = self.pos
        while self._peek().isdigit():
            self._advance()
        # a '.' not followed by a digit is the dot-product operator
        if self._peek() == '.' and self._peek(1).isdigit():
            self._advance()
            while self._peek().isdigit():
                self._advance()
        if self._peek() in ('e', 'E'):
            n = 2 if self._peek(1) in ('+', '-') else 1
            if not self._peek(n).isdigit():
                raise TokenizationError("Invalid numeric literal", self.pos)
            self._advance(n)
            while self._peek().isdigit():
                self._advance()
        return self._token('NUMBER', self.text[start:self.pos], start)

    def _read_ident(self) -> Token:
        start = self.pos
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        raw = self.text[start:self.pos]
        if raw in _KEYWORD_OPERATORS:
            return self._token('OP', raw, start)
        return self._token('IDENT', raw, start)

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self._skip_whitespace()
            ch = self._peek()
            if ch == '':
                break
            start = self.pos
            if ch.isdigit():
                tokens.append(self._read_number())
            elif ch.isalpha() or ch == '_':
                tokens.append(self._read_ident())
            elif self.text.startswith(EMPTY_VECTOR_TEXT, self.pos):
                self._advance(len(EMPTY_VECTOR_TEXT))
                tokens.append(self._token('EMPTY_VECTOR', None, start))
            elif ch in _PUNCTUATION:
                self._advance()
                tokens.append(self._token(_PUNCTUATION[ch], ch, start))
            elif ch in _OPERATORS:
                self._advance()
                tokens.append(self._token('OP', _OPERATORS[ch], start))
            else:
                raise TokenizationError(f"Unexpected character {ch!r}", self.pos)
        tokens.append(Token('EOF', None, self.pos, ''))
        return tokens


# --------------------------
# Parse tree
# --------------------------


@dataclass
class Node:
    """Base parse tree node: matched source text and its (start, end) span."""
    text: str
    span: Tuple[int, int]
    rule: ClassVar[str] = 'node'

    def __str__(self) -> str:
        return self.text


@dataclass
class NumberLiteral(Node):
    rule: ClassVar[str] = 'bare_number'


@dataclass
class VectorLiteral(Node):
    components: List[NumberLiteral] = field(default_factory=list)
    rule: ClassVar[str] = 'vector'


@dataclass
class Identifier(Node):
    rule: ClassVar[str] = 'ident'

    @property
    def name(self) -> str:
        return self.text


@dataclass
class FunctionCall(Node):
    name: str = ''
    args: List[Node] = field(default_factory=list)
    rule: ClassVar[str] = 'function_call'


@dataclass
class BinaryOp(Node):
    op: str = ''
    left: Optional[Node] = None
    right: Optional[Node] = None
    rule: ClassVar[str] = 'binary_op'

    def __str__(self) -> str:
        return f"({self.op} {self.left} {self.right})"


@dataclass
class Expression(Node):
    """Flat ``operand (operator operand)*`` sequence, precedence not yet applied."""
    operands: List[Node] = field(default_factory=list)
    operators: List[Token] = field(default_factory=list)
    rule: ClassVar[str] = 'expression'

    def tree(self) -> Node:
        """Fold the sequence into nested BinaryOp nodes."""
        base = self.span[0]

        def infix(lhs: Node, op: Token, rhs: Node) -> Node:
            start, end = lhs.span[0], rhs.span[1]
            return BinaryOp(self.text[start - base:end - base], (start, end), op.value, lhs, rhs)

        def primary(node: Node) -> Node:
            return node.tree() if isinstance(node, Expression) else node

        return climb(self.operands, self.operators, primary, infix, key=lambda tok: tok.value)


@dataclass
class Assignment(Node):
    name: str = ''
    value: Optional[Node] = None
    rule: ClassVar[str] = 'variable_assignment'


@dataclass
class MetaCommand(Node):
    rule: ClassVar[str] = 'parser_command'


@dataclass
class DebugCommand(MetaCommand):
    level: Optional[int] = None
    rule: ClassVar[str] = 'parser_debug'


@dataclass
class ModifyCommand(MetaCommand):
    name: str = ''
    rule: ClassVar[str] = 'parser_modify'


@dataclass
class SaveCommand(MetaCommand):
    name: str = ''
    rule: ClassVar[str] = 'parser_save'


@dataclass
class LoadCommand(MetaCommand):
    name: str = ''
    rule: ClassVar[str] = 'parser_load'


@dataclass
class ExitCommand(MetaCommand):
    rule: ClassVar[str] = 'parser_exit'


# --------------------------
# Parser
# --------------------------


class Parser:
    """Recursive-descent parser for expressions, assignments and values."""

    def __init__(self, tokens: List[Token], text: str):
        self.tokens = tokens
        self.text = text
        self.pos = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, n: int = 1) -> Token:
        i = min(self.pos + n, len(self.tokens) - 1)
        return self.tokens[i]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _unexpected(self, tok: Token) -> TokenizationError:
        if tok.type == 'EOF':
            return TokenizationError("Unexpected end of input", tok.pos)
        return TokenizationError(f"Unexpected token {tok.text!r}", tok.pos)

    def _expect(self, typ: str) -> Token:
        tok = self._current()
        if tok.type != typ:
            raise self._unexpected(tok)
        return self._advance()

    def _slice(self, start: int, end: int) -> str:
        return self.text[start:end]

    def parse_statement(self) -> Node:
        """command := assignment | expression. Single-operand expressions are unwrapped."""
        if self._current().type == 'EOF':
            raise TokenizationError("Expected a statement", self._current().pos)
        if self._current().type == 'IDENT' and self._peek().type == 'EQUALS':
            name_tok = self._advance()
            self._advance()
            value = self._unwrap(self.parse_expression())
            self._expect('EOF')
            start, end = name_tok.pos, value.span[1]
            return Assignment(self._slice(start, end), (start, end), name_tok.value, value)
        node = self._unwrap(self.parse_expression())
        self._expect('EOF')
        return node

    def parse_value(self) -> Node:
        """value := signed_number | vector | IDENT"""
        tok = self._current()
        if tok.type == 'IDENT':
            self._advance()
            node: Node = Identifier(tok.text, (tok.pos, tok.end))
        elif tok.type in ('LANGLE', 'EMPTY_VECTOR'):
            node = self.parse_vector()
        else:
            node = self.parse_number()
        self._expect('EOF')
        return node

    @staticmethod
    def _unwrap(expr: Expression) -> Node:
        return expr.operands[0] if not expr.operators else expr

    def parse_expression(self) -> Expression:
        operands = [self.parse_primary()]
        operators: List[Token] = []
        while self._current().type == 'OP':
            operators.append(self._advance())
            operands.append(self.parse_primary())
        start, end = operands[0].span[0], operands[-1].span[1]
        return Expression(self._slice(start, end), (start, end), operands, operators)

    def parse_primary(self) -> Node:
        tok = self._current()
        if tok.type == 'NUMBER' or (tok.type == 'OP' and tok.value in ('+', '-')
                                    and self._peek().type == 'NUMBER'):
            return self.parse_number()
        if tok.type in ('LANGLE', 'EMPTY_VECTOR'):
            return self.parse_vector()
        if tok.type == 'IDENT':
            self._advance()
            if self._current().type == 'LPAREN':
                return self._parse_call(tok)
            return Identifier(tok.text, (tok.pos, tok.end))
        if tok.type == 'LPAREN':
            self._advance()
            inner = self.parse_expression()
            close = self._expect('RPAREN')
            return Expression(self._slice(tok.pos, close.end), (tok.pos, close.end),
                              [inner], [])
        raise self._unexpected(tok)

    def parse_number(self) -> NumberLiteral:
        """signed_number := ['+' | '-'] NUMBER"""
        tok = self._current()
        sign = ''
        if tok.type == 'OP' and tok.value in ('+', '-'):
            sign = self._advance().value
        num = self._expect('NUMBER')
        return NumberLiteral(sign + num.text, (tok.pos, num.end))

    def parse_vector(self) -> VectorLiteral:
        tok = self._advance()
        if tok.type == 'EMPTY_VECTOR':
            return VectorLiteral(tok.text, (tok.pos, tok.end), [])
        if tok.type != 'LANGLE':
            raise self._unexpected(tok)
        components: List[NumberLiteral] = []
        if self._current().type != 'RANGLE':
            while True:
                components.append(self.parse_number())
                if self._current().type == 'COMMA':
                    self._advance()
                    continue
                break
        close = self._expect('RANGLE')
        return VectorLiteral(self._slice(tok.pos, close.end), (tok.pos, close.end), components)

    def _parse_call(self, name_tok: Token) -> FunctionCall:
        """Parse '(' expr (, expr)* ')' after a function name."""
        self._expect('LPAREN')
        args: List[Node] = []
        if self._current().type != 'RPAREN':
            while True:
                args.append(self._unwrap(self.parse_expression()))
                if self._current().type == 'COMMA':
                    self._advance()
                    continue
                break
        close = self._expect('RPAREN')
        span = (name_tok.pos, close.end)
        return FunctionCall(self._slice(*span), span, name_tok.value, args)


# --------------------------
# Meta-commands
# --------------------------

_META_RE = re.compile(r'\s*\.([A-Za-z]+)')
_IDENT_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_INT_RE = re.compile(r'\d+')
_NAME_RE = re.compile(r'\S+')

# command -> (argument pattern, argument required)
_META_ARGS = {
    'debug': (_INT_RE, False),
    'modify': (_IDENT_RE, True),
    'save': (_NAME_RE, True),
    'load': (_NAME_RE, True),
    'exit': (None, False),
}


def _parse_meta(text: str, match: re.Match) -> MetaCommand:
    command = match.group(1)
    if command not in _META_ARGS:
        raise TokenizationError(f"Unknown command '.{command}'", match.start(1) - 1)
    pattern, required = _META_ARGS[command]
    rest = text[match.end():]
    arg_start = match.end() + (len(rest) - len(rest.lstrip()))
    arg_text = rest.strip()
    end = arg_start + len(arg_text)
    if arg_text and not rest[0].isspace():
        raise TokenizationError(f"Unexpected character {rest[0]!r}", match.end())

    arg: Optional[str] = None
    if arg_text:
        if pattern is None or not pattern.fullmatch(arg_text):
            raise TokenizationError(f"Invalid argument {arg_text!r} for '.{command}'", arg_start)
        arg = arg_text
    elif required:
        raise TokenizationError(f"'.{command}' expects an argument", match.end())
    else:
        end = match.end()

    start = match.start(1) - 1
    span = (start, end)
    source = text[start:end]
    if command == 'debug':
        return DebugCommand(source, span, int(arg) if arg is not None else None)
    if command == 'modify':
        return ModifyCommand(source, span, arg)
    if command == 'save':
        return SaveCommand(source, span, arg)
    if command == 'load':
        return LoadCommand(source, span, arg)
    return ExitCommand(source, span)


# --------------------------
# Entry points
# --------------------------


def parse_command(text: str) -> Node:
    """Parse one input line into a top-level parse tree node."""
    text = text.rstrip('\r\n')
    match = _META_RE.match(text)
    if match:
        return _parse_meta(text, match)
    tokens = Lexer(text).tokenize()
    return Parser(tokens, text).parse_statement()


def parse_value(text: str) -> Node:
    """Parse a standalone value: a number, a vector literal or an identifier."""
    text = text.strip()
    tokens = Lexer(text).tokenize()
    return Parser(tokens, text).parse_value()
