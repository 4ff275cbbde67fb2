"""
Adapter: PrecedenceParser
Implements the ExpressionParser port — precedence climbing over lexer tokens.

Grammar (low → high binding):
  expr    = unary (binop unary)*        + -  (10, left)   * / %  (20, left)
  unary   = '-' expr[31] | primary      prefix minus (30), binds looser than ^
  power   = ... '^' expr[40]            right-associative (40)
  primary = NUMBER | constant | name '(' args ')' | '(' expr ')'

Names are resolved against the registry of the requested calculation type,
so "sin(0)" is an unknown identifier in basic mode. The parser never guesses
a correction: the first problem raises ParseError with a position.
"""
from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from contracts import (
    Associativity,
    BinaryOpNode,
    CalculationType,
    CommaToken,
    ExpressionNode,
    FunctionCallNode,
    IdentifierToken,
    LeftParenToken,
    LiteralNode,
    NumberToken,
    OperatorToken,
    RightParenToken,
    Token,
    UnaryOpNode,
)
from errors import ParseError
from registry import UNARY_BP, FunctionSpec, constants_for, functions_for

_DECIMAL_RE = re.compile(r'^(?:\d+\.?\d*|\.\d+)$')

UNBALANCED = "unbalanced parentheses"
END = "end of input"


def _describe(tok: Optional[Token]) -> str:
    if tok is None:
        return END
    if isinstance(tok, NumberToken):
        return tok.text
    if isinstance(tok, IdentifierToken):
        return tok.name
    if isinstance(tok, OperatorToken):
        return f"'{tok.symbol}'"
    if isinstance(tok, LeftParenToken):
        return "'('"
    if isinstance(tok, RightParenToken):
        return "')'"
    return "','"


def _width(tok: Token) -> int:
    if isinstance(tok, NumberToken):
        return len(tok.text)
    if isinstance(tok, IdentifierToken):
        return len(tok.name)
    return 1


class _Parser:
    def __init__(
        self,
        tokens: list[Token],
        functions: Mapping[str, FunctionSpec],
        constants: Mapping[str, float],
        max_depth: int,
    ) -> None:
        self._tokens = tokens
        self._functions = functions
        self._constants = constants
        self._max_depth = max_depth
        self._pos = 0
        self._depth = 0
        self._open_parens = 0
        last = tokens[-1] if tokens else None
        self._end = last.position + _width(last) if last is not None else 0

    def _peek(self) -> Optional[Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _advance(self) -> Token:
        t = self._tokens[self._pos]
        self._pos += 1
        return t

    def _here(self) -> int:
        tok = self._peek()
        return tok.position if tok is not None else self._end

    def _fail(self, message: str, expected: str, position: Optional[int] = None) -> ParseError:
        return ParseError(
            message,
            position=self._here() if position is None else position,
            expected=expected,
            found=_describe(self._peek()),
        )

    def parse(self) -> ExpressionNode:
        if not self._tokens:
            raise self._fail("empty expression", expected="expression")
        node = self._expr(0)
        tok = self._peek()
        if tok is not None:
            if isinstance(tok, RightParenToken):
                raise self._fail(UNBALANCED, expected=END)
            raise self._fail(f"unexpected token {_describe(tok)}", expected="operator or " + END)
        return node

    def _expr(self, min_bp: int) -> ExpressionNode:
        self._depth += 1
        if self._depth > self._max_depth:
            raise self._fail("expression nested too deeply", expected="shallower expression")
        left = self._unary()
        while True:
            op = self._peek()
            if not isinstance(op, OperatorToken) or op.precedence < min_bp:
                break
            self._advance()
            # left-assoc: the right side may only hold tighter operators
            next_bp = op.precedence + 1 if op.associativity == Associativity.LEFT else op.precedence
            right = self._expr(next_bp)
            left = BinaryOpNode(op=op.symbol, left=left, right=right, position=op.position)
        self._depth -= 1
        return left

    def _unary(self) -> ExpressionNode:
        tok = self._peek()
        if isinstance(tok, OperatorToken):
            if tok.symbol != "-":
                raise self._fail(f"missing operand before {_describe(tok)}", expected="operand")
            self._advance()
            operand = self._expr(UNARY_BP + 1)
            return UnaryOpNode(op="-", operand=operand, position=tok.position)
        return self._primary()

    def _primary(self) -> ExpressionNode:
        tok = self._peek()
        if tok is None:
            if self._open_parens:
                raise self._fail(UNBALANCED, expected="')'")
            raise self._fail("missing operand", expected="operand")
        if isinstance(tok, NumberToken):
            self._advance()
            return self._literal(tok)
        if isinstance(tok, IdentifierToken):
            self._advance()
            return self._name(tok)
        if isinstance(tok, LeftParenToken):
            self._advance()
            if isinstance(self._peek(), RightParenToken):
                raise self._fail("empty parentheses", expected="expression")
            self._open_parens += 1
            node = self._expr(0)
            self._close(tok)
            self._open_parens -= 1
            return node
        if isinstance(tok, RightParenToken) and not self._open_parens:
            raise self._fail(UNBALANCED, expected="operand")
        raise self._fail(f"missing operand before {_describe(tok)}", expected="operand")

    def _close(self, opening: Token) -> None:
        tok = self._peek()
        if isinstance(tok, RightParenToken):
            self._advance()
            return
        if tok is None:
            raise self._fail(UNBALANCED, expected="')'", position=opening.position)
        raise self._fail(f"unexpected token {_describe(tok)}", expected="')'")

    def _literal(self, tok: NumberToken) -> LiteralNode:
        if not _DECIMAL_RE.match(tok.text):
            raise ParseError(
                f"malformed number '{tok.text}'",
                position=tok.position,
                expected="number",
                found=tok.text,
            )
        value = float(tok.text)
        if not math.isfinite(value):
            raise ParseError(
                "number too large",
                position=tok.position,
                expected="finite number",
                found=tok.text,
            )
        return LiteralNode(value=value, position=tok.position)

    def _name(self, tok: IdentifierToken) -> ExpressionNode:
        if isinstance(self._peek(), LeftParenToken):
            return self._call(tok)
        if tok.name in self._constants:
            return LiteralNode(value=self._constants[tok.name], symbol=tok.name, position=tok.position)
        if tok.name in self._functions:
            raise self._fail(f"missing '(' after function '{tok.name}'", expected="'('")
        raise ParseError(
            f"unknown identifier '{tok.name}'",
            position=tok.position,
            expected="function or constant",
            found=tok.name,
        )

    def _call(self, tok: IdentifierToken) -> FunctionCallNode:
        spec = self._functions.get(tok.name)
        if spec is None:
            raise ParseError(
                f"unknown identifier '{tok.name}'",
                position=tok.position,
                expected="function",
                found=tok.name,
            )
        opening = self._advance()
        self._open_parens += 1
        args: list[ExpressionNode] = []
        if isinstance(self._peek(), RightParenToken):
            self._advance()
        else:
            while True:
                args.append(self._expr(0))
                if isinstance(self._peek(), CommaToken):
                    self._advance()
                    continue
                self._close(opening)
                break
        self._open_parens -= 1
        if len(args) != spec.arity:
            raise ParseError(
                f"function '{tok.name}' expects {spec.arity} argument(s), got {len(args)}",
                position=tok.position,
                expected=f"{spec.arity} argument(s)",
                found=str(len(args)),
            )
        return FunctionCallNode(name=tok.name, args=tuple(args), position=tok.position)


class PrecedenceParser:
    """Precedence-climbing parser; one instance is safe to share, state lives per call."""

    def __init__(self, max_depth: int = 64) -> None:
        self._max_depth = max_depth

    # -- ExpressionParser protocol --------------------------------------------

    def parse(
        self,
        tokens: list[Token],
        calc_type: CalculationType = CalculationType.BASIC,
    ) -> ExpressionNode:
        return _Parser(
            tokens,
            functions_for(calc_type),
            constants_for(calc_type),
            self._max_depth,
        ).parse()


def parse(
    tokens: list[Token],
    calc_type: CalculationType = CalculationType.BASIC,
) -> ExpressionNode:
    return PrecedenceParser().parse(tokens, calc_type)
