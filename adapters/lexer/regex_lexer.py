"""
Adapter: RegexLexer
Implements the Lexer port — a single-pass scan with one anchored regex.

Token classes:
  NUMBER      digits and dots as written ("12", "3.5", ".5", "1.2.3");
              the parser decides whether the spelling is a valid literal
  OPERATOR    + - * / ^ %   (× ÷ − are normalized to * / -)
  IDENTIFIER  [A-Za-z_][A-Za-z0-9_]*  — function names and constants
  ( ) ,

Anything else stops the scan with LexError at the offending character.
"""
from __future__ import annotations

import re

from contracts import (
    CommaToken,
    IdentifierToken,
    LeftParenToken,
    NumberToken,
    OperatorToken,
    RightParenToken,
    Token,
)
from errors import LexError
from registry import OPERATORS

_TOKEN_RE = re.compile(
    r'(?P<space>\s+)'
    r'|(?P<number>[0-9.]+)'
    r'|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)'
    r'|(?P<op>[+\-*/^%×÷−])'
    r'|(?P<punct>[(),])'
)

_OP_MAP = {"×": "*", "÷": "/", "−": "-"}


class RegexLexer:
    """Context-free tokenizer; '-' is always an operator token."""

    # -- Lexer protocol ------------------------------------------------------

    def tokenize(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        pos = 0
        while pos < len(text):
            m = _TOKEN_RE.match(text, pos)
            if m is None:
                raise LexError(text[pos], pos)
            kind = m.lastgroup
            value = m.group()
            if kind == "number":
                tokens.append(NumberToken(text=value, position=pos))
            elif kind == "ident":
                tokens.append(IdentifierToken(name=value, position=pos))
            elif kind == "op":
                tokens.append(_operator(_OP_MAP.get(value, value), pos))
            elif kind == "punct":
                tokens.append(_punct(value, pos))
            pos = m.end()
        return tokens


def _operator(symbol: str, position: int) -> OperatorToken:
    precedence, associativity = OPERATORS[symbol]
    return OperatorToken(
        symbol=symbol,
        precedence=precedence,
        associativity=associativity,
        position=position,
    )


def _punct(char: str, position: int) -> Token:
    if char == "(":
        return LeftParenToken(position=position)
    if char == ")":
        return RightParenToken(position=position)
    return CommaToken(position=position)


def tokenize(text: str) -> list[Token]:
    return RegexLexer().tokenize(text)
