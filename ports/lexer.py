"""
Port: Lexer
Responsibility: raw text → ordered token list, no semantic knowledge.
"""
from typing import Protocol, runtime_checkable

from contracts import Token


@runtime_checkable
class Lexer(Protocol):
    def tokenize(self, text: str) -> list[Token]:
        """
        Splits text into Number / Operator / Identifier / paren / comma tokens.
        Whitespace is skipped; '-' is always an operator (no signed literals).
        Raises LexError with the 0-based position of the first unknown character.
        """
        ...
