"""
Port: ExpressionParser
Responsibility: token list → expression tree, structural validation only.
"""
from typing import Protocol, runtime_checkable

from contracts import CalculationType, ExpressionNode, Token


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(
        self,
        tokens: list[Token],
        calc_type: CalculationType = CalculationType.BASIC,
    ) -> ExpressionNode:
        """
        Builds the tree by precedence climbing.
        Function names and constants are resolved against the registry of
        calc_type; unknown names and arity mismatches are rejected here.
        Raises ParseError(expected, found, position) on the first problem.
        """
        ...
