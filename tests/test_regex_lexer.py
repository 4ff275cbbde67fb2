import pytest

from adapters.lexer import RegexLexer, tokenize
from contracts import (
    Associativity,
    CommaToken,
    IdentifierToken,
    LeftParenToken,
    NumberToken,
    OperatorToken,
    RightParenToken,
)
from errors import LexError
from ports.lexer import Lexer


def test_regex_lexer_implements_lexer_port():
    assert isinstance(RegexLexer(), Lexer)


def test_tokenize_skips_whitespace_and_keeps_positions():
    tokens = tokenize(" 12.5 +  x")

    assert [t.kind for t in tokens] == ["number", "operator", "identifier"]
    assert tokens[0] == NumberToken(text="12.5", position=1)
    assert tokens[1].symbol == "+"
    assert tokens[1].position == 6
    assert tokens[2] == IdentifierToken(name="x", position=9)


def test_tokenize_function_call_with_comma():
    tokens = tokenize("max(1,2)")

    assert isinstance(tokens[0], IdentifierToken)
    assert isinstance(tokens[1], LeftParenToken)
    assert isinstance(tokens[3], CommaToken)
    assert isinstance(tokens[5], RightParenToken)


def test_operator_tokens_carry_precedence_and_associativity():
    plus, times, power = [t for t in tokenize("1 + 2 * 3 ^ 4") if isinstance(t, OperatorToken)]

    assert plus.precedence < times.precedence < power.precedence
    assert plus.associativity == Associativity.LEFT
    assert power.associativity == Associativity.RIGHT


def test_minus_is_never_part_of_a_number():
    tokens = tokenize("-3")

    assert isinstance(tokens[0], OperatorToken)
    assert tokens[1] == NumberToken(text="3", position=1)


def test_typographic_operators_are_normalized():
    symbols = [t.symbol for t in tokenize("6 × 2 ÷ 3 − 1") if isinstance(t, OperatorToken)]

    assert symbols == ["*", "/", "-"]


def test_malformed_decimal_is_left_to_the_parser():
    tokens = tokenize("1.2.3")

    assert tokens == [NumberToken(text="1.2.3", position=0)]


def test_unknown_character_fails_with_position():
    with pytest.raises(LexError) as info:
        tokenize("2 $ 3")

    assert info.value.position == 2
    assert info.value.character == "$"
    assert info.value.message == "unexpected character '$'"


def test_empty_text_yields_no_tokens():
    assert tokenize("   ") == []
