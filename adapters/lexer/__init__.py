from .regex_lexer import RegexLexer, tokenize

__all__ = ["RegexLexer", "tokenize"]
