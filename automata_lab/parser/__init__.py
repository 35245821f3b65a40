# automata_lab/parser/__init__.py

from .regex_tokenizer import (
    RegexToken, RegexTokenType, tokenize_regex, validate_regex_structure,
    RegexSyntaxError, EmptyPatternError, UnbalancedParenthesisError,
    MissingOperandError, ReservedSymbolError
)
from .regex_parser import RegexParser, parse

__all__ = [
    'RegexToken',
    'RegexTokenType',
    'tokenize_regex',
    'validate_regex_structure',
    'RegexSyntaxError',
    'EmptyPatternError',
    'UnbalancedParenthesisError',
    'MissingOperandError',
    'ReservedSymbolError',
    'RegexParser',
    'parse'
]
