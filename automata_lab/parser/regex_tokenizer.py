from enum import Enum
from dataclasses import dataclass
from typing import List, Optional

from automata_lab.config import AutomataConfig, get_config
from automata_lab.utils.logging_config import get_logger

logger = get_logger(__name__)

class RegexTokenType(Enum):
    """Enum representing different types of regex tokens."""
    SYMBOL = "SYMBOL"
    UNION = "UNION"
    STAR = "STAR"
    PLUS = "PLUS"
    OPTIONAL = "OPTIONAL"
    GROUP_START = "GROUP_START"
    GROUP_END = "GROUP_END"

OPERATOR_TOKENS = {
    "|": RegexTokenType.UNION,
    "*": RegexTokenType.STAR,
    "+": RegexTokenType.PLUS,
    "?": RegexTokenType.OPTIONAL,
    "(": RegexTokenType.GROUP_START,
    ")": RegexTokenType.GROUP_END,
}

POSTFIX_TOKENS = frozenset([RegexTokenType.STAR, RegexTokenType.PLUS, RegexTokenType.OPTIONAL])

class RegexSyntaxError(Exception):
    """Base class for regex syntax errors with context visualization."""
    def __init__(self, message: str, position: int, pattern: str):
        self.message = message
        self.position = position
        self.pattern = pattern
        self.context = self._get_error_context()
        super().__init__(f"{message}\nAt position {position}:\n{self.context}")

    def _get_error_context(self) -> str:
        """Get error context with pointer to error position."""
        start = max(0, self.position - 20)
        end = min(len(self.pattern), self.position + 20)
        context = self.pattern[start:end]
        pointer = " " * (self.position - start) + "^"
        return f"{context}\n{pointer}"

class EmptyPatternError(RegexSyntaxError):
    """The pattern contains no operand at all."""
    pass

class UnbalancedParenthesisError(RegexSyntaxError):
    """Error for a '(' without its ')' or the reverse."""
    pass

class MissingOperandError(RegexSyntaxError):
    """An operator is missing one of its operands."""
    pass

class ReservedSymbolError(RegexSyntaxError):
    """The pattern uses the symbol reserved for the end marker."""
    pass

@dataclass(frozen=True)
class RegexToken:
    """Represents a token in a regular expression."""
    type: RegexTokenType
    value: str
    position: int

    def __str__(self) -> str:
        return self.value

    @property
    def is_operand_start(self) -> bool:
        return self.type in (RegexTokenType.SYMBOL, RegexTokenType.GROUP_START)

    @property
    def is_operand_end(self) -> bool:
        return self.type in (RegexTokenType.SYMBOL, RegexTokenType.GROUP_END) or self.type in POSTFIX_TOKENS


def tokenize_regex(pattern: str, config: Optional[AutomataConfig] = None) -> List[RegexToken]:
    """
    Split a regular expression into tokens.

    Every character other than ``| * + ? ( )`` is a symbol. Whitespace is
    skipped unless the configuration says otherwise.

    Args:
        pattern: The regex text
        config: Optional configuration, defaults to the process configuration

    Returns:
        List of tokens with their character offsets in ``pattern``

    Raises:
        ReservedSymbolError: If the pattern contains the end marker
    """
    config = config or get_config()
    tokens: List[RegexToken] = []
    for i, char in enumerate(pattern):
        if char.isspace() and config.ignore_whitespace:
            continue
        if char in OPERATOR_TOKENS:
            tokens.append(RegexToken(OPERATOR_TOKENS[char], char, i))
        elif char == config.end_marker:
            raise ReservedSymbolError(
                f"Symbol '{char}' is reserved for the end marker", i, pattern
            )
        else:
            tokens.append(RegexToken(RegexTokenType.SYMBOL, char, i))
    return tokens


def validate_regex_structure(pattern: str, tokens: List[RegexToken]) -> None:
    """
    Validate overall regex structure before parsing.

    Args:
        pattern: The pattern string to validate
        tokens: Tokens produced by :func:`tokenize_regex`

    Raises:
        EmptyPatternError: If there is nothing to parse
        UnbalancedParenthesisError: If grouping is unbalanced
        MissingOperandError: If an operator lacks an operand
    """
    if not tokens:
        raise EmptyPatternError("Regular expression cannot be empty", 0, pattern)

    paren_stack: List[RegexToken] = []
    previous: Optional[RegexToken] = None

    for token in tokens:
        if token.type == RegexTokenType.GROUP_START:
            paren_stack.append(token)
        elif token.type == RegexTokenType.GROUP_END:
            if not paren_stack:
                raise UnbalancedParenthesisError("Unmatched closing parenthesis", token.position, pattern)
            paren_stack.pop()
            if previous is not None and previous.type == RegexTokenType.GROUP_START:
                raise MissingOperandError("Empty group '()'", previous.position, pattern)
            if previous is not None and previous.type == RegexTokenType.UNION:
                raise MissingOperandError("'|' cannot be followed by ')'", previous.position, pattern)
        elif token.type == RegexTokenType.UNION:
            if previous is None:
                raise MissingOperandError("Expression cannot start with '|'", token.position, pattern)
            if not previous.is_operand_end:
                raise MissingOperandError(f"'|' cannot follow '{previous.value}'", token.position, pattern)
        elif token.type in POSTFIX_TOKENS:
            if previous is None or not previous.is_operand_end:
                raise MissingOperandError(
                    f"Operator '{token.value}' is not preceded by an expression", token.position, pattern
                )
        previous = token

    if paren_stack:
        raise UnbalancedParenthesisError("Unmatched opening parenthesis", paren_stack[-1].position, pattern)
    if previous.type == RegexTokenType.UNION:
        raise MissingOperandError("Expression cannot end with '|'", previous.position, pattern)

    logger.debug(f"Validated regex structure of '{pattern}' ({len(tokens)} tokens)")
