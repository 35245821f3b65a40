# automata_lab/parser/regex_parser.py

from typing import Dict, List, Optional

from automata_lab.ast.syntax_tree import (
    ConcatNode, LeafNode, OptionalNode, PlusNode, StarNode, SyntaxNode,
    SyntaxTree, UnionNode, freeze_positions
)
from automata_lab.config import AutomataConfig, get_config
from automata_lab.utils.logging_config import get_logger
from .regex_tokenizer import (
    MissingOperandError, RegexSyntaxError, RegexToken, RegexTokenType,
    UnbalancedParenthesisError, tokenize_regex, validate_regex_structure
)

logger = get_logger(__name__)

POSTFIX_NODES = {
    RegexTokenType.STAR: StarNode,
    RegexTokenType.PLUS: PlusNode,
    RegexTokenType.OPTIONAL: OptionalNode,
}


class _Group:
    """
    Partial result for one parenthesis level (or the whole pattern).

    ``union`` holds the alternatives closed so far, ``prefix`` the
    concatenation of the current alternative minus its last term, and
    ``last`` the term that postfix operators apply to.
    """

    def __init__(self, opener: Optional[RegexToken] = None):
        self.opener = opener
        self.union: Optional[SyntaxNode] = None
        self.prefix: Optional[SyntaxNode] = None
        self.last: Optional[SyntaxNode] = None

    def alternative(self, new_id) -> Optional[SyntaxNode]:
        if self.last is None:
            return self.prefix
        if self.prefix is None:
            return self.last
        return ConcatNode(self.prefix, self.last, node_id=new_id())


class RegexParser:
    """
    An iterative parser for regular expressions.

    Grammar, lowest binding first::

        expression    := concatenation ('|' concatenation)*
        concatenation := term term*
        term          := factor ('*' | '+' | '?')*
        factor        := SYMBOL | '(' expression ')'

    Groups are kept on an explicit stack instead of the call stack, so
    nesting depth is bounded only by memory. Leaves are numbered as they are
    created, which is the order their symbols appear in the pattern.
    """

    def __init__(self, pattern: str, config: Optional[AutomataConfig] = None):
        self.pattern = pattern
        self.config = config or get_config()
        self.tokens: List[RegexToken] = []
        self.index = 0
        self.positions: Dict[int, str] = {}
        self._next_node_id = 0

    @property
    def current_token(self) -> Optional[RegexToken]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _node_id(self) -> int:
        node_id = self._next_node_id
        self._next_node_id += 1
        return node_id

    def _leaf(self, symbol: str) -> LeafNode:
        position = len(self.positions) + 1
        self.positions[position] = symbol
        return LeafNode(symbol, position, node_id=self._node_id())

    def parse(self) -> SyntaxTree:
        """
        Parses the pattern and returns the augmented syntax tree.

        Raises:
            RegexSyntaxError: If the pattern is malformed
        """
        self.tokens = tokenize_regex(self.pattern, self.config)
        validate_regex_structure(self.pattern, self.tokens)

        expression = self._parse_expression()

        alphabet = frozenset(self.positions.values())
        end_leaf = self._leaf(self.config.end_marker)
        root = ConcatNode(expression, end_leaf, node_id=self._node_id())

        tree = SyntaxTree(
            pattern=self.pattern,
            root=root,
            alphabet=alphabet,
            positions=freeze_positions(self.positions),
            end_position=end_leaf.position,
            end_marker=self.config.end_marker,
        )
        logger.debug(f"Parsed '{self.pattern}': {end_leaf.position - 1} symbol positions, alphabet {sorted(alphabet)}")
        return tree

    def _parse_expression(self) -> SyntaxNode:
        groups: List[_Group] = [_Group()]

        while self.current_token is not None:
            token = self.current_token
            group = groups[-1]
            self.index += 1

            if token.type == RegexTokenType.SYMBOL:
                self._push_operand(group, self._leaf(token.value))

            elif token.type == RegexTokenType.GROUP_START:
                groups.append(_Group(token))

            elif token.type == RegexTokenType.GROUP_END:
                if group.opener is None:
                    raise UnbalancedParenthesisError("Unmatched closing parenthesis", token.position, self.pattern)
                groups.pop()
                self._push_operand(groups[-1], self._close(group, token.position))

            elif token.type == RegexTokenType.UNION:
                self._close_alternative(group, token)

            elif token.type in POSTFIX_NODES:
                if group.last is None:
                    raise MissingOperandError(
                        f"Operator '{token.value}' is missing an operand", token.position, self.pattern
                    )
                group.last = POSTFIX_NODES[token.type](group.last, node_id=self._node_id())

            else:
                raise RegexSyntaxError(f"Unexpected token '{token.value}'", token.position, self.pattern)

        if len(groups) > 1:
            opener = groups[-1].opener
            raise UnbalancedParenthesisError("Unmatched opening parenthesis", opener.position, self.pattern)
        return self._close(groups[0], len(self.pattern))

    def _push_operand(self, group: _Group, node: SyntaxNode) -> None:
        """Appends a term to the current alternative, folding concatenations to the left."""
        if group.last is not None:
            group.prefix = group.alternative(self._node_id)
        group.last = node

    def _close_alternative(self, group: _Group, token: RegexToken) -> None:
        current = group.alternative(self._node_id)
        if current is None:
            raise MissingOperandError("'|' is missing its left operand", token.position, self.pattern)
        group.union = current if group.union is None else UnionNode(group.union, current, node_id=self._node_id())
        group.prefix = group.last = None

    def _close(self, group: _Group, position: int) -> SyntaxNode:
        current = group.alternative(self._node_id)
        if current is None:
            raise MissingOperandError("Expected an operand", position, self.pattern)
        if group.union is None:
            return current
        return UnionNode(group.union, current, node_id=self._node_id())


def parse(pattern: str, config: Optional[AutomataConfig] = None) -> SyntaxTree:
    """
    Parses a regular expression and returns its augmented syntax tree.

    Args:
        pattern: The regex text, e.g. ``(a|b)*abb``
        config: Optional configuration (end marker, whitespace handling)

    Returns:
        SyntaxTree whose root concatenates the expression with the end marker

    Raises:
        RegexSyntaxError: If the pattern is empty or malformed
    """
    if pattern is None:
        raise TypeError("Pattern must be a string, got None")
    try:
        return RegexParser(pattern, config).parse()
    except RegexSyntaxError as e:
        logger.debug(f"Rejected regex '{pattern}': {e.message} at position {e.position}")
        raise
