"""
Syntax tree model for regular expressions.

Trees are immutable. Every leaf carries a 1-based position assigned in the
left-to-right order its symbol appears in the pattern; the parser appends a
synthetic end-marker leaf through a trailing concatenation, so the root of
every parsed tree is ``Concat(expression, Leaf(end_marker, N))``.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Tuple, Union


class NodeType(Enum):
    """Enum representing the variants of a syntax tree node."""
    SYMBOL = "SYMBOL"
    CONCAT = "CONCAT"
    UNION = "UNION"
    STAR = "STAR"
    PLUS = "PLUS"
    OPTIONAL = "OPTIONAL"


@dataclass(frozen=True)
class LeafNode:
    """One occurrence of an input symbol (or the end marker)."""
    symbol: str
    position: int
    node_id: int = field(default=0, compare=False)

    type = NodeType.SYMBOL

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return ()

    @property
    def value(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class ConcatNode:
    left: "SyntaxNode"
    right: "SyntaxNode"
    node_id: int = field(default=0, compare=False)

    type = NodeType.CONCAT
    value = "."

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class UnionNode:
    left: "SyntaxNode"
    right: "SyntaxNode"
    node_id: int = field(default=0, compare=False)

    type = NodeType.UNION
    value = "|"

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class StarNode:
    child: "SyntaxNode"
    node_id: int = field(default=0, compare=False)

    type = NodeType.STAR
    value = "*"

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return (self.child,)


@dataclass(frozen=True)
class PlusNode:
    child: "SyntaxNode"
    node_id: int = field(default=0, compare=False)

    type = NodeType.PLUS
    value = "+"

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return (self.child,)


@dataclass(frozen=True)
class OptionalNode:
    child: "SyntaxNode"
    node_id: int = field(default=0, compare=False)

    type = NodeType.OPTIONAL
    value = "?"

    @property
    def children(self) -> Tuple["SyntaxNode", ...]:
        return (self.child,)


SyntaxNode = Union[LeafNode, ConcatNode, UnionNode, StarNode, PlusNode, OptionalNode]
UnaryNode = (StarNode, PlusNode, OptionalNode)
BinaryNode = (ConcatNode, UnionNode)


def iter_postorder(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield nodes children-first, left to right, without recursion."""
    stack: List[Tuple[SyntaxNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))


def iter_preorder(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield nodes parent-first, left to right, without recursion."""
    stack: List[SyntaxNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


@dataclass(frozen=True)
class SyntaxTree:
    """
    A parsed, augmented regular expression.

    Attributes:
        pattern: The source pattern text
        root: Augmented root, ``Concat(expression, end-marker leaf)``
        alphabet: Leaf symbols of the expression, end marker excluded
        positions: Read-only mapping position -> symbol, end marker included
        end_position: Position of the end-marker leaf
        end_marker: The end-marker symbol
    """
    pattern: str
    root: ConcatNode
    alphabet: FrozenSet[str]
    positions: Mapping[int, str]
    end_position: int
    end_marker: str = "#"

    @property
    def expression(self) -> SyntaxNode:
        """The tree of the pattern itself, without the end-marker augmentation."""
        return self.root.left

    @property
    def sorted_alphabet(self) -> Tuple[str, ...]:
        return tuple(sorted(self.alphabet))

    def leaves(self) -> List[LeafNode]:
        return [node for node in iter_postorder(self.root) if isinstance(node, LeafNode)]

    def nodes(self) -> List[SyntaxNode]:
        return list(iter_postorder(self.root))

    def symbol_at(self, position: int) -> str:
        return self.positions[position]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the tree, suitable for JSON serialization."""
        built: Dict[int, Dict[str, Any]] = {}
        for node in iter_postorder(self.root):
            entry: Dict[str, Any] = {
                "id": f"node-{node.node_id}",
                "type": node.type.value,
                "value": node.value,
                "children": [built.pop(id(child)) for child in node.children],
            }
            if isinstance(node, LeafNode):
                entry["position"] = node.position
            built[id(node)] = entry
        return {
            "pattern": self.pattern,
            "root": built[id(self.root)],
            "alphabet": sorted(self.alphabet),
            "positions": {str(pos): sym for pos, sym in sorted(self.positions.items())},
            "end_position": self.end_position,
        }


def freeze_positions(positions: Dict[int, str]) -> Mapping[int, str]:
    return MappingProxyType(dict(positions))


def visualize_tree(node: SyntaxNode, indent: int = 0) -> str:
    spacing = " " * indent
    result = f"{spacing}{node.type.value}"
    if isinstance(node, LeafNode):
        result += f" '{node.symbol}' (pos: {node.position})"
    for child in node.children:
        result += "\n" + visualize_tree(child, indent + 2)
    return result
