"""
Position attributes of a syntax tree: nullable, firstpos, lastpos and
followpos.

``nullable``, ``firstpos`` and ``lastpos`` are synthesized bottom-up; each
node's values depend only on its children. ``followpos`` is a single map
accumulated over one top-down pass and frozen before it is returned.
"""

from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Set

from automata_lab.utils.logging_config import get_logger, PerformanceTimer
from .syntax_tree import (
    ConcatNode, LeafNode, OptionalNode, PlusNode, StarNode, SyntaxNode,
    SyntaxTree, UnionNode, iter_postorder, iter_preorder
)

logger = get_logger(__name__)

@dataclass(frozen=True)
class NodeAttributes:
    nullable: bool
    firstpos: FrozenSet[int]
    lastpos: FrozenSet[int]


@dataclass(frozen=True)
class AnnotatedTree:
    """
    A syntax tree together with its position attributes.

    Attributes:
        tree: The annotated syntax tree
        attributes: Read-only mapping node_id -> NodeAttributes
        followpos: Read-only mapping position -> positions that may follow it.
            Every position, the end marker included, has an entry.
    """
    tree: SyntaxTree
    attributes: Mapping[int, NodeAttributes]
    followpos: Mapping[int, FrozenSet[int]]

    def attributes_of(self, node: SyntaxNode) -> NodeAttributes:
        return self.attributes[node.node_id]

    @property
    def nullable(self) -> bool:
        return self.attributes_of(self.tree.root).nullable

    @property
    def firstpos(self) -> FrozenSet[int]:
        return self.attributes_of(self.tree.root).firstpos

    @property
    def lastpos(self) -> FrozenSet[int]:
        return self.attributes_of(self.tree.root).lastpos

    @property
    def expression_nullable(self) -> bool:
        """Whether the pattern itself, without the end marker, matches the empty string."""
        return self.attributes_of(self.tree.expression).nullable

    def to_dict(self) -> Dict[str, Any]:
        nodes = {}
        for node in iter_postorder(self.tree.root):
            attrs = self.attributes_of(node)
            nodes[f"node-{node.node_id}"] = {
                "nullable": attrs.nullable,
                "firstpos": sorted(attrs.firstpos),
                "lastpos": sorted(attrs.lastpos),
            }
        return {
            "tree": self.tree.to_dict(),
            "nodes": nodes,
            "followpos": {str(pos): sorted(follow) for pos, follow in sorted(self.followpos.items())},
        }


def _synthesize(node: SyntaxNode, attributes: Dict[int, NodeAttributes]) -> NodeAttributes:
    if isinstance(node, LeafNode):
        positions = frozenset([node.position])
        return NodeAttributes(False, positions, positions)

    if isinstance(node, UnionNode):
        left, right = attributes[node.left.node_id], attributes[node.right.node_id]
        return NodeAttributes(
            left.nullable or right.nullable,
            left.firstpos | right.firstpos,
            left.lastpos | right.lastpos,
        )

    if isinstance(node, ConcatNode):
        left, right = attributes[node.left.node_id], attributes[node.right.node_id]
        return NodeAttributes(
            left.nullable and right.nullable,
            left.firstpos | right.firstpos if left.nullable else left.firstpos,
            left.lastpos | right.lastpos if right.nullable else right.lastpos,
        )

    child = attributes[node.child.node_id]
    if isinstance(node, PlusNode):
        return NodeAttributes(child.nullable, child.firstpos, child.lastpos)
    if isinstance(node, (StarNode, OptionalNode)):
        return NodeAttributes(True, child.firstpos, child.lastpos)

    raise TypeError(f"Unsupported syntax tree node: {type(node).__name__}")


def annotate(tree: SyntaxTree) -> AnnotatedTree:
    """
    Compute nullable/firstpos/lastpos for every node and followpos for every position.

    Args:
        tree: Augmented syntax tree from the parser

    Returns:
        AnnotatedTree with frozen attribute maps

    Raises:
        TypeError: If ``tree`` is not a SyntaxTree
    """
    if not isinstance(tree, SyntaxTree):
        raise TypeError(f"Expected SyntaxTree instance, got {type(tree)}")

    with PerformanceTimer("annotate_syntax_tree"):
        attributes: Dict[int, NodeAttributes] = {}
        for node in iter_postorder(tree.root):
            attributes[node.node_id] = _synthesize(node, attributes)

        follow: Dict[int, Set[int]] = defaultdict(set)
        for node in iter_preorder(tree.root):
            if isinstance(node, ConcatNode):
                first_right = attributes[node.right.node_id].firstpos
                for position in attributes[node.left.node_id].lastpos:
                    follow[position] |= first_right
            elif isinstance(node, (StarNode, PlusNode)):
                child = attributes[node.child.node_id]
                for position in child.lastpos:
                    follow[position] |= child.firstpos

        followpos = MappingProxyType({
            position: frozenset(follow.get(position, ()))
            for position in sorted(tree.positions)
        })

    logger.debug(f"Annotated '{tree.pattern}': firstpos(root)={sorted(attributes[tree.root.node_id].firstpos)}")
    return AnnotatedTree(tree=tree, attributes=MappingProxyType(attributes), followpos=followpos)
