# automata_lab/ast/__init__.py

from .syntax_tree import (
    NodeType, LeafNode, ConcatNode, UnionNode, StarNode, PlusNode, OptionalNode,
    SyntaxTree, visualize_tree
)
from .attributes import NodeAttributes, AnnotatedTree, annotate

__all__ = [
    'NodeType',
    'LeafNode',
    'ConcatNode',
    'UnionNode',
    'StarNode',
    'PlusNode',
    'OptionalNode',
    'SyntaxTree',
    'visualize_tree',
    'NodeAttributes',
    'AnnotatedTree',
    'annotate'
]
