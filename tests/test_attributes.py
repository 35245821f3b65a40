import unittest

from automata_lab.ast import AnnotatedTree, annotate
from automata_lab.ast.syntax_tree import StarNode, UnionNode
from automata_lab.parser import parse


def followpos_of(pattern):
    return {pos: set(follow) for pos, follow in annotate(parse(pattern)).followpos.items()}


class TestPositionAttributes(unittest.TestCase):
    def test_dragon_book_followpos(self):
        self.assertEqual(followpos_of("(a|b)*abb"), {
            1: {1, 2, 3},
            2: {1, 2, 3},
            3: {4},
            4: {5},
            5: {6},
            6: set(),
        })

    def test_root_attributes(self):
        annotated = annotate(parse("(a|b)*abb"))
        self.assertFalse(annotated.nullable)
        self.assertEqual(annotated.firstpos, frozenset({1, 2, 3}))
        self.assertEqual(annotated.lastpos, frozenset({6}))
        self.assertFalse(annotated.expression_nullable)

    def test_inner_node_attributes(self):
        tree = parse("(a|b)*abb")
        annotated = annotate(tree)
        star = next(node for node in tree.nodes() if isinstance(node, StarNode))
        union = next(node for node in tree.nodes() if isinstance(node, UnionNode))

        self.assertTrue(annotated.attributes_of(star).nullable)
        self.assertEqual(annotated.attributes_of(star).firstpos, frozenset({1, 2}))
        self.assertFalse(annotated.attributes_of(union).nullable)
        self.assertEqual(annotated.attributes_of(union).lastpos, frozenset({1, 2}))

    def test_star_is_nullable_and_loops(self):
        annotated = annotate(parse("a*"))
        self.assertTrue(annotated.expression_nullable)
        self.assertEqual(annotated.firstpos, frozenset({1, 2}))
        self.assertEqual(followpos_of("a*"), {1: {1, 2}, 2: set()})

    def test_plus_loops_but_is_not_nullable(self):
        annotated = annotate(parse("a+"))
        self.assertFalse(annotated.expression_nullable)
        self.assertEqual(annotated.firstpos, frozenset({1}))
        self.assertEqual(followpos_of("a+"), {1: {1, 2}, 2: set()})

    def test_optional_is_nullable_without_loop(self):
        annotated = annotate(parse("a?"))
        self.assertTrue(annotated.expression_nullable)
        self.assertEqual(annotated.firstpos, frozenset({1, 2}))
        self.assertEqual(followpos_of("a?"), {1: {2}, 2: set()})

    def test_plus_of_nullable_is_nullable(self):
        self.assertTrue(annotate(parse("(a?)+")).expression_nullable)

    def test_concatenation_of_nullables(self):
        annotated = annotate(parse("a?b?c?"))
        self.assertTrue(annotated.expression_nullable)
        self.assertEqual(annotated.firstpos, frozenset({1, 2, 3, 4}))
        self.assertEqual(followpos_of("a?b?c?"), {
            1: {2, 3, 4},
            2: {3, 4},
            3: {4},
            4: set(),
        })

    def test_every_position_has_followpos_entry(self):
        tree = parse("x(y|z)*w")
        annotated = annotate(tree)
        self.assertEqual(set(annotated.followpos), set(tree.positions))
        self.assertEqual(annotated.followpos[tree.end_position], frozenset())

    def test_followpos_never_contains_unknown_positions(self):
        tree = parse("((a|b)(c|d)*)+e?")
        annotated = annotate(tree)
        for follow in annotated.followpos.values():
            self.assertTrue(follow <= set(tree.positions))

    def test_result_is_read_only(self):
        annotated = annotate(parse("ab"))
        with self.assertRaises(TypeError):
            annotated.followpos[1] = frozenset()

    def test_to_dict(self):
        data = annotate(parse("ab")).to_dict()
        self.assertEqual(data["followpos"], {"1": [2], "2": [3], "3": []})
        self.assertEqual(len(data["nodes"]), 5)
        self.assertIn("tree", data)

    def test_rejects_non_tree(self):
        with self.assertRaises(TypeError):
            annotate("ab")

    def test_annotation_is_deterministic(self):
        first = annotate(parse("(a|b)*abb"))
        second = annotate(parse("(a|b)*abb"))
        self.assertIsInstance(first, AnnotatedTree)
        self.assertEqual(first.to_dict(), second.to_dict())


if __name__ == '__main__':
    unittest.main()
