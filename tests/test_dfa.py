import unittest

import pytest

from automata_lab.matcher.automata import build_nfa
from automata_lab.matcher.dfa import (
    FULL, SHORT, Automaton, DFABuilder, determinize, merge_significant_states
)
from automata_lab.matcher.direct_dfa import build_direct
from automata_lab.ast.attributes import annotate
from automata_lab.parser import parse

from regex_samples import ORACLE_PATTERNS


def full_dfa(pattern):
    tree = parse(pattern)
    return determinize(build_nfa(tree), tree.alphabet, pattern)


class TestSubsetConstruction(unittest.TestCase):
    def test_concatenation_gets_dead_state(self):
        dfa = full_dfa("ab")
        self.assertEqual(dfa.kind, FULL)
        self.assertEqual(len(dfa.states), 4)
        self.assertEqual(dfa.dead_state, 2)
        self.assertEqual([dfa.state_name(s.id) for s in dfa.states], ["A", "B", "C", "D"])
        self.assertEqual(dfa.accepting_states, frozenset({3}))

        self.assertEqual(dfa.next_state(0, "a"), 1)
        self.assertEqual(dfa.next_state(0, "b"), 2)
        self.assertEqual(dfa.next_state(1, "a"), 2)
        self.assertEqual(dfa.next_state(1, "b"), 3)
        for symbol in dfa.alphabet:
            self.assertEqual(dfa.next_state(2, symbol), 2)
            self.assertEqual(dfa.next_state(3, symbol), 2)

    def test_only_dead_state_has_empty_label(self):
        dfa = full_dfa("ab")
        for state in dfa.states:
            self.assertEqual(state.is_dead, not state.label)
            self.assertEqual(state.is_dead, dfa.is_dead(state.id))

    def test_dragon_book_has_no_dead_state(self):
        dfa = full_dfa("(a|b)*abb")
        self.assertEqual(len(dfa.states), 5)
        self.assertIsNone(dfa.dead_state)
        self.assertTrue(dfa.is_total())
        self.assertEqual(len(dfa.accepting_states), 1)

    def test_start_label_is_start_closure(self):
        tree = parse("a*b")
        nfa = build_nfa(tree)
        dfa = determinize(nfa, tree.alphabet)
        self.assertEqual(dfa.start, 0)
        self.assertEqual(dfa.states[0].label, nfa.epsilon_closure([nfa.start]))

    def test_nullable_pattern_accepts_at_start(self):
        self.assertTrue(full_dfa("a*").states[0].accepting)
        self.assertFalse(full_dfa("a+").states[0].accepting)

    def test_labels_are_unique(self):
        dfa = full_dfa("(a|b)*a(a|b)")
        labels = [state.label for state in dfa.states]
        self.assertEqual(len(labels), len(set(labels)))

    def test_build_statistics(self):
        tree = parse("ab")
        builder = DFABuilder(build_nfa(tree), tree.alphabet)
        builder.build()
        stats = builder.get_build_statistics()
        self.assertEqual(stats['states_created'], 4)
        self.assertEqual(stats['transitions_created'], 8)
        self.assertTrue(stats['dead_state_used'])

    def test_builder_rejects_non_nfa(self):
        with self.assertRaises(TypeError):
            DFABuilder(parse("a"))

    def test_transitions_are_read_only(self):
        dfa = full_dfa("a")
        with self.assertRaises(TypeError):
            dfa.transitions[(0, "a")] = 0

    def test_to_dict_lists_transitions_in_state_order(self):
        data = full_dfa("ab").to_dict()
        self.assertEqual(data["kind"], "full")
        self.assertEqual(data["start"], 0)
        self.assertEqual(data["dead_state"], 2)
        self.assertEqual(
            [(t["from"], t["symbol"]) for t in data["transitions"]],
            [(0, "a"), (0, "b"), (1, "a"), (1, "b"), (2, "a"), (2, "b"), (3, "a"), (3, "b")],
        )
        self.assertEqual(data["states"][2], {"id": 2, "label": [], "accepting": False, "dead": True, "name": "C"})


class TestSignificantStateMerge(unittest.TestCase):
    def test_dragon_book_merges_to_four_states(self):
        tree = parse("(a|b)*abb")
        nfa = build_nfa(tree)
        merged = merge_significant_states(determinize(nfa, tree.alphabet), nfa)
        self.assertEqual(len(merged.states), 4)
        self.assertEqual(merged.start, 0)
        self.assertTrue(merged.is_total())
        self.assertEqual([s.id for s in merged.states], [0, 1, 2, 3])

    def test_merge_keeps_dead_state(self):
        tree = parse("ab")
        nfa = build_nfa(tree)
        merged = merge_significant_states(determinize(nfa, tree.alphabet), nfa)
        self.assertIsNotNone(merged.dead_state)
        self.assertTrue(merged.states[merged.dead_state].is_dead)

    def test_merge_rejects_short_automaton(self):
        tree = parse("ab")
        with self.assertRaises(ValueError):
            merge_significant_states(build_direct(annotate(tree)), build_nfa(tree))


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS)
def test_full_automaton_is_total_and_reachable(pattern):
    dfa = full_dfa(pattern)
    assert isinstance(dfa, Automaton)
    assert dfa.is_total()
    assert dfa.reachable_states() == {s.id for s in dfa.states}
    assert [s.id for s in dfa.states] == list(range(len(dfa.states)))


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS)
def test_merge_never_grows(pattern):
    tree = parse(pattern)
    nfa = build_nfa(tree)
    dfa = determinize(nfa, tree.alphabet)
    merged = merge_significant_states(dfa, nfa)
    assert len(merged.states) <= len(dfa.states)
    assert merged.is_total()


def test_state_names_depend_on_kind():
    tree = parse("ab")
    assert full_dfa("ab").state_name(1) == "B"
    short = build_direct(annotate(tree))
    assert short.kind == SHORT
    assert short.state_name(1) == "q1"
