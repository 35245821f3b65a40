import unittest

from automata_lab.api import build_full_automaton, build_optimal_automaton
from automata_lab.matcher.recognizer import RecognitionTrace, accepted_strings, recognize


class TestRecognizer(unittest.TestCase):
    def test_dragon_book_trace(self):
        dfa = build_optimal_automaton("(a|b)*abb")
        trace = recognize(dfa, "aabb")
        self.assertTrue(trace.accepted)
        self.assertEqual(trace.path, (0, 1, 1, 2, 3))
        self.assertEqual(trace.final_state, 3)
        self.assertEqual(trace.remaining_input, "")
        self.assertIsNone(trace.rejected_symbol)
        self.assertEqual(trace.message, "String accepted")
        self.assertEqual([step.index for step in trace.steps], [0, 1, 2, 3])

    def test_rejects_in_non_accepting_state(self):
        dfa = build_optimal_automaton("(a|b)*abb")
        trace = recognize(dfa, "ab")
        self.assertFalse(trace.accepted)
        self.assertFalse(trace.stopped_early)
        self.assertEqual(trace.consumed, 2)
        self.assertEqual(trace.message, "Rejected: q2 is not an accepting state")

    def test_empty_input(self):
        self.assertTrue(recognize(build_optimal_automaton("a*"), "").accepted)
        trace = recognize(build_optimal_automaton("a"), "")
        self.assertFalse(trace.accepted)
        self.assertEqual(trace.steps, ())
        self.assertEqual(trace.path, (0,))

    def test_missing_transition_stops_without_consuming(self):
        trace = recognize(build_optimal_automaton("ab"), "aab")
        self.assertFalse(trace.accepted)
        self.assertTrue(trace.stopped_early)
        self.assertEqual(trace.rejected_symbol, "a")
        self.assertEqual(trace.remaining_input, "ab")
        self.assertEqual(len(trace.steps), 1)
        self.assertEqual(trace.final_state, 1)
        self.assertEqual(trace.message, "No transition from q1 on 'a'")

    def test_symbol_outside_alphabet_after_progress(self):
        trace = recognize(build_optimal_automaton("a*"), "ab")
        self.assertFalse(trace.accepted)
        self.assertEqual(trace.rejected_symbol, "b")
        self.assertEqual(trace.remaining_input, "b")
        self.assertEqual(len(trace.steps), 1)
        self.assertEqual(trace.message, "Symbol 'b' is not in the alphabet")

    def test_unknown_symbol_is_rejected_not_raised(self):
        trace = recognize(build_full_automaton("ab"), "axb")
        self.assertFalse(trace.accepted)
        self.assertEqual(trace.rejected_symbol, "x")
        self.assertEqual(trace.remaining_input, "xb")
        self.assertEqual(trace.final_state, 1)
        self.assertEqual(trace.message, "Symbol 'x' is not in the alphabet")

    def test_entering_dead_state_stops_after_step(self):
        dfa = build_full_automaton("ab")
        trace = recognize(dfa, "bab")
        self.assertFalse(trace.accepted)
        self.assertEqual(trace.final_state, dfa.dead_state)
        self.assertEqual(len(trace.steps), 1)
        self.assertEqual(trace.remaining_input, "ab")
        self.assertEqual(trace.rejected_symbol, "b")
        self.assertEqual(trace.message, "Entered dead state on 'b'")

    def test_both_routes_agree(self):
        full = build_full_automaton("(a|b)*abb")
        short = build_optimal_automaton("(a|b)*abb")
        for text in ["", "abb", "aabb", "babb", "ab", "abba", "bbbabb", "c"]:
            self.assertEqual(recognize(full, text).accepted, recognize(short, text).accepted, text)

    def test_trace_to_dict(self):
        trace = recognize(build_optimal_automaton("ab"), "ab")
        self.assertIsInstance(trace, RecognitionTrace)
        self.assertEqual(trace.to_dict(), {
            'input': 'ab',
            'accepted': True,
            'steps': [
                {'index': 0, 'symbol': 'a', 'from': 0, 'to': 1},
                {'index': 1, 'symbol': 'b', 'from': 1, 'to': 2},
            ],
            'final_state': 2,
            'remaining_input': '',
            'rejected_symbol': None,
            'message': 'String accepted',
        })

    def test_rejects_non_automaton(self):
        with self.assertRaises(TypeError):
            recognize("ab", "ab")


class TestAcceptedStrings(unittest.TestCase):
    def test_shortest_first(self):
        dfa = build_optimal_automaton("a*b")
        self.assertEqual(accepted_strings(dfa, max_length=3), ["b", "ab", "aab"])

    def test_includes_empty_string(self):
        dfa = build_full_automaton("(ab)*")
        self.assertEqual(accepted_strings(dfa, max_length=4), ["", "ab", "abab"])

    def test_max_count(self):
        dfa = build_optimal_automaton("(a|b)*")
        self.assertEqual(accepted_strings(dfa, max_length=5, max_count=4), ["", "a", "b", "aa"])


if __name__ == '__main__':
    unittest.main()
