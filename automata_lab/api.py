# automata_lab/api.py
"""
Public entry points of the regex-to-automaton engine.

Every function takes plain strings (and, for recognition, an automaton) and
returns a fresh immutable result. Only malformed patterns raise
``RegexSyntaxError``.
"""

from typing import Optional

from automata_lab.ast.attributes import AnnotatedTree, annotate
from automata_lab.ast.syntax_tree import SyntaxTree
from automata_lab.config import AutomataConfig
from automata_lab.matcher.automata import NFA, build_nfa
from automata_lab.matcher.dfa import Automaton, determinize, merge_significant_states
from automata_lab.matcher.direct_dfa import build_direct
from automata_lab.matcher.recognizer import RecognitionTrace, recognize
from automata_lab.parser.regex_parser import parse
from automata_lab.utils.logging_config import get_logger, PerformanceTimer

logger = get_logger(__name__)


def parse_syntax_tree(pattern: str, config: Optional[AutomataConfig] = None) -> SyntaxTree:
    """Parse ``pattern`` into its augmented syntax tree."""
    return parse(pattern, config)


def annotate_syntax_tree(pattern: str, config: Optional[AutomataConfig] = None) -> AnnotatedTree:
    """Parse ``pattern`` and compute nullable/firstpos/lastpos/followpos."""
    return annotate(parse(pattern, config))


def build_nfa_from_pattern(pattern: str, config: Optional[AutomataConfig] = None) -> NFA:
    """Parse ``pattern`` and build its Thompson NFA."""
    return build_nfa(parse(pattern, config))


def build_full_automaton(pattern: str, merge_equivalent: bool = False,
                         config: Optional[AutomataConfig] = None) -> Automaton:
    """
    Build the total DFA of ``pattern`` via Thompson NFA and subset construction.

    Args:
        pattern: Regular expression
        merge_equivalent: Merge states sharing the same significant NFA states
        config: Optional configuration

    Returns:
        Automaton with a transition for every (state, symbol) pair

    Raises:
        RegexSyntaxError: If the pattern is malformed
    """
    with PerformanceTimer("build_full_automaton"):
        tree = parse(pattern, config)
        nfa = build_nfa(tree)
        dfa = determinize(nfa, tree.alphabet, pattern)
        if merge_equivalent:
            dfa = merge_significant_states(dfa, nfa)
    logger.debug(f"Full automaton for '{pattern}': {dfa.get_debug_info()}")
    return dfa


def build_optimal_automaton(pattern: str, config: Optional[AutomataConfig] = None) -> Automaton:
    """
    Build the partial DFA of ``pattern`` directly from followpos, without an NFA.

    Raises:
        RegexSyntaxError: If the pattern is malformed
    """
    with PerformanceTimer("build_optimal_automaton"):
        dfa = build_direct(annotate(parse(pattern, config)))
    logger.debug(f"Optimal automaton for '{pattern}': {dfa.get_debug_info()}")
    return dfa


def recognize_string(automaton: Automaton, text: str) -> RecognitionTrace:
    """Replay ``text`` through ``automaton`` and return the step-by-step trace."""
    return recognize(automaton, text)
