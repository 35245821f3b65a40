# automata_lab/__init__.py
"""
Regular expression to finite automaton construction, for teaching.

A pattern is parsed into an augmented syntax tree, then turned into a DFA
either through a Thompson NFA and the subset construction (total automaton)
or directly from followpos (partial automaton). Strings can be replayed
through either automaton step by step.
"""

from .api import (
    parse_syntax_tree,
    annotate_syntax_tree,
    build_nfa_from_pattern,
    build_full_automaton,
    build_optimal_automaton,
    recognize_string,
)
from .ast import SyntaxTree, AnnotatedTree
from .matcher import Automaton, DFAState, NFA, RecognitionTrace, RecognitionStep
from .parser import (
    RegexSyntaxError,
    EmptyPatternError,
    UnbalancedParenthesisError,
    MissingOperandError,
    ReservedSymbolError,
)
from .config import AutomataConfig

__version__ = "0.1.0"

__all__ = [
    'parse_syntax_tree',
    'annotate_syntax_tree',
    'build_nfa_from_pattern',
    'build_full_automaton',
    'build_optimal_automaton',
    'recognize_string',
    'SyntaxTree',
    'AnnotatedTree',
    'Automaton',
    'DFAState',
    'NFA',
    'RecognitionTrace',
    'RecognitionStep',
    'RegexSyntaxError',
    'EmptyPatternError',
    'UnbalancedParenthesisError',
    'MissingOperandError',
    'ReservedSymbolError',
    'AutomataConfig',
]
