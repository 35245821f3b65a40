# automata_lab/matcher/__init__.py

from .automata import NFA, NFAState, NFABuilder, Transition, build_nfa
from .dfa import Automaton, DFAState, DFABuilder, determinize, merge_significant_states
from .direct_dfa import DirectDFABuilder, build_direct
from .recognizer import RecognitionStep, RecognitionTrace, recognize, accepted_strings

__all__ = [
    'NFA',
    'NFAState',
    'NFABuilder',
    'Transition',
    'build_nfa',
    'Automaton',
    'DFAState',
    'DFABuilder',
    'determinize',
    'merge_significant_states',
    'DirectDFABuilder',
    'build_direct',
    'RecognitionStep',
    'RecognitionTrace',
    'recognize',
    'accepted_strings'
]
