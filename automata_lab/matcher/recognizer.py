"""
String recognition over a built DFA.

Recognition is total over any input: a symbol outside the alphabet, a
missing transition, or a step into the dead state all end the run with a
rejection. None of these raise.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from automata_lab.utils.logging_config import get_logger
from .dfa import Automaton

logger = get_logger(__name__)


@dataclass(frozen=True)
class RecognitionStep:
    """One consumed symbol: ``from_state --symbol--> to_state``."""
    index: int
    symbol: str
    from_state: int
    to_state: int

    def to_dict(self) -> Dict[str, Any]:
        return {'index': self.index, 'symbol': self.symbol, 'from': self.from_state, 'to': self.to_state}


@dataclass(frozen=True)
class RecognitionTrace:
    """
    Result of replaying a string through an automaton.

    Attributes:
        input: The string that was recognized
        steps: Transitions taken, in order
        accepted: Whether the automaton accepted the input
        final_state: State the run ended in
        remaining_input: Suffix of the input that was never consumed
        rejected_symbol: Symbol that stopped the run early, if any
        message: Human readable outcome
    """
    input: str
    steps: Tuple[RecognitionStep, ...]
    accepted: bool
    final_state: int
    remaining_input: str
    rejected_symbol: Optional[str] = None
    message: str = ""

    @property
    def consumed(self) -> int:
        return len(self.input) - len(self.remaining_input)

    @property
    def stopped_early(self) -> bool:
        return self.rejected_symbol is not None

    @property
    def path(self) -> Tuple[int, ...]:
        """States visited, starting with the start state."""
        if not self.steps:
            return (self.final_state,)
        return (self.steps[0].from_state,) + tuple(step.to_state for step in self.steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'input': self.input,
            'accepted': self.accepted,
            'steps': [step.to_dict() for step in self.steps],
            'final_state': self.final_state,
            'remaining_input': self.remaining_input,
            'rejected_symbol': self.rejected_symbol,
            'message': self.message,
        }


def recognize(automaton: Automaton, text: str) -> RecognitionTrace:
    """
    Simulate ``automaton`` over ``text``, recording every transition.

    Args:
        automaton: A DFA from either construction route
        text: Input string; any characters are allowed

    Returns:
        RecognitionTrace: Immutable record of the run
    """
    if not isinstance(automaton, Automaton):
        raise TypeError(f"Expected Automaton instance, got {type(automaton)}")

    alphabet = set(automaton.alphabet)
    current = automaton.start
    steps: List[RecognitionStep] = []

    def rejected(index: int, symbol: str, message: str, consumed: bool) -> RecognitionTrace:
        remaining = text[index + 1:] if consumed else text[index:]
        logger.debug(f"Rejected '{text}' at index {index}: {message}")
        return RecognitionTrace(text, tuple(steps), False, current, remaining, symbol, message)

    for index, symbol in enumerate(text):
        if symbol not in alphabet:
            return rejected(index, symbol, f"Symbol '{symbol}' is not in the alphabet", consumed=False)

        target = automaton.next_state(current, symbol)
        if target is None:
            name = automaton.state_name(current)
            return rejected(index, symbol, f"No transition from {name} on '{symbol}'", consumed=False)

        steps.append(RecognitionStep(index, symbol, current, target))
        current = target

        if automaton.is_dead(current):
            return rejected(index, symbol, f"Entered dead state on '{symbol}'", consumed=True)

    accepted = automaton.states[current].accepting
    if accepted:
        message = "String accepted"
    else:
        message = f"Rejected: {automaton.state_name(current)} is not an accepting state"
    return RecognitionTrace(text, tuple(steps), accepted, current, "", None, message)


def accepted_strings(automaton: Automaton, max_length: int = 5, max_count: int = 100) -> List[str]:
    """
    Enumerate accepted strings by increasing length, then alphabetical order.

    Args:
        automaton: A DFA from either construction route
        max_length: Longest string to consider
        max_count: Stop after this many strings

    Returns:
        List of accepted strings (the empty string included when accepted)
    """
    results: List[str] = []
    frontier: List[Tuple[str, int]] = [("", automaton.start)]

    for _ in range(max_length + 1):
        for prefix, state in frontier:
            if automaton.states[state].accepting:
                results.append(prefix)
                if len(results) >= max_count:
                    return results

        next_frontier = []
        for prefix, state in frontier:
            for symbol in automaton.alphabet:
                target = automaton.next_state(state, symbol)
                if target is not None and not automaton.is_dead(target):
                    next_frontier.append((prefix + symbol, target))
        frontier = next_frontier

    return results
