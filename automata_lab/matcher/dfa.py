"""
Deterministic finite automata and the subset construction.

This module holds the immutable ``Automaton`` value shared by both
construction routes and the subset-construction builder that turns a
Thompson NFA into a DFA with a *total* transition function.

Features:
- Breadth-first subset construction, state ids in creation order
- Exact label-set deduplication (frozenset keys)
- One shared dead state, created on first use
- Optional merging of states with the same significant NFA states
"""

from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Deque, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from automata_lab.utils.logging_config import get_logger, PerformanceTimer
from .automata import NFA

# Module logger
logger = get_logger(__name__)

FULL = "full"
SHORT = "short"

STATE_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


@dataclass(frozen=True)
class DFAState:
    """
    A deterministic state.

    Attributes:
        id: Dense, zero-based state id in creation order
        label: Source positions (direct method) or NFA state ids (subset
            construction) this state stands for. Only the dead state has an
            empty label.
        accepting: Whether this is an accepting state
        is_dead: Whether this is the shared dead state of a total automaton
    """
    id: int
    label: FrozenSet[int]
    accepting: bool
    is_dead: bool = False

    @property
    def sorted_label(self) -> Tuple[int, ...]:
        return tuple(sorted(self.label))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'label': list(self.sorted_label),
            'accepting': self.accepting,
            'dead': self.is_dead,
        }


@dataclass(frozen=True)
class Automaton:
    """
    Immutable deterministic finite automaton.

    Attributes:
        states: States ordered by id; the start state is always id 0
        alphabet: Sorted input symbols
        transitions: Read-only mapping (state id, symbol) -> state id. Total
            for ``kind == "full"``, partial for ``kind == "short"``.
        kind: ``"full"`` (subset construction) or ``"short"`` (direct method)
        pattern: Source pattern, when known
        dead_state: Id of the dead state, if one was materialized
    """
    states: Tuple[DFAState, ...]
    alphabet: Tuple[str, ...]
    transitions: Mapping[Tuple[int, str], int]
    kind: str
    pattern: Optional[str] = None
    dead_state: Optional[int] = None
    start: int = field(default=0, init=False)

    def next_state(self, state_id: int, symbol: str) -> Optional[int]:
        """Target of ``(state_id, symbol)``, or None when no transition exists."""
        return self.transitions.get((state_id, symbol))

    def is_dead(self, state_id: int) -> bool:
        return self.dead_state is not None and state_id == self.dead_state

    @property
    def accepting_states(self) -> FrozenSet[int]:
        return frozenset(state.id for state in self.states if state.accepting)

    def is_total(self) -> bool:
        """Whether every (state, symbol) pair has a transition."""
        return all(
            (state.id, symbol) in self.transitions
            for state in self.states
            for symbol in self.alphabet
        )

    def reachable_states(self, from_state: int = 0) -> Set[int]:
        """Ids of all states reachable from ``from_state``, itself included."""
        visited = {from_state}
        queue = deque([from_state])
        while queue:
            current = queue.popleft()
            for symbol in self.alphabet:
                target = self.next_state(current, symbol)
                if target is not None and target not in visited:
                    visited.add(target)
                    queue.append(target)
        return visited

    def state_name(self, state_id: int) -> str:
        """Display name: letters for subset-construction states, ``q<n>`` for direct ones."""
        if self.kind == FULL and state_id < len(STATE_LETTERS):
            return STATE_LETTERS[state_id]
        return f"q{state_id}"

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'pattern': self.pattern,
            'total_states': len(self.states),
            'final_states': len(self.accepting_states),
            'total_transitions': len(self.transitions),
            'alphabet_size': len(self.alphabet),
            'has_dead_state': self.dead_state is not None,
            'is_total': self.is_total(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'DFA',
            'kind': self.kind,
            'pattern': self.pattern,
            'start': self.start,
            'alphabet': list(self.alphabet),
            'states': [dict(state.to_dict(), name=self.state_name(state.id)) for state in self.states],
            'transitions': [
                {'from': source, 'symbol': symbol, 'to': target}
                for (source, symbol), target in self.transitions.items()
            ],
            'dead_state': self.dead_state,
        }


class StateRegistry:
    """
    Worklist bookkeeping shared by both DFA construction methods.

    States are looked up by exact label equality and created only for new
    labels. Ids are handed out in creation order and new states are queued
    for processing in the same order.
    """

    def __init__(self):
        self.labels: List[FrozenSet[int]] = []
        self.accepting: List[bool] = []
        self.index: Dict[FrozenSet[int], int] = {}
        self.queue: Deque[int] = deque()
        self.transitions: Dict[Tuple[int, str], int] = {}
        self.dead_state: Optional[int] = None

    def get_or_create(self, label: FrozenSet[int], accepting: bool) -> int:
        existing = self.index.get(label)
        if existing is not None:
            return existing
        state_id = len(self.labels)
        self.labels.append(label)
        self.accepting.append(accepting)
        self.index[label] = state_id
        self.queue.append(state_id)
        return state_id

    def get_or_create_dead(self, alphabet: Iterable[str]) -> int:
        """Create the dead state on first use; all of its transitions loop to itself."""
        if self.dead_state is None:
            self.dead_state = len(self.labels)
            self.labels.append(frozenset())
            self.accepting.append(False)
            for symbol in alphabet:
                self.transitions[(self.dead_state, symbol)] = self.dead_state
            logger.debug(f"Created dead state {self.dead_state}")
        return self.dead_state

    def add_transition(self, source: int, symbol: str, target: int) -> None:
        self.transitions[(source, symbol)] = target

    def freeze(self, alphabet: Tuple[str, ...], kind: str, pattern: Optional[str]) -> Automaton:
        states = tuple(
            DFAState(i, label, accepting, is_dead=(i == self.dead_state))
            for i, (label, accepting) in enumerate(zip(self.labels, self.accepting))
        )
        ordered = dict(sorted(self.transitions.items(), key=lambda item: (item[0][0], alphabet.index(item[0][1]))))
        return Automaton(
            states=states,
            alphabet=alphabet,
            transitions=MappingProxyType(ordered),
            kind=kind,
            pattern=pattern,
            dead_state=self.dead_state,
        )


class DFABuilder:
    """
    Subset construction from a Thompson NFA.

    The result has a total transition function: every empty target set is
    sent to one shared dead state.
    """

    def __init__(self, nfa: NFA, alphabet: Optional[Iterable[str]] = None, pattern: Optional[str] = None):
        """
        Args:
            nfa: Source NFA to convert to DFA
            alphabet: Input symbols, defaults to the NFA's alphabet
            pattern: Source pattern, recorded on the result
        """
        if not isinstance(nfa, NFA):
            raise TypeError(f"Expected NFA instance, got {type(nfa)}")

        self.nfa = nfa
        self.alphabet: Tuple[str, ...] = tuple(sorted(nfa.alphabet if alphabet is None else set(alphabet)))
        self.pattern = pattern
        self.build_stats = {
            'states_created': 0,
            'transitions_created': 0,
            'dead_state_used': False,
        }

    def build(self) -> Automaton:
        """
        Build the DFA breadth-first in state-creation order.

        Returns:
            Automaton: Total DFA whose state labels are NFA state sets
        """
        with PerformanceTimer("dfa_build"):
            logger.info(f"Starting subset construction from NFA with {len(self.nfa.states)} states")
            registry = StateRegistry()

            start_set = self.nfa.epsilon_closure([self.nfa.start])
            registry.get_or_create(start_set, self.nfa.accept in start_set)
            logger.debug(f"Start state epsilon closure: {sorted(start_set)}")

            while registry.queue:
                current = registry.queue.popleft()
                current_set = registry.labels[current]

                for symbol in self.alphabet:
                    target_set = self.nfa.epsilon_closure(self.nfa.move(current_set, symbol))
                    if target_set:
                        target = registry.get_or_create(target_set, self.nfa.accept in target_set)
                    else:
                        target = registry.get_or_create_dead(self.alphabet)
                    registry.add_transition(current, symbol, target)

            dfa = registry.freeze(self.alphabet, FULL, self.pattern)

        self.build_stats['states_created'] = len(dfa.states)
        self.build_stats['transitions_created'] = len(dfa.transitions)
        self.build_stats['dead_state_used'] = dfa.dead_state is not None
        logger.info(f"DFA construction completed: {len(dfa.states)} states, "
                    f"{len(dfa.transitions)} transitions")
        return dfa

    def get_build_statistics(self) -> Dict[str, Any]:
        return dict(self.build_stats)


def determinize(nfa: NFA, alphabet: Optional[Iterable[str]] = None, pattern: Optional[str] = None) -> Automaton:
    """Convert an NFA into a total DFA using the subset construction."""
    return DFABuilder(nfa, alphabet, pattern).build()


def merge_significant_states(automaton: Automaton, nfa: NFA) -> Automaton:
    """
    Merge subset-construction states that contain the same significant NFA states.

    A significant NFA state has a non-epsilon outgoing transition; the accept
    state is always significant. States sharing the same significant subset
    behave identically on every input, so each group collapses into its
    lowest-numbered member. Ids are renumbered densely in that order, which
    keeps the start state at 0 and the automaton total.

    Args:
        automaton: Result of :func:`determinize` over ``nfa``
        nfa: The NFA the automaton was built from

    Returns:
        Automaton: Equivalent total DFA with possibly fewer states
    """
    if automaton.kind != FULL:
        raise ValueError(f"Only subset-construction automata can be merged, got kind '{automaton.kind}'")

    significant = nfa.significant_states()
    representative: Dict[FrozenSet[int], int] = {}
    group_of: Dict[int, int] = {}
    for state in automaton.states:
        key = state.label & significant
        group_of[state.id] = representative.setdefault(key, state.id)

    kept = sorted(set(group_of.values()))
    new_id = {old: new for new, old in enumerate(kept)}

    states = []
    for old in kept:
        state = automaton.states[old]
        states.append(DFAState(new_id[old], state.label, state.accepting, state.is_dead))

    transitions: Dict[Tuple[int, str], int] = {}
    for old in kept:
        for symbol in automaton.alphabet:
            target = automaton.next_state(old, symbol)
            if target is not None:
                transitions[(new_id[old], symbol)] = new_id[group_of[target]]

    dead_state = None
    if automaton.dead_state is not None:
        dead_state = new_id[group_of[automaton.dead_state]]

    merged = len(automaton.states) - len(states)
    logger.info(f"Merged {merged} equivalent states by significant NFA states")
    return Automaton(
        states=tuple(states),
        alphabet=automaton.alphabet,
        transitions=MappingProxyType(transitions),
        kind=FULL,
        pattern=automaton.pattern,
        dead_state=dead_state,
    )
