"""
Non-deterministic finite automata built with Thompson's construction.

This module turns a regex syntax tree into an NFA with epsilon transitions.
The NFA is a flat state table; states refer to each other by index only.

Features:
- Iterative construction (no recursion on deep trees)
- Exactly one start state and one accept state
- Epsilon closure and move over state sets
- State renumbering in breadth-first order from the start state

The end-marker leaf of an augmented tree is not compiled; the accept state
plays its role.
"""

from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from automata_lab.ast.syntax_tree import (
    ConcatNode, LeafNode, OptionalNode, PlusNode, StarNode, SyntaxNode,
    SyntaxTree, UnionNode, iter_postorder
)
from automata_lab.config import get_config
from automata_lab.utils.logging_config import get_logger, PerformanceTimer

# Module logger
logger = get_logger(__name__)

StateIndex = int


@dataclass(frozen=True)
class Transition:
    """
    A symbol-labeled NFA transition.

    Attributes:
        symbol: Input symbol consumed by this transition
        target: Target state index (must be non-negative)
    """
    symbol: str
    target: StateIndex

    def __post_init__(self):
        if self.target < 0:
            raise ValueError(f"Target state index must be non-negative, got {self.target}")
        if not isinstance(self.symbol, str) or len(self.symbol) != 1:
            raise ValueError(f"Transition symbol must be a single character, got '{self.symbol}'")


class NFAState:
    """
    A state of a Thompson NFA.

    Attributes:
        state_id: Index of this state in the owning NFA
        transitions: Outgoing symbol transitions
        epsilon: Targets of outgoing epsilon transitions
        is_accept: Whether this is the accepting state
    """

    def __init__(self, state_id: Optional[int] = None):
        self.state_id = state_id
        self.transitions: List[Transition] = []
        self.epsilon: List[StateIndex] = []
        self.is_accept: bool = False

    def add_transition(self, symbol: str, target: StateIndex) -> None:
        transition = Transition(symbol, target)
        if transition not in self.transitions:
            self.transitions.append(transition)

    def add_epsilon(self, target: StateIndex) -> None:
        if target < 0:
            raise ValueError(f"Epsilon target must be non-negative, got {target}")
        if target not in self.epsilon:
            self.epsilon.append(target)

    @property
    def is_significant(self) -> bool:
        """A state is significant when it has a non-epsilon outgoing transition."""
        return bool(self.transitions)

    def get_transition_targets(self, symbol: str) -> List[StateIndex]:
        return [trans.target for trans in self.transitions if trans.symbol == symbol]

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            'state_id': self.state_id,
            'transitions': [(t.symbol, t.target) for t in self.transitions],
            'epsilon': list(self.epsilon),
            'is_accept': self.is_accept,
        }

    def __repr__(self) -> str:
        return f"NFAState(id={self.state_id}, transitions={len(self.transitions)}, epsilon={self.epsilon})"


class NFA:
    """
    Non-deterministic finite automaton with epsilon transitions.

    Attributes:
        start: Start state index
        accept: Accept state index
        states: List of NFA states, indexed by state id
        alphabet: Symbols appearing on transitions
    """

    def __init__(self, start: int, accept: int, states: List[NFAState],
                 alphabet: Optional[Iterable[str]] = None):
        if not isinstance(states, list) or not states:
            raise ValueError("States must be a non-empty list")

        if not (0 <= start < len(states)):
            raise ValueError(f"Start state index {start} out of range [0, {len(states)})")

        if not (0 <= accept < len(states)):
            raise ValueError(f"Accept state index {accept} out of range [0, {len(states)})")

        self.start = start
        self.accept = accept
        self.states = states

        for i, state in enumerate(self.states):
            state.state_id = i
            state.is_accept = i == accept

        if alphabet is None:
            alphabet = {t.symbol for state in states for t in state.transitions}
        self.alphabet: FrozenSet[str] = frozenset(alphabet)

        if not self.validate():
            raise ValueError("NFA structure validation failed")

    def validate(self) -> bool:
        """
        Validate transition targets and accept-state reachability.

        Returns:
            bool: True if NFA is valid, False otherwise
        """
        for i, state in enumerate(self.states):
            for trans in state.transitions:
                if not (0 <= trans.target < len(self.states)):
                    logger.error(f"State {i} has invalid transition target {trans.target}")
                    return False
            for eps_target in state.epsilon:
                if not (0 <= eps_target < len(self.states)):
                    logger.error(f"State {i} has invalid epsilon target {eps_target}")
                    return False

        if not self._is_accept_reachable():
            logger.warning("Accept state is not reachable from start state")

        return True

    def _is_accept_reachable(self) -> bool:
        """Check if accept state is reachable from start state."""
        visited = set()
        queue = deque([self.start])

        while queue:
            state_idx = queue.popleft()
            if state_idx == self.accept:
                return True
            if state_idx in visited:
                continue
            visited.add(state_idx)

            state = self.states[state_idx]
            queue.extend(t.target for t in state.transitions if t.target not in visited)
            queue.extend(e for e in state.epsilon if e not in visited)

        return False

    def epsilon_closure(self, state_indices: Iterable[int]) -> FrozenSet[int]:
        """
        Compute the set of states reachable from the given states using only epsilon transitions.

        Args:
            state_indices: State indices to compute the closure for

        Returns:
            FrozenSet[int]: The closure, including the given states

        Raises:
            ValueError: If any state index is invalid
        """
        closure: Set[int] = set()
        stack: List[int] = []
        for idx in state_indices:
            if not (0 <= idx < len(self.states)):
                raise ValueError(f"Invalid state index {idx}")
            if idx not in closure:
                closure.add(idx)
                stack.append(idx)

        while stack:
            current = stack.pop()
            for target in self.states[current].epsilon:
                if target not in closure:
                    closure.add(target)
                    stack.append(target)

        return frozenset(closure)

    def move(self, state_indices: Iterable[int], symbol: str) -> FrozenSet[int]:
        """States reachable from ``state_indices`` by one ``symbol`` transition."""
        targets: Set[int] = set()
        for idx in state_indices:
            targets.update(self.states[idx].get_transition_targets(symbol))
        return frozenset(targets)

    def significant_states(self) -> FrozenSet[int]:
        """States with a non-epsilon outgoing transition, plus the accept state."""
        significant = {i for i, state in enumerate(self.states) if state.is_significant}
        significant.add(self.accept)
        return frozenset(significant)

    def accepts(self, text: str) -> bool:
        """Simulate the NFA directly on ``text``."""
        current = self.epsilon_closure([self.start])
        for symbol in text:
            current = self.epsilon_closure(self.move(current, symbol))
            if not current:
                return False
        return self.accept in current

    def transition_count(self) -> Tuple[int, int]:
        """Return (symbol transitions, epsilon transitions)."""
        symbols = sum(len(state.transitions) for state in self.states)
        epsilons = sum(len(state.epsilon) for state in self.states)
        return symbols, epsilons

    def get_debug_info(self) -> Dict[str, Any]:
        symbols, epsilons = self.transition_count()
        return {
            'num_states': len(self.states),
            'start': self.start,
            'accept': self.accept,
            'alphabet': sorted(self.alphabet),
            'symbol_transitions': symbols,
            'epsilon_transitions': epsilons,
        }

    def to_dict(self) -> Dict[str, Any]:
        epsilon_symbol = get_config().epsilon_symbol
        transitions = []
        for state in self.states:
            for trans in state.transitions:
                transitions.append({'from': state.state_id, 'symbol': trans.symbol, 'to': trans.target})
            for target in state.epsilon:
                transitions.append({'from': state.state_id, 'symbol': epsilon_symbol, 'to': target})
        return {
            'type': 'NFA',
            'states': [
                {'id': s.state_id, 'initial': s.state_id == self.start, 'accepting': s.is_accept}
                for s in self.states
            ],
            'alphabet': sorted(self.alphabet),
            'start': self.start,
            'accept': self.accept,
            'transitions': transitions,
        }

    def __repr__(self) -> str:
        return f"NFA(states={len(self.states)}, start={self.start}, accept={self.accept})"


class NFABuilder:
    """
    Thompson construction from a regex syntax tree.

    Each subexpression becomes a fragment ``(start, accept)``:

    - symbol ``a``: ``start --a--> accept``
    - ``r|s``: new start with epsilon to both starts, new accept reached by
      epsilon from both accepts
    - ``rs``: epsilon from accept(r) to start(s)
    - ``r*``: new start/accept; epsilon start->r, start->accept,
      accept(r)->start(r), accept(r)->accept
    - ``r+``: as ``r*`` without start->accept
    - ``r?``: as ``r*`` without accept(r)->start(r)
    """

    def __init__(self):
        self.states: List[NFAState] = []

    def new_state(self) -> int:
        """Create a new NFA state and return its index."""
        state = NFAState(len(self.states))
        self.states.append(state)
        return len(self.states) - 1

    def add_epsilon(self, from_state: int, to_state: int):
        """Add an epsilon transition between states."""
        self.states[from_state].add_epsilon(to_state)

    def add_transition(self, from_state: int, symbol: str, to_state: int):
        self.states[from_state].add_transition(symbol, to_state)

    def build(self, tree: SyntaxTree) -> NFA:
        """
        Build the NFA for the expression part of an augmented syntax tree.

        Args:
            tree: Syntax tree returned by the parser

        Returns:
            NFA: Automaton with exactly one start and one accept state

        Raises:
            TypeError: If ``tree`` is not a SyntaxTree
        """
        if not isinstance(tree, SyntaxTree):
            raise TypeError(f"Expected SyntaxTree instance, got {type(tree)}")

        with PerformanceTimer("nfa_build"):
            self.states = []
            start, accept = self._build_fragment(tree.expression)
            nfa = self._renumber(start, accept, tree.alphabet)

        symbols, epsilons = nfa.transition_count()
        logger.info(f"Built NFA for '{tree.pattern}': {len(nfa.states)} states, "
                    f"{symbols} symbol and {epsilons} epsilon transitions")
        return nfa

    def _build_fragment(self, root: SyntaxNode) -> Tuple[int, int]:
        fragments: List[Tuple[int, int]] = []

        for node in iter_postorder(root):
            if isinstance(node, LeafNode):
                start, accept = self.new_state(), self.new_state()
                self.add_transition(start, node.symbol, accept)
                fragments.append((start, accept))

            elif isinstance(node, ConcatNode):
                right = fragments.pop()
                left = fragments.pop()
                self.add_epsilon(left[1], right[0])
                fragments.append((left[0], right[1]))

            elif isinstance(node, UnionNode):
                right = fragments.pop()
                left = fragments.pop()
                start, accept = self.new_state(), self.new_state()
                self.add_epsilon(start, left[0])
                self.add_epsilon(start, right[0])
                self.add_epsilon(left[1], accept)
                self.add_epsilon(right[1], accept)
                fragments.append((start, accept))

            elif isinstance(node, (StarNode, PlusNode, OptionalNode)):
                inner_start, inner_accept = fragments.pop()
                start, accept = self.new_state(), self.new_state()
                self.add_epsilon(start, inner_start)
                if not isinstance(node, PlusNode):
                    self.add_epsilon(start, accept)
                if not isinstance(node, OptionalNode):
                    self.add_epsilon(inner_accept, inner_start)
                self.add_epsilon(inner_accept, accept)
                fragments.append((start, accept))

            else:
                raise TypeError(f"Unsupported syntax tree node: {type(node).__name__}")

        if len(fragments) != 1:
            raise RuntimeError(f"Malformed syntax tree: {len(fragments)} fragments left after construction")
        return fragments[0]

    def _renumber(self, start: int, accept: int, alphabet: Iterable[str]) -> NFA:
        """Renumber states breadth-first from the start state so that the start state is 0."""
        order: Dict[int, int] = {start: 0}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            state = self.states[current]
            for target in [t.target for t in state.transitions] + state.epsilon:
                if target not in order:
                    order[target] = len(order)
                    queue.append(target)

        renumbered = [NFAState(i) for i in range(len(order))]
        for old, new in order.items():
            for trans in self.states[old].transitions:
                renumbered[new].add_transition(trans.symbol, order[trans.target])
            for target in self.states[old].epsilon:
                renumbered[new].add_epsilon(order[target])

        return NFA(order[start], order[accept], renumbered, alphabet=alphabet)


def build_nfa(tree: SyntaxTree) -> NFA:
    """Build a Thompson NFA from a parsed syntax tree."""
    return NFABuilder().build(tree)
