# automata_lab/utils/tables.py
"""
Tabular views of construction results as pandas DataFrames.

These are plain data for a presentation layer: transition tables, state
label tables and followpos tables.
"""

import pandas as pd

from automata_lab.ast.attributes import AnnotatedTree
from automata_lab.matcher.dfa import Automaton

MISSING = "-"


def _decorated_name(automaton: Automaton, state_id: int) -> str:
    name = automaton.state_name(state_id)
    state = automaton.states[state_id]
    if state.accepting:
        name = f"*{name}"
    if state_id == automaton.start:
        name = f"→{name}"
    return name


def transition_table(automaton: Automaton) -> pd.DataFrame:
    """
    Build the transition table of an automaton.

    Rows are states (``→`` marks the start state, ``*`` accepting states),
    columns are alphabet symbols and cells hold the target state's name, or
    ``-`` where a partial automaton has no transition.
    """
    rows = []
    for state in automaton.states:
        row = {}
        for symbol in automaton.alphabet:
            target = automaton.next_state(state.id, symbol)
            row[symbol] = automaton.state_name(target) if target is not None else MISSING
        rows.append(row)

    index = pd.Index([_decorated_name(automaton, s.id) for s in automaton.states], name="state")
    return pd.DataFrame(rows, index=index, columns=list(automaton.alphabet))


def state_labels_table(automaton: Automaton) -> pd.DataFrame:
    """One row per state with its label set, acceptance and dead-state flags."""
    return pd.DataFrame(
        {
            "id": [s.id for s in automaton.states],
            "name": [automaton.state_name(s.id) for s in automaton.states],
            "label": [list(s.sorted_label) for s in automaton.states],
            "accepting": [s.accepting for s in automaton.states],
            "dead": [s.is_dead for s in automaton.states],
        }
    )


def followpos_table(annotated: AnnotatedTree) -> pd.DataFrame:
    """One row per position with its symbol and sorted followpos set."""
    positions = sorted(annotated.tree.positions)
    return pd.DataFrame(
        {
            "symbol": [annotated.tree.positions[p] for p in positions],
            "followpos": [sorted(annotated.followpos[p]) for p in positions],
        },
        index=pd.Index(positions, name="position"),
    )
