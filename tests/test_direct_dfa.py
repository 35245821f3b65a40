import pytest

from automata_lab.ast.attributes import annotate
from automata_lab.matcher.direct_dfa import DirectDFABuilder, build_direct
from automata_lab.parser import parse

from regex_samples import ORACLE_PATTERNS


def short_dfa(pattern):
    return build_direct(annotate(parse(pattern)))


def test_dragon_book_states():
    dfa = short_dfa("(a|b)*abb")
    assert [s.sorted_label for s in dfa.states] == [
        (1, 2, 3),
        (1, 2, 3, 4),
        (1, 2, 3, 5),
        (1, 2, 3, 6),
    ]
    assert dfa.accepting_states == frozenset({3})
    assert dfa.dead_state is None
    assert dfa.is_total()


def test_dragon_book_transitions():
    dfa = short_dfa("(a|b)*abb")
    table = {(source, symbol): target for (source, symbol), target in dfa.transitions.items()}
    assert table == {
        (0, "a"): 1, (0, "b"): 0,
        (1, "a"): 1, (1, "b"): 2,
        (2, "a"): 1, (2, "b"): 3,
        (3, "a"): 1, (3, "b"): 0,
    }


def test_concatenation_is_partial():
    dfa = short_dfa("ab")
    assert len(dfa.states) == 3
    assert len(dfa.transitions) == 2
    assert not dfa.is_total()
    assert dfa.next_state(0, "b") is None
    assert dfa.next_state(1, "b") == 2
    assert dfa.next_state(2, "a") is None
    assert dfa.accepting_states == frozenset({2})


def test_start_state_is_firstpos():
    annotated = annotate(parse("a?b"))
    dfa = build_direct(annotated)
    assert dfa.states[0].label == annotated.firstpos == frozenset({1, 2})


def test_accepting_iff_label_has_end_marker():
    tree = parse("(a|b)+c?")
    dfa = build_direct(annotate(tree))
    for state in dfa.states:
        assert state.accepting == (tree.end_position in state.label)


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS)
def test_never_has_dead_state(pattern):
    dfa = short_dfa(pattern)
    assert dfa.dead_state is None
    assert all(state.label for state in dfa.states)
    assert dfa.reachable_states() == {s.id for s in dfa.states}


@pytest.mark.parametrize("pattern", ORACLE_PATTERNS)
def test_every_state_can_still_accept(pattern):
    dfa = short_dfa(pattern)
    for state in dfa.states:
        assert dfa.reachable_states(state.id) & dfa.accepting_states, dfa.state_name(state.id)


def test_construction_steps():
    builder = DirectDFABuilder(annotate(parse("(a|b)*abb")))
    steps = builder.construction_steps()
    assert len(steps) == 8
    assert steps[0] == {
        'state': 'q0',
        'symbol': 'a',
        'positions': [1, 3],
        'target_label': [1, 2, 3, 4],
        'target': 'q1',
    }
    assert steps[1]['positions'] == [2]
    assert steps[1]['target'] == 'q0'


def test_construction_steps_record_missing_targets():
    steps = DirectDFABuilder(annotate(parse("ab"))).construction_steps()
    missing = [row for row in steps if row['target'] is None]
    assert len(missing) == 4
    assert all(row['target_label'] == [] for row in missing)


def test_positions_by_symbol_excludes_end_marker():
    tree = parse("aba")
    builder = DirectDFABuilder(annotate(tree))
    assert builder.positions_by_symbol == {"a": frozenset({1, 3}), "b": frozenset({2})}


def test_builder_rejects_plain_tree():
    with pytest.raises(TypeError):
        DirectDFABuilder(parse("a"))
