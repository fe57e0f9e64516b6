from __future__ import annotations

import numpy as np
import pytest

from pydfa.core.automaton import Automaton
from pydfa.core.execution import NO_TRANSITION, TransitionMatrix, execute, run
from pydfa.core.types import Transition


def _div3_automaton() -> Automaton:
    dfa = Automaton()
    dfa.add_symbols(["0", "1"])
    dfa.add_states(["q0", "q1", "q2"])
    dfa.add_final_states(["q0"])
    dfa.add_transitions(
        [
            Transition("0", "q0", "q0"),
            Transition("1", "q0", "q1"),
            Transition("0", "q1", "q2"),
            Transition("1", "q1", "q0"),
            Transition("0", "q2", "q1"),
            Transition("1", "q2", "q2"),
        ]
    )
    return dfa


def test_execute_accepts(scenario_automaton) -> None:
    assert execute(scenario_automaton, "ab") == "S0 S1 S1 YES"


def test_execute_rejects(scenario_automaton) -> None:
    assert execute(scenario_automaton, "") == "S0 NO"


def test_execute_is_case_insensitive(scenario_automaton) -> None:
    assert execute(scenario_automaton, "ABb") == "S0 S1 S1 S1 YES"


def test_invalid_symbol_keeps_original_character(scenario_automaton) -> None:
    assert execute(scenario_automaton, "ac") == "Error: invalid symbol c"


def test_missing_transition(scenario_automaton) -> None:
    assert execute(scenario_automaton, "b") == "Error: no transition for b in state S0"


def test_run_result_fields(scenario_automaton) -> None:
    result = run(scenario_automaton, "a")
    assert result.ok
    assert result.trace == ("S0", "S1")
    assert result.accepted

    failed = run(scenario_automaton, "x")
    assert not failed.ok
    assert failed.trace == ()


def test_run_requires_initial_state() -> None:
    with pytest.raises(ValueError, match="initial state"):
        run(Automaton(), "a")


def test_execute_does_not_mutate(scenario_automaton) -> None:
    before = (
        scenario_automaton.symbols,
        scenario_automaton.states,
        scenario_automaton.transitions,
        scenario_automaton.final_states,
    )
    execute(scenario_automaton, "abab")
    after = (
        scenario_automaton.symbols,
        scenario_automaton.states,
        scenario_automaton.transitions,
        scenario_automaton.final_states,
    )
    assert before == after


def test_execute_deterministic() -> None:
    dfa = _div3_automaton()
    for text in ["", "0", "11", "110", "1001", "11111", "101010"]:
        assert execute(dfa, text) == execute(dfa, text)


@pytest.mark.parametrize("value", [0, 1, 2, 3, 5, 6, 9, 10, 21, 22])
def test_div3_verdict(value: int) -> None:
    text = format(value, "b")
    assert execute(_div3_automaton(), text).endswith("YES" if value % 3 == 0 else "NO")


def test_transition_matrix_layout() -> None:
    matrix = TransitionMatrix(_div3_automaton())

    assert matrix.table.shape == (2, 3)
    assert matrix.table.dtype == np.int64
    # row "1", column "Q1" -> "Q0"
    assert matrix.table[1, 1] == 0
    assert np.array_equal(matrix.final_mask, np.array([True, False, False]))


def test_transition_matrix_marks_missing(scenario_automaton) -> None:
    matrix = TransitionMatrix(scenario_automaton)
    # symbol B from S0 has no transition
    assert matrix.table[1, 0] == NO_TRANSITION


def test_transition_matrix_read_only(scenario_automaton) -> None:
    matrix = TransitionMatrix(scenario_automaton)
    with pytest.raises(ValueError):
        matrix.table[0, 0] = 1


def test_transition_matrix_reusable(scenario_automaton) -> None:
    matrix = TransitionMatrix(scenario_automaton)
    assert str(matrix.run("a")) == "S0 S1 YES"
    assert str(matrix.run("ab")) == "S0 S1 S1 YES"
