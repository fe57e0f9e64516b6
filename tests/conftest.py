"""
Pytest configuration and fixtures for pydfa tests.

Provides empty and pre-built automata, and interpreters whose output is
captured in a list and whose files live in a temporary directory.
"""

import pytest


SCENARIO_COMMANDS = [
    "SYMBOLS a b",
    "STATES s0 s1",
    "INITIAL-STATE s0",
    "FINAL-STATES s1",
    "TRANSITIONS a s0 s1, b s1 s1",
]


@pytest.fixture
def automaton():
    """Fresh, empty automaton."""
    from pydfa.core.automaton import Automaton
    return Automaton()


@pytest.fixture
def scenario_automaton():
    """
    Two-state automaton accepting strings that start with 'a' followed by b*.

    Built through the model API, not the interpreter.
    """
    from pydfa.core.automaton import Automaton
    from pydfa.core.types import Transition

    dfa = Automaton()
    dfa.add_symbols(["a", "b"])
    dfa.add_states(["s0", "s1"])
    dfa.set_initial_state("s0")
    dfa.add_final_states(["s1"])
    dfa.add_transitions([Transition("a", "s0", "s1"), Transition("b", "s1", "s1")])
    return dfa


@pytest.fixture
def output_lines():
    """Collects every line the interpreter prints."""
    return []


@pytest.fixture
def interpreter(tmp_path, output_lines):
    """Interpreter writing output into output_lines and files into tmp_path."""
    from pydfa.config import InterpreterConfig
    from pydfa.interpreter.commands import Interpreter

    interp = Interpreter(config=InterpreterConfig(work_dir=tmp_path), output=output_lines.append)
    yield interp
    interp.close()


@pytest.fixture
def scenario_interpreter(interpreter, output_lines):
    """Interpreter with the two-state scenario automaton already defined."""
    for line, command in enumerate(SCENARIO_COMMANDS, start=1):
        interpreter.process(command, line)
    output_lines.clear()
    return interpreter


@pytest.fixture
def scenario_commands():
    """Commands that define the scenario automaton, one per line."""
    return list(SCENARIO_COMMANDS)
