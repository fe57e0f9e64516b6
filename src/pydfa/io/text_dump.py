"""
Human-readable configuration layout.

The layout is itself a command script: writing it to a file and loading
that file rebuilds the automaton. Sections are sorted so the output does
not depend on declaration order; empty sections are left out.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydfa.core.automaton import Automaton


def render_configuration(automaton: Automaton) -> list[str]:
    lines = []
    if automaton.symbols:
        lines.append("SYMBOLS " + " ".join(sorted(automaton.symbols)) + ";")
    if automaton.states:
        lines.append("STATES " + " ".join(sorted(automaton.states)) + ";")
    if automaton.initial_state is not None:
        lines.append(f"INITIAL-STATE {automaton.initial_state};")
    if automaton.final_states:
        lines.append("FINAL-STATES " + " ".join(sorted(automaton.final_states)) + ";")

    transitions = sorted(automaton.transitions, key=lambda t: (t.source, t.symbol))
    if transitions:
        lines.append("TRANSITIONS " + ", ".join(str(t) for t in transitions) + ";")
    return lines


def write_configuration(
    automaton: Automaton,
    path: Union[str, Path],
    encoding: str = "utf-8",
) -> None:
    """Write render_configuration() output to path, one line each.

    Raises:
        OSError: If the file cannot be written
    """
    with open(path, "w", encoding=encoding) as f:
        for line in render_configuration(automaton):
            f.write(line + "\n")
