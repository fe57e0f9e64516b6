"""
Execution engine: run input strings through an Automaton.

The automaton is compiled into a dense transition matrix
(symbol index x state index -> target index, -1 where no transition
exists) and a boolean final-state mask. Execution is a pure read of the
model; the same input always produces the same trace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from pydfa.core.automaton import Automaton

NO_TRANSITION = -1

ACCEPT_TOKEN = "YES"
REJECT_TOKEN = "NO"


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running one input string."""

    trace: tuple[str, ...]
    accepted: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        if self.error is not None:
            return f"Error: {self.error}"
        verdict = ACCEPT_TOKEN if self.accepted else REJECT_TOKEN
        return " ".join(self.trace + (verdict,))


class TransitionMatrix:
    """Dense, read-only compilation of an automaton's transition table."""

    def __init__(self, automaton: Automaton) -> None:
        if automaton.initial_state is None:
            raise ValueError("automaton has no initial state")

        self.states: tuple[str, ...] = automaton.states
        self.symbols: tuple[str, ...] = automaton.symbols
        self._state_index = {state: idx for idx, state in enumerate(self.states)}
        self._symbol_index = {symbol: idx for idx, symbol in enumerate(self.symbols)}
        self.initial_index = self._state_index[automaton.initial_state]

        table = np.full((len(self.symbols), len(self.states)), NO_TRANSITION, dtype=np.int64)
        for transition in automaton.transitions:
            row = self._symbol_index[transition.symbol]
            col = self._state_index[transition.source]
            table[row, col] = self._state_index[transition.target]
        table.flags.writeable = False
        self.table = table

        final_mask = np.zeros(len(self.states), dtype=bool)
        for state in automaton.final_states:
            final_mask[self._state_index[state]] = True
        final_mask.flags.writeable = False
        self.final_mask = final_mask

    def run(self, text: str) -> ExecutionResult:
        current = self.initial_index
        visited = [current]

        for char in text:
            row = self._symbol_index.get(char.upper())
            if row is None:
                return ExecutionResult(trace=(), error=f"invalid symbol {char}")

            target = int(self.table[row, current])
            if target == NO_TRANSITION:
                return ExecutionResult(
                    trace=(),
                    error=f"no transition for {char} in state {self.states[current]}",
                )
            current = target
            visited.append(current)

        return ExecutionResult(
            trace=tuple(self.states[idx] for idx in visited),
            accepted=bool(self.final_mask[current]),
        )


def run(automaton: Automaton, text: str) -> ExecutionResult:
    """
    Walk the transition table from the initial state.

    Args:
        automaton: Automaton to execute. Must have an initial state.
        text: Input symbols, one character each, case-insensitive.

    Returns:
        ExecutionResult with the visited states (initial state first) and
        the acceptance verdict, or with an error for an undeclared symbol
        or a missing transition.

    Raises:
        ValueError: If the automaton has no initial state.
    """
    return TransitionMatrix(automaton).run(text)


def execute(automaton: Automaton, text: str) -> str:
    """Run text and render the result as `S0 S1 ... YES|NO` or `Error: ...`."""
    return str(run(automaton, text))
