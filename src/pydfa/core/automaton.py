"""
Automaton model: symbols, states, initial state, final states, transitions.

Structural queries and mutations only. Every mutation keeps the model
consistent:
- Symbols are single uppercase alphanumeric characters
- State names are unique after uppercasing
- Final states and the initial state are declared states
- Transitions reference declared symbols and states
- At most one transition per (symbol, source); a new one replaces the old
"""

from __future__ import annotations

from typing import Iterable, Optional

from pydfa.core.types import Transition, canonical_name


class Automaton:
    """Deterministic finite automaton built up incrementally."""

    def __init__(self) -> None:
        self._symbols: dict[str, None] = {}
        self._states: list[str] = []
        self._initial_state: Optional[str] = None
        self._final_states: dict[str, None] = {}
        self._transitions: dict[tuple[str, str], Transition] = {}

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def symbols(self) -> tuple[str, ...]:
        """Declared symbols in declaration order."""
        return tuple(self._symbols)

    @property
    def states(self) -> tuple[str, ...]:
        """Declared state names in declaration order."""
        return tuple(self._states)

    @property
    def initial_state(self) -> Optional[str]:
        return self._initial_state

    @property
    def final_states(self) -> frozenset[str]:
        return frozenset(self._final_states)

    @property
    def transitions(self) -> tuple[Transition, ...]:
        """Transitions in insertion order (a replaced one moves to the end)."""
        return tuple(self._transitions.values())

    @property
    def is_empty(self) -> bool:
        return not (
            self._symbols
            or self._states
            or self._final_states
            or self._transitions
            or self._initial_state is not None
        )

    def has_symbol(self, symbol: str) -> bool:
        return symbol.upper() in self._symbols

    def has_state(self, name: str) -> bool:
        return name.upper() in self._states

    def is_final(self, name: str) -> bool:
        return name.upper() in self._final_states

    def transition_for(self, symbol: str, source: str) -> Optional[Transition]:
        return self._transitions.get((symbol.upper(), source.upper()))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_symbols(self, chars: Iterable[str]) -> None:
        """
        Add every alphanumeric character of chars to the symbol set.

        Each item may hold several characters; all of them are considered.
        Non-alphanumeric characters are discarded and duplicates ignored.
        """
        for token in chars:
            for char in token:
                if char.isascii() and char.isalnum():
                    self._symbols.setdefault(char.upper(), None)

    def add_states(self, names: Iterable[str]) -> None:
        """
        Append states not declared yet.

        The first state ever added becomes the initial state unless one is
        already set.

        Raises:
            ValueError: If a name is not alphanumeric.
        """
        for name in names:
            self._ensure_state(canonical_name(name))

    def set_initial_state(self, name: str) -> None:
        """Set the initial state, declaring it first if needed."""
        state = canonical_name(name)
        self._ensure_state(state)
        self._initial_state = state

    def add_final_states(self, names: Iterable[str]) -> None:
        """Mark states as final, declaring any that do not exist yet."""
        for name in names:
            state = canonical_name(name)
            self._ensure_state(state)
            self._final_states.setdefault(state, None)

    def add_transitions(self, transitions: Iterable[Transition]) -> None:
        """
        Insert transitions, replacing any existing one with the same key.

        Raises:
            ValueError: If a transition references an undeclared symbol or
                state. Transitions before the offending one stay applied.
        """
        for transition in transitions:
            self._validate_transition(transition)
            self._transitions.pop(transition.key, None)
            self._transitions[transition.key] = transition

    def clear(self) -> None:
        """Remove everything, including the initial state."""
        self._symbols.clear()
        self._states.clear()
        self._initial_state = None
        self._final_states.clear()
        self._transitions.clear()

    def replace(self, other: Automaton) -> None:
        """Take over all collections of other in one step."""
        (
            self._symbols,
            self._states,
            self._initial_state,
            self._final_states,
            self._transitions,
        ) = (
            dict(other._symbols),
            list(other._states),
            other._initial_state,
            dict(other._final_states),
            dict(other._transitions),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_state(self, state: str) -> None:
        if state in self._states:
            return
        self._states.append(state)
        if self._initial_state is None:
            self._initial_state = state

    def _validate_transition(self, transition: Transition) -> None:
        if transition.symbol not in self._symbols:
            raise ValueError(f"transition references unknown symbol: {transition.symbol}")
        if transition.source not in self._states:
            raise ValueError(f"transition references unknown state: {transition.source}")
        if transition.target not in self._states:
            raise ValueError(f"transition has unknown target: {transition.target}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Automaton):
            return NotImplemented
        return (
            self.symbols == other.symbols
            and self.states == other.states
            and self.initial_state == other.initial_state
            and self.final_states == other.final_states
            and self._transitions == other._transitions
        )

    def __repr__(self) -> str:
        return (
            f"Automaton(symbols={list(self.symbols)}, states={list(self.states)}, "
            f"initial_state={self.initial_state!r}, "
            f"final_states={sorted(self.final_states)}, "
            f"transitions={len(self._transitions)})"
        )
