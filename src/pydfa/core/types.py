"""
Core types for pydfa: symbol and state canonicalisation, Transition.

Pure data helpers with validation. No automaton logic.
"""

import re
from dataclasses import dataclass


SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9]$")
STATE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9]+$")

# Trailing punctuation a tokenizer may leave on a name ("s1;" or "s1,").
_TRAILING_PUNCTUATION = ";,"


def is_symbol(token: str) -> bool:
    """True if token is exactly one ASCII letter or digit."""
    return bool(SYMBOL_PATTERN.match(token))


def is_state_name(token: str) -> bool:
    """True if token is a non-empty run of ASCII letters and digits."""
    return bool(STATE_NAME_PATTERN.match(token))


def strip_punctuation(token: str) -> str:
    return token.rstrip(_TRAILING_PUNCTUATION)


def canonical_symbol(char: str) -> str:
    """
    Canonicalise a symbol to its uppercase form.

    Raises:
        ValueError: If char is not a single alphanumeric character.
    """
    if not is_symbol(char):
        raise ValueError(f"symbol must be a single alphanumeric character, got {char!r}")
    return char.upper()


def canonical_name(name: str) -> str:
    """
    Canonicalise a state name to its uppercase form.

    Raises:
        ValueError: If name is empty or not alphanumeric.
    """
    if not is_state_name(name):
        raise ValueError(f"state name must be alphanumeric, got {name!r}")
    return name.upper()


@dataclass(frozen=True)
class Transition:
    """
    Transition: deterministic edge (symbol, source) -> target.

    Immutable: all three fields are canonicalised on construction, so two
    transitions written with different letter case compare equal.
    """

    symbol: str
    source: str
    target: str

    def __post_init__(self):
        """Canonicalise symbol and state names."""
        # Use object.__setattr__ because this is frozen dataclass
        object.__setattr__(self, "symbol", canonical_symbol(self.symbol))
        object.__setattr__(self, "source", canonical_name(self.source))
        object.__setattr__(self, "target", canonical_name(self.target))

    @property
    def key(self) -> tuple[str, str]:
        """(symbol, source) pair; at most one transition per key."""
        return (self.symbol, self.source)

    def __str__(self) -> str:
        return f"{self.symbol} {self.source} {self.target}"
