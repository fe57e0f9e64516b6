"""pydfa: define, validate and execute deterministic finite automata.

The automaton is built incrementally through a small command language
(SYMBOLS, STATES, INITIAL-STATE, FINAL-STATES, TRANSITIONS, ...), executed
against input strings, and persisted as binary snapshots or replayable text.
"""

__version__ = "0.1.0"
