"""Automaton snapshots (save/load via numpy .npz, no pickled objects)."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import Union

import numpy as np

from pydfa.core.automaton import Automaton
from pydfa.core.types import Transition, is_symbol

logger = logging.getLogger(__name__)

MAGIC = "pydfa-snapshot"
FORMAT_VERSION = 1

_ENTRIES = (
    "magic",
    "format_version",
    "symbols",
    "states",
    "initial_state",
    "final_states",
    "transitions",
)


class SnapshotError(ValueError):
    """Snapshot content is not a valid pydfa automaton."""


def _string_array(values) -> np.ndarray:
    return np.array(list(values), dtype=str)


def save_snapshot(automaton: Automaton, path: Union[str, Path]) -> None:
    """Save automaton to a binary snapshot.

    Captures the five collections: symbols, states (declaration order),
    initial state, final states and transitions.

    Args:
        automaton: Automaton to save
        path: File path where the snapshot will be written; the name is
            kept as given (no .npz suffix is added)

    Raises:
        OSError: If the file cannot be written
    """
    initial = [] if automaton.initial_state is None else [automaton.initial_state]
    rows = [(t.symbol, t.source, t.target) for t in automaton.transitions]

    with open(path, "wb") as f:
        np.savez(
            f,
            magic=np.array(MAGIC),
            format_version=np.array(FORMAT_VERSION, dtype=np.int64),
            symbols=_string_array(automaton.symbols),
            states=_string_array(automaton.states),
            initial_state=_string_array(initial),
            final_states=_string_array(sorted(automaton.final_states)),
            transitions=np.array(rows, dtype=str).reshape(-1, 3),
        )
    logger.debug("saved snapshot %s (%d states, %d transitions)", path, len(automaton.states), len(rows))


def load_snapshot(path: Union[str, Path]) -> Automaton:
    """Load an automaton from a binary snapshot.

    Args:
        path: File path to load from

    Returns:
        A new Automaton equal to the one that was saved

    Raises:
        FileNotFoundError: If path does not exist
        SnapshotError: If the file is not a valid snapshot
    """
    if not Path(path).exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    try:
        data = np.load(path, allow_pickle=False)
    except (zipfile.BadZipFile, EOFError, ValueError) as exc:
        raise SnapshotError(f"not a snapshot file: {path}") from exc

    # A bare .npy array loads as ndarray, not as an archive.
    if not hasattr(data, "files"):
        raise SnapshotError(f"not a snapshot file: {path}")

    try:
        missing = [name for name in _ENTRIES if name not in data.files]
        if missing:
            raise SnapshotError(f"snapshot missing entries: {missing}")
        arrays = {name: data[name] for name in _ENTRIES}
    except SnapshotError:
        raise
    except (zipfile.BadZipFile, ValueError) as exc:
        raise SnapshotError(f"corrupt snapshot file: {path}") from exc
    finally:
        data.close()

    automaton = _build_automaton(arrays)
    logger.debug("loaded snapshot %s (%d states)", path, len(automaton.states))
    return automaton


def _build_automaton(arrays: dict[str, np.ndarray]) -> Automaton:
    magic = arrays["magic"]
    if magic.ndim != 0 or str(magic) != MAGIC:
        raise SnapshotError("snapshot magic mismatch")
    version_array = arrays["format_version"]
    if version_array.ndim != 0 or not np.issubdtype(version_array.dtype, np.integer):
        raise SnapshotError("snapshot version must be a single integer")
    version = int(version_array)
    if version != FORMAT_VERSION:
        raise SnapshotError(f"unsupported snapshot version: {version}")

    for name in ("symbols", "states", "initial_state", "final_states"):
        if arrays[name].ndim != 1:
            raise SnapshotError(f"{name} must be one-dimensional")
    transitions = arrays["transitions"]
    if transitions.ndim != 2 or transitions.shape[1] != 3:
        raise SnapshotError("transitions must have shape (n, 3)")

    symbols = [str(s) for s in arrays["symbols"].tolist()]
    states = [str(s) for s in arrays["states"].tolist()]
    initial = [str(s) for s in arrays["initial_state"].tolist()]
    finals = [str(s) for s in arrays["final_states"].tolist()]

    if len(initial) > 1:
        raise SnapshotError("snapshot holds more than one initial state")
    if len(set(states)) != len(states):
        raise SnapshotError("snapshot holds duplicate states")
    for symbol in symbols:
        if not is_symbol(symbol) or symbol != symbol.upper():
            raise SnapshotError(f"invalid symbol in snapshot: {symbol!r}")
    for state in initial + finals:
        if state not in states:
            raise SnapshotError(f"snapshot references unknown state: {state}")

    automaton = Automaton()
    try:
        automaton.add_symbols(symbols)
        automaton.add_states(states)
        if initial:
            automaton.set_initial_state(initial[0])
        automaton.add_final_states(finals)
        automaton.add_transitions(
            Transition(str(symbol), str(source), str(target))
            for symbol, source, target in transitions.tolist()
        )
    except ValueError as exc:
        raise SnapshotError(str(exc)) from exc

    if automaton.states != tuple(states):
        raise SnapshotError("snapshot state names are not canonical")
    return automaton
