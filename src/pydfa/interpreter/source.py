"""
Definition source: turn raw text lines into logical commands.

A command ends at the statement separator `;` and may span several lines;
one line may also hold several commands. Text after the comment prefix is
ignored and blank segments are dropped.
"""

from __future__ import annotations

from typing import Iterable, Iterator

SEPARATOR = ";"


class CommandAssembler:
    """Accumulates lines until a separator completes a command."""

    def __init__(self, comment_prefix: str = "#") -> None:
        self.comment_prefix = comment_prefix
        self._buffer: list[str] = []

    @property
    def pending(self) -> str:
        """Unterminated text collected so far."""
        return " ".join(self._buffer)

    def feed(self, line: str, line_number: int) -> list[tuple[int, str]]:
        """
        Consume one raw line.

        Returns:
            Completed (line_number, command) pairs, in order. The line number
            is the one holding the separator. Commands are returned without
            the separator.
        """
        content = line.split(self.comment_prefix, 1)[0]
        *complete, rest = content.split(SEPARATOR)

        commands: list[tuple[int, str]] = []
        for segment in complete:
            self._append(segment)
            command = self.pending
            self._buffer.clear()
            if command:
                commands.append((line_number, command))

        self._append(rest)
        return commands

    def reset(self) -> None:
        self._buffer.clear()

    def _append(self, segment: str) -> None:
        segment = segment.strip()
        if segment:
            self._buffer.append(segment)


def iter_commands(
    lines: Iterable[str],
    start: int = 1,
    comment_prefix: str = "#",
) -> Iterator[tuple[int, str]]:
    """Yield (line_number, command) for every terminated command in lines."""
    assembler = CommandAssembler(comment_prefix)
    for line_number, line in enumerate(lines, start=start):
        yield from assembler.feed(line, line_number)
