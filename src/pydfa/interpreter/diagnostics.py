"""
Messages emitted by the interpreter: normal output, warnings and errors.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Severity(enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """One line of interpreter output."""

    severity: Severity
    text: str
    line: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def render(self) -> str:
        if self.severity is Severity.INFO:
            return self.text
        label = "Error" if self.is_error else "Warning"
        if self.line is None:
            return f"{label}: {self.text}"
        return f"{label} (line {self.line}): {self.text}"

    def __str__(self) -> str:
        return self.render()


def info(text: str) -> Message:
    return Message(Severity.INFO, text)


def warning(text: str, line: Optional[int] = None) -> Message:
    return Message(Severity.WARNING, text, line)


def error(text: str, line: Optional[int] = None) -> Message:
    return Message(Severity.ERROR, text, line)
