"""
Interpreter configuration.

Plain validated dataclass; the CLI fills it from command-line arguments.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_COMPILE_PATTERN = r"^[A-Za-z0-9._-]+\.(fsm|bin)$"


@dataclass
class InterpreterConfig:
    """Settings shared by the interpreter, the file formats and the REPL."""

    prompt: str = "? "
    binary_suffixes: tuple = (".bin", ".fsm")
    compile_pattern: str = DEFAULT_COMPILE_PATTERN
    comment_prefix: str = "#"
    encoding: str = "utf-8"
    work_dir: Optional[Path] = None

    def __post_init__(self):
        """Validate InterpreterConfig constraints."""
        self.binary_suffixes = tuple(self.binary_suffixes)
        if not self.binary_suffixes:
            raise ValueError("binary_suffixes must not be empty")
        for suffix in self.binary_suffixes:
            if not suffix.startswith(".") or suffix != suffix.lower():
                raise ValueError(f"binary suffix must be lowercase and start with '.': {suffix!r}")

        try:
            re.compile(self.compile_pattern)
        except re.error as exc:
            raise ValueError(f"compile_pattern is not a valid regex: {exc}") from exc

        if not self.comment_prefix:
            raise ValueError("comment_prefix must not be empty")
        if ";" in self.comment_prefix:
            raise ValueError("comment_prefix must not contain the statement separator")

        if self.work_dir is not None:
            self.work_dir = Path(self.work_dir)

    def resolve(self, filename: str) -> Path:
        """Resolve filename against work_dir (absolute paths are kept)."""
        path = Path(filename)
        if self.work_dir is None or path.is_absolute():
            return path
        return self.work_dir / path

    def is_binary(self, filename: str) -> bool:
        return filename.lower().endswith(self.binary_suffixes)

    def is_compile_target(self, filename: str) -> bool:
        return re.match(self.compile_pattern, filename) is not None
