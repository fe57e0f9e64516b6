"""
Session log sink.

Mirrors entered commands and every output line to a file. Backed by a
logging.FileHandler opened in truncate mode; each record is flushed as it
is written. At most one file is open at a time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class LogSink:
    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._handler: Optional[logging.FileHandler] = None
        self._path: Optional[Path] = None

    @property
    def active(self) -> bool:
        return self._handler is not None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def open(self, path: Union[str, Path]) -> None:
        """
        Start logging to path, truncating it.

        Any open file is closed first, even if opening the new one fails.

        Raises:
            OSError: If the file cannot be created.
        """
        self.close()
        handler = logging.FileHandler(path, mode="w", encoding=self.encoding)
        handler.setFormatter(logging.Formatter("%(message)s"))
        self._handler = handler
        self._path = Path(path)
        logger.debug("session log opened: %s", path)

    def close(self) -> None:
        if self._handler is None:
            return
        self._handler.close()
        logger.debug("session log closed: %s", self._path)
        self._handler = None
        self._path = None

    def write(self, line: str) -> None:
        """Append one line; no-op when no file is open."""
        if self._handler is None:
            return
        record = logging.makeLogRecord({"msg": line, "levelno": logging.INFO, "levelname": "INFO"})
        self._handler.handle(record)

    def __enter__(self) -> LogSink:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
