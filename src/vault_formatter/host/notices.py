from __future__ import annotations

import logging
import sys
from typing import Optional, Protocol, TextIO


class Notifier(Protocol):
    def notify(self, message: str, *, error: bool = False) -> None:
        """Show a transient, user-visible notice."""


class LogNotifier:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("vault_formatter.notices")

    def notify(self, message: str, *, error: bool = False) -> None:
        if error:
            self._logger.error("%s", message)
        else:
            self._logger.info("%s", message)


class StreamNotifier:
    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    def notify(self, message: str, *, error: bool = False) -> None:
        stream = self._stream or sys.stderr
        prefix = "error: " if error else ""
        stream.write(f"{prefix}{message}\n")
        stream.flush()
