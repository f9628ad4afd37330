from __future__ import annotations

import logging
from typing import List, Optional, Protocol


class DiagnosticSink(Protocol):
    """Receives human-readable warnings produced while importing configuration values."""

    def warning(self, message: str) -> None:
        ...


class LoggingDiagnosticSink:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def warning(self, message: str) -> None:
        self._logger.warning("%s", message)


class RecordingDiagnosticSink:
    """Keeps every message, optionally passing it on to another sink."""

    def __init__(self, forward_to: Optional[DiagnosticSink] = None) -> None:
        self.messages: List[str] = []
        self._forward_to = forward_to

    def warning(self, message: str) -> None:
        self.messages.append(message)
        if self._forward_to is not None:
            self._forward_to.warning(message)

    def clear(self) -> None:
        self.messages.clear()


def open_failed(path: object) -> str:
    return f"could not open {path} for reading"


def redefinition(name: str, previous: str) -> str:
    return f"redefinition of {name}, overriding {previous}"


def import_failed(name: str, path: object) -> str:
    return f"failed to import {name} from {path}"
