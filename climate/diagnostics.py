"""
Ferncast — climate/diagnostics.py
Injectable diagnostic sinks for verbose narration.
"""

from __future__ import annotations

import sys
from typing import List, Protocol


class DiagnosticSink(Protocol):
    def log(self, message: str) -> None: ...


class StderrSink:
    """Writes '[tag] message' lines to stderr."""

    def __init__(self, tag: str = "Ferncast") -> None:
        self.tag = tag

    def log(self, message: str) -> None:
        print(f"[{self.tag}] {message}", file=sys.stderr)


class MemorySink:
    """Keeps every line in order. Used by tests and the command-line runner."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def log(self, message: str) -> None:
        self.lines.append(message)


class NullSink:
    def log(self, message: str) -> None:
        pass
