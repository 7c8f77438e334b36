"""
TXR Diagnostics
===============

Last-error bookkeeping for compile-and-run calls.

Each ``Compiler`` owns a ``DiagnosticState``. The module-level
``txr.compile_and_run`` helper uses a per-thread state, read back with
``last_error()``, so concurrent callers never observe each other's
failures.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from txr.errors import SourcePosition, TxrError


@dataclass(frozen=True)
class Diagnostic:
    """
    A recorded failure.

    Attributes:
        message: Human-readable description, without position
        position: Source anchor (offset or '<EOF>'), if known
    """
    message: str
    position: Optional[SourcePosition] = None

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at position {self.position}"

    @classmethod
    def from_error(cls, error: TxrError) -> "Diagnostic":
        return cls(error.message, error.position)


class DiagnosticState:
    """
    Holds the most recent failure of one compile-and-run sequence.

    Attributes:
        last_error: The last recorded diagnostic, or None
    """

    def __init__(self):
        self.last_error: Optional[Diagnostic] = None

    def record(self, error: TxrError) -> Diagnostic:
        """Overwrite the last error with ``error`` and return the diagnostic."""
        self.last_error = Diagnostic.from_error(error)
        return self.last_error

    def clear(self) -> None:
        self.last_error = None

    @property
    def has_error(self) -> bool:
        return self.last_error is not None


_thread_state = threading.local()


def thread_state() -> DiagnosticState:
    """Diagnostic state of the calling thread, created on first use."""
    state = getattr(_thread_state, "diagnostics", None)
    if state is None:
        state = DiagnosticState()
        _thread_state.diagnostics = state
    return state


def last_error() -> Optional[Diagnostic]:
    """Diagnostic from the calling thread's last ``txr.compile_and_run``."""
    return thread_state().last_error
