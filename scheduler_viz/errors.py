from __future__ import annotations

from typing import Optional


class SchedulerError(Exception):
    """Base class for recoverable scheduler errors."""


class InvalidInputError(SchedulerError, ValueError):
    """
    A process field, quantum, algorithm name or workload entry was rejected.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class EmptyRosterError(SchedulerError):
    def __init__(self, message: str = "no processes to schedule") -> None:
        super().__init__(message)


class UnknownProcessError(SchedulerError, LookupError):
    def __init__(self, pid: str) -> None:
        super().__init__(f"unknown process '{pid}'")
        self.pid = pid
