"""Interfaces for the polling module's output collaborators."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConsoleOutput(Protocol):
    """Protocol for user-facing console lines, one method per presentation class."""

    def info(self, msg: str) -> None: ...

    def success(self, msg: str) -> None: ...

    def err(self, msg: str) -> None: ...

    def warning(self, msg: str) -> None: ...

    def canceled(self, msg: str) -> None: ...


@runtime_checkable
class OutputSink(Protocol):
    """Protocol for structured outputs handed back to the CI caller."""

    def set_output(self, name: str, value: str) -> None:
        """Publish a named output value.

        Args:
            name: Output name, e.g. ``MAESTRO_CLOUD_UPLOAD_STATUS``.
            value: String value; structured data is passed as JSON.
        """
        ...
