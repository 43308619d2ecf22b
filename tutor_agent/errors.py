"""
Exception types for the tutor agent worker.

Configuration problems are fatal at process start. Bootstrap errors are
fatal for a single job and are reported by the LiveKit worker. Topic lookup
errors never leave the topic store.
"""

from typing import List, Optional


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = list(missing or [])
        if self.missing:
            message = f"{message}: {', '.join(self.missing)}"
        super().__init__(message)


class BootstrapError(Exception):
    """
    Base class for fatal per-job bootstrap failures.

    Carries the room name and the bootstrap state that was reached
    before the failure, so the worker log says how far the job got.
    """

    def __init__(self, message: str, room_name: Optional[str] = None, state=None):
        self.room_name = room_name
        self.state = state
        super().__init__(message)


class TransportError(BootstrapError):
    """The job context could not connect to its room."""


class ParticipantTimeoutError(BootstrapError):
    """No remote participant joined before the configured deadline."""

    def __init__(self, room_name: str, timeout: float, state=None):
        self.timeout = timeout
        super().__init__(
            f"No participant joined room {room_name!r} within {timeout:g}s",
            room_name=room_name,
            state=state,
        )


class SessionStartError(BootstrapError):
    """The realtime agent session failed to start."""


class TopicLookupError(Exception):
    """Raised by the topic store when the datastore call fails."""


class ToolError(Exception):
    """Raised for tool registration and invocation problems."""
