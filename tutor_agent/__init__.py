"""Realtime voice tutor agent for LiveKit rooms."""

from .bootstrap import BootstrapResult, BootstrapState, SessionBootstrapper
from .topics import TopicContext, TopicRecord, TopicStore

__version__ = "1.0.0"

__all__ = [
    "BootstrapResult",
    "BootstrapState",
    "SessionBootstrapper",
    "TopicContext",
    "TopicRecord",
    "TopicStore",
]
