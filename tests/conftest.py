import logging
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from tutor_agent.topics import TopicStore


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


def make_supabase_client(rows=None, error=None):
    """Mock supabase client answering the topics query with `rows` or raising `error`."""
    client = MagicMock()
    execute = client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute
    if error is not None:
        execute.side_effect = error
    else:
        execute.return_value = Mock(data=rows or [])
    return client


@pytest.fixture
def topic_store_for():
    def _build(rows=None, error=None):
        return TopicStore(make_supabase_client(rows=rows, error=error))
    return _build


class FakeConversation:
    def __init__(self, events):
        self.events = events
        self.messages = []
        self.response_requests = 0

    async def append_message(self, role, text):
        self.events.append(("append_message", role, text))
        self.messages.append((role, text))

    def request_response(self):
        self.events.append(("request_response",))
        self.response_requests += 1


class FakeSessionFactory:
    """Stands in for RealtimeSessionFactory and records every call in order."""

    def __init__(self, start_error=None):
        self.events = []
        self.start_error = start_error
        self.instructions = None
        self.started_with = None
        self.conversation = FakeConversation(self.events)

    def create_model(self, instructions):
        self.events.append(("create_model",))
        self.instructions = instructions
        return Mock(name="realtime_model")

    async def start(self, model, instructions, tools, room, participant):
        self.events.append(("start",))
        if self.start_error is not None:
            raise self.start_error
        self.started_with = dict(
            model=model, instructions=instructions, tools=tools, room=room, participant=participant
        )
        return self.conversation


@pytest.fixture
def session_factory():
    return FakeSessionFactory()


@pytest.fixture
def participant():
    participant = Mock()
    participant.identity = "student-1"
    return participant


@pytest.fixture
def job_context(participant):
    """Mock JobContext for a room named room-42."""
    ctx = MagicMock()
    ctx.room.name = "room-42"
    ctx.connect = AsyncMock()
    ctx.wait_for_participant = AsyncMock(return_value=participant)
    ctx.proc.userdata = {}
    return ctx
