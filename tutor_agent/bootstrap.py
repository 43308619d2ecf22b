"""
Session bootstrapper.

Runs once per dispatched job, in strict order:

1. connect the job context to its room
2. look up the room's topic (best effort)
3. wait for a remote participant
4. build the instructions prompt from the topic
5. create the realtime model with the tool registry
6. start the agent session for that participant
7. seed one assistant message into the conversation
8. request one spoken response

Steps 1, 3 and 6 are fatal on failure. Step 2 never is.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from livekit.agents import JobContext

from .errors import (
    BootstrapError,
    ParticipantTimeoutError,
    SessionStartError,
    TransportError,
)
from .logging_config import bootstrap_metrics
from .prompts import build_instructions, initial_message
from .realtime import ASSISTANT, RealtimeSessionFactory
from .tools import ToolRegistry
from .topics import TopicContext, TopicStore

logger = logging.getLogger(__name__)


class BootstrapState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    TOPIC_RESOLVED = "topic_resolved"
    PARTICIPANT_PRESENT = "participant_present"
    SESSION_STARTED = "session_started"
    MESSAGE_SEEDED = "message_seeded"
    RESPONSE_REQUESTED = "response_requested"
    FAILED = "failed"


@dataclass
class BootstrapResult:
    room_name: str
    topic: TopicContext
    participant_identity: str
    instructions: str
    initial_message: str


class SessionBootstrapper:
    """Bootstraps one tutoring session; create a new instance per job."""

    def __init__(self,
                 topic_store: TopicStore,
                 session_factory: RealtimeSessionFactory,
                 tools: Optional[ToolRegistry] = None,
                 participant_timeout: Optional[float] = None):
        self.topic_store = topic_store
        self.session_factory = session_factory
        self.tools = tools if tools is not None else ToolRegistry()
        self.participant_timeout = participant_timeout
        self.state = BootstrapState.DISCONNECTED
        self.room_name: Optional[str] = None

    def _transition(self, state: BootstrapState, **context):
        previous = self.state
        self.state = state
        bootstrap_metrics.log_state(
            self.room_name or "unknown",
            state.value,
            previous_state=previous.value,
            **context
        )

    def _fail(self, error_cls, message: str, cause: BaseException):
        reached = self.state
        self._transition(BootstrapState.FAILED, error=str(cause))
        raise error_cls(message, room_name=self.room_name, state=reached) from cause

    async def _wait_for_participant(self, ctx: JobContext):
        if self.participant_timeout is None:
            return await ctx.wait_for_participant()
        try:
            return await asyncio.wait_for(ctx.wait_for_participant(), self.participant_timeout)
        except asyncio.TimeoutError as e:
            reached = self.state
            self._transition(BootstrapState.FAILED, error="participant timeout")
            raise ParticipantTimeoutError(
                self.room_name, self.participant_timeout, state=reached
            ) from e

    async def run(self, ctx: JobContext) -> BootstrapResult:
        if self.state is not BootstrapState.DISCONNECTED:
            raise BootstrapError(
                f"Bootstrapper already ran (state: {self.state.value})",
                room_name=self.room_name,
                state=self.state,
            )
        started = time.perf_counter()

        try:
            await ctx.connect()
        except Exception as e:
            self._fail(TransportError, f"Failed to connect to room: {e}", e)
        self.room_name = ctx.room.name
        self._transition(BootstrapState.CONNECTED)

        topic = await self.topic_store.resolve(self.room_name)
        self._transition(BootstrapState.TOPIC_RESOLVED, has_topic=topic.has_topic)

        logger.info("waiting for participant")
        participant = await self._wait_for_participant(ctx)
        self._transition(BootstrapState.PARTICIPANT_PRESENT, participant=participant.identity)
        logger.info(f"starting tutor agent for {participant.identity}")

        instructions = build_instructions(topic)
        model = self.session_factory.create_model(instructions)

        try:
            conversation = await self.session_factory.start(
                model,
                instructions,
                self.tools.as_function_tools(),
                ctx.room,
                participant,
            )
        except Exception as e:
            self._fail(SessionStartError, f"Failed to start agent session: {e}", e)
        self._transition(BootstrapState.SESSION_STARTED)

        message = initial_message(topic)
        await conversation.append_message(ASSISTANT, message)
        self._transition(BootstrapState.MESSAGE_SEEDED)

        conversation.request_response()
        self._transition(BootstrapState.RESPONSE_REQUESTED)

        bootstrap_metrics.log_session_event(
            "bootstrap_complete",
            self.room_name,
            duration=time.perf_counter() - started,
            has_topic=topic.has_topic,
        )
        return BootstrapResult(
            room_name=self.room_name,
            topic=topic,
            participant_identity=participant.identity,
            instructions=instructions,
            initial_message=message,
        )
