"""
OpenAI realtime model and LiveKit agent session wiring.

The bootstrapper only sees ``RealtimeSessionFactory`` and
``ConversationSession``; everything LiveKit-specific stays in this module.
"""

import logging
from typing import Any, List, Optional

from livekit import rtc
from livekit.agents import Agent, AgentSession, RoomInputOptions
from livekit.plugins import openai

from .config import WorkerSettings

logger = logging.getLogger(__name__)

ASSISTANT = "assistant"
USER = "user"


class ConversationSession:
    """A started agent session and the agent whose chat log it drives."""

    def __init__(self, session: AgentSession, agent: Agent):
        self.session = session
        self.agent = agent

    async def append_message(self, role: str, text: str) -> None:
        """Append one message to the conversation log.

        The updated context is pushed to the realtime model, which creates the
        matching conversation item on the provider side.
        """
        chat_ctx = self.agent.chat_ctx.copy()
        chat_ctx.add_message(role=role, content=text)
        await self.agent.update_chat_ctx(chat_ctx)

    def request_response(self) -> Any:
        """Ask the model to speak now; returns the LiveKit speech handle."""
        return self.session.generate_reply()


class RealtimeSessionFactory:
    def __init__(self, settings: Optional[WorkerSettings] = None):
        self.settings = settings or WorkerSettings()

    def create_model(self, instructions: str) -> openai.realtime.RealtimeModel:
        """Build the realtime model; instructions are applied through the agent."""
        kwargs = {}
        if self.settings.realtime_model:
            kwargs["model"] = self.settings.realtime_model
        if self.settings.voice:
            kwargs["voice"] = self.settings.voice
        if self.settings.temperature is not None:
            kwargs["temperature"] = self.settings.temperature
        logger.debug(f"Creating realtime model with {kwargs or 'defaults'}")
        return openai.realtime.RealtimeModel(**kwargs)

    async def start(self,
                    model: openai.realtime.RealtimeModel,
                    instructions: str,
                    tools: List[Any],
                    room: rtc.Room,
                    participant: rtc.RemoteParticipant) -> ConversationSession:
        agent = Agent(instructions=instructions, tools=tools)
        session = AgentSession(llm=model)
        await session.start(
            agent=agent,
            room=room,
            room_input_options=RoomInputOptions(participant_identity=participant.identity),
        )
        return ConversationSession(session, agent)
