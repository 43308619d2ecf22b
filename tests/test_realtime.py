from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from tutor_agent.config import WorkerSettings
from tutor_agent.realtime import ASSISTANT, ConversationSession, RealtimeSessionFactory


@pytest.mark.asyncio
class TestConversationSession:

    async def test_append_message_pushes_updated_context(self):
        agent = MagicMock()
        agent.update_chat_ctx = AsyncMock()
        conversation = ConversationSession(Mock(), agent)

        await conversation.append_message(ASSISTANT, "What subject would you like to dive into today?")

        chat_ctx = agent.chat_ctx.copy.return_value
        chat_ctx.add_message.assert_called_once_with(
            role="assistant", content="What subject would you like to dive into today?"
        )
        agent.update_chat_ctx.assert_awaited_once_with(chat_ctx)

    async def test_request_response_generates_one_reply(self):
        session = Mock()
        conversation = ConversationSession(session, MagicMock())

        handle = conversation.request_response()

        session.generate_reply.assert_called_once_with()
        assert handle is session.generate_reply.return_value


class TestRealtimeSessionFactory:

    def test_create_model_with_defaults(self):
        with patch("tutor_agent.realtime.openai.realtime.RealtimeModel") as model_cls:
            model = RealtimeSessionFactory().create_model("be a tutor")

        model_cls.assert_called_once_with()
        assert model is model_cls.return_value

    def test_create_model_with_overrides(self):
        settings = WorkerSettings(realtime_model="gpt-realtime", voice="alloy", temperature=0.7)
        with patch("tutor_agent.realtime.openai.realtime.RealtimeModel") as model_cls:
            RealtimeSessionFactory(settings).create_model("be a tutor")

        model_cls.assert_called_once_with(model="gpt-realtime", voice="alloy", temperature=0.7)

    @pytest.mark.asyncio
    async def test_start_binds_participant(self):
        participant = Mock()
        participant.identity = "student-1"
        room = Mock()
        model = Mock()

        with patch("tutor_agent.realtime.Agent") as agent_cls, \
                patch("tutor_agent.realtime.AgentSession") as session_cls, \
                patch("tutor_agent.realtime.RoomInputOptions") as options_cls:
            session_cls.return_value.start = AsyncMock()
            conversation = await RealtimeSessionFactory().start(
                model, "be a tutor", [], room, participant
            )

        agent_cls.assert_called_once_with(instructions="be a tutor", tools=[])
        session_cls.assert_called_once_with(llm=model)
        options_cls.assert_called_once_with(participant_identity="student-1")
        session_cls.return_value.start.assert_awaited_once_with(
            agent=agent_cls.return_value,
            room=room,
            room_input_options=options_cls.return_value,
        )
        assert conversation.agent is agent_cls.return_value
        assert conversation.session is session_cls.return_value
