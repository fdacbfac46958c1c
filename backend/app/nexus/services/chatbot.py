"""Run chat turns: record the user message, ask the agents, record the reply."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Tuple

from fastapi import Depends

from nexus.agents.graph_agents import AgentDispatcher, build_dispatcher
from nexus.agents.lib_agent.utils.gemini_llm import GeminiLLM
from nexus.agents.specialists import attachment_data_uri
from nexus.configs import get_settings
from nexus.models.message_models import (
    AgentMode,
    Message,
    MessageRole,
    MessageType,
    build_message,
)
from nexus.services.chat_sessions import (
    ChatSession,
    ChatSessionService,
    get_chat_session_service,
)


class ChatBot:
    """Handle conversations between a user and the agent hub."""

    def __init__(
        self, dispatcher: AgentDispatcher, session_service: ChatSessionService
    ) -> None:
        self.dispatcher = dispatcher
        self.session_service = session_service

    def run(
        self, session_id: str, prompt: str, attachment: Optional[str] = None
    ) -> Tuple[Message, Message]:
        """Execute one turn and return the user message and the reply."""
        if not prompt.strip() and not attachment:
            raise ValueError("A message needs text or an attached image.")

        user_message = self._user_message(prompt, attachment)
        session = self.session_service.get(session_id)
        session.begin_turn()
        try:
            history = session.memory.snapshot()
            session.memory.add(user_message)

            reply = self.dispatcher.respond(prompt, session.mode, history, attachment)
            session.memory.add(reply)
        finally:
            session.end_turn()

        return user_message, reply

    def change_mode(self, session_id: str, mode: AgentMode) -> Tuple[ChatSession, Message]:
        """Switch the mode of a session."""
        session = self.session_service.get(session_id)
        notice = session.set_mode(mode)
        return session, notice

    def _user_message(self, prompt: str, attachment: Optional[str]) -> Message:
        """User text, shown with its image when one was attached."""
        if attachment:
            return build_message(
                MessageRole.USER,
                MessageType.IMAGE,
                prompt,
                image_url=attachment_data_uri(attachment),
            )
        return build_message(MessageRole.USER, MessageType.TEXT, prompt)


@lru_cache
def get_dispatcher() -> AgentDispatcher:
    """Build the dispatcher around a single Gemini client, once per process."""
    settings = get_settings()
    llm = GeminiLLM(api_key=settings.GEMINI_API_KEY)
    return build_dispatcher(
        llm,
        settings.specialists_config(),
        settings.missing_payload_policies(),
    )


def get_chatbot(
    dispatcher: AgentDispatcher = Depends(get_dispatcher),
    session_service: ChatSessionService = Depends(get_chat_session_service),
) -> ChatBot:
    """FastAPI dependency that wires the chatbot with the shared dispatcher."""
    return ChatBot(dispatcher, session_service)
