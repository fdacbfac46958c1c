"""In-process chat sessions: current mode plus conversation history."""

from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from nexus.agents.lib_agent.base_memory import Memory
from nexus.logger_config import get_logger
from nexus.models.message_models import (
    AgentMode,
    Message,
    MessageRole,
    MessageType,
    build_message,
)

logger = get_logger(__name__)

WELCOME_TEXT = (
    "Welcome to Nexus AI. I am your unified intelligence hub.\n\n"
    "I can route your requests to specialized agents:\n"
    "• Need code? I'll call the Engineer.\n"
    "• Need art? I'll call the Artist.\n"
    "• Need research? I'll search the web.\n\n"
    "Just tell me what you need."
)

MODE_LABELS: Dict[AgentMode, str] = {
    AgentMode.ORCHESTRATOR: "Orchestrator Mode: Auto-routing enabled.",
    AgentMode.CODER: "Coder Mode: Optimized for software engineering.",
    AgentMode.ARTIST: "Artist Mode: Image generation enabled.",
    AgentMode.SPEAKER: "Speaker Mode: Text-to-Speech synthesis.",
    AgentMode.ANALYST: "Analyst Mode: Vision and data analysis.",
}


class SessionNotFoundError(KeyError):
    """No session is registered under the given id."""


class TurnInProgressError(RuntimeError):
    """A turn for this session has not finished yet."""


def welcome_message() -> Message:
    return build_message(MessageRole.MODEL, MessageType.TEXT, WELCOME_TEXT)


class ChatSession:
    """One conversation: its mode, its history and a lock serializing its turns."""

    def __init__(self, session_id: str, mode: AgentMode = AgentMode.ORCHESTRATOR) -> None:
        self.id = session_id
        self.mode = mode
        self.memory = Memory(seed=[welcome_message()])
        self._turn_lock = threading.Lock()

    def set_mode(self, mode: AgentMode) -> Message:
        """Switch mode and record the switch as a system message."""
        self.mode = mode
        notice = build_message(
            MessageRole.SYSTEM, MessageType.TEXT, f"Switched to {MODE_LABELS[mode]}"
        )
        self.memory.add(notice)
        return notice

    def begin_turn(self) -> None:
        """Claim the session for one turn without waiting."""
        if not self._turn_lock.acquire(blocking=False):
            raise TurnInProgressError(f"Session {self.id} is still answering a message.")

    def end_turn(self) -> None:
        self._turn_lock.release()


class ChatSessionService:
    """Registry of live sessions; nothing survives a restart."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def create(self, mode: Optional[AgentMode] = None) -> ChatSession:
        """Open a new session, seeded with the welcome message."""
        session = ChatSession(uuid.uuid4().hex, mode or AgentMode.ORCHESTRATOR)
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Opened chat session %s in %s mode", session.id, session.mode.value)
        return session

    def get(self, session_id: str) -> ChatSession:
        """Return the session or raise SessionNotFoundError."""
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def clear(self, session_id: str) -> ChatSession:
        """Discard the history of a session."""
        session = self.get(session_id)
        session.memory.clear()
        logger.info("Cleared history of chat session %s", session_id)
        return session


_session_service = ChatSessionService()


def get_chat_session_service() -> ChatSessionService:
    """FastAPI dependency returning the process-wide session registry."""
    return _session_service
