"""Request and response models of the chat controllers."""

from typing import List, Optional

from pydantic import BaseModel, Field

from nexus.models.message_models import AgentMode, Message


class CreateSessionRequest(BaseModel):
    """Body of the session creation endpoint."""

    mode: Optional[AgentMode] = Field(
        default=None, description="Initial agent mode (orchestrator when omitted)."
    )


class SendMessageRequest(BaseModel):
    """A user turn: text and an optional image attachment."""

    prompt: str = Field(default="", description="Text typed by the user.")
    attachment: Optional[str] = Field(
        default=None,
        description="Attached image as a data: URI (data:image/png;base64,...).",
    )


class ChangeModeRequest(BaseModel):
    """Body of the mode switch endpoint."""

    mode: AgentMode = Field(..., description="Agent mode to switch to.")


class SessionResponse(BaseModel):
    """Data model for a session and its history."""

    session_id: str = Field(..., description="Identifier of the chat session.")
    mode: AgentMode = Field(..., description="Current agent mode.")
    messages: List[Message] = Field(..., description="Conversation history, oldest first.")


class TurnResponse(BaseModel):
    """Data model for the result of one turn."""

    user_message: Message = Field(..., description="The recorded user message.")
    reply: Message = Field(..., description="The normalized reply of the agents.")
