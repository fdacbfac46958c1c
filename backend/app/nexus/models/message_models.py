"""Message structure shared by the agents, the chat sessions and the API."""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MessageRole(str, Enum):
    """Author of a message."""

    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


class MessageType(str, Enum):
    """Kind of payload a message carries."""

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    CODE = "code"
    ERROR = "error"


class AgentMode(str, Enum):
    """Capability selected by the user; orchestrator means automatic routing."""

    ORCHESTRATOR = "orchestrator"
    CODER = "coder"
    ARTIST = "artist"
    SPEAKER = "speaker"
    ANALYST = "analyst"


class MissingPayloadPolicy(str, Enum):
    """How a handler result without its expected payload is shown to the user."""

    NOTICE = "notice"
    ERROR = "error"


# Metadata fields each message type may carry, and the ones it must carry.
ALLOWED_METADATA: dict[MessageType, frozenset[str]] = {
    MessageType.TEXT: frozenset({"web_sources"}),
    MessageType.IMAGE: frozenset({"image_url"}),
    MessageType.AUDIO: frozenset({"audio_data", "audio_mime_type"}),
    MessageType.CODE: frozenset({"code_language"}),
    MessageType.ERROR: frozenset(),
}
REQUIRED_METADATA: dict[MessageType, frozenset[str]] = {
    MessageType.IMAGE: frozenset({"image_url"}),
    MessageType.AUDIO: frozenset({"audio_data"}),
    MessageType.CODE: frozenset({"code_language"}),
}


def now_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


class WebSource(BaseModel):
    """A search citation attached to a grounded text answer."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(..., description="Address of the cited page.")
    title: str = Field(..., description="Display title of the cited page.")


class MessageMetadata(BaseModel):
    """Variant payload of a message; which fields apply depends on the message type."""

    model_config = ConfigDict(frozen=True)

    image_url: Optional[str] = Field(
        default=None, description="data: URI of a generated or uploaded image."
    )
    audio_data: Optional[str] = Field(
        default=None, description="Base64 encoded audio payload."
    )
    audio_mime_type: Optional[str] = Field(
        default=None, description="Mime type reported for the audio payload."
    )
    code_language: Optional[str] = Field(
        default=None, description="Language tag of generated code."
    )
    web_sources: Optional[tuple[WebSource, ...]] = Field(
        default=None, description="Ordered search citations of a grounded answer."
    )

    @field_validator("image_url")
    @classmethod
    def _require_data_uri(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith("data:"):
            raise ValueError("image_url must be a data: URI")
        return value

    @field_validator("web_sources")
    @classmethod
    def _reject_empty_sources(
        cls, value: Optional[tuple[WebSource, ...]]
    ) -> Optional[tuple[WebSource, ...]]:
        if value is not None and not value:
            raise ValueError("web_sources must be omitted instead of empty")
        return value

    def present_fields(self) -> frozenset[str]:
        """Names of the fields that carry a value."""
        return frozenset(name for name, value in self if value is not None)


class Message(BaseModel):
    """Immutable chat message, created once per turn."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: MessageRole
    content: str
    type: MessageType = MessageType.TEXT
    timestamp: int = Field(default_factory=now_ms)
    metadata: Optional[MessageMetadata] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_empty_metadata(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("metadata") == {}:
            data = {key: value for key, value in data.items() if key != "metadata"}
        return data

    @model_validator(mode="after")
    def _metadata_matches_type(self) -> "Message":
        present = self.metadata.present_fields() if self.metadata else frozenset()
        unexpected = present - ALLOWED_METADATA[self.type]
        if unexpected:
            raise ValueError(
                f"metadata fields {sorted(unexpected)} do not apply to {self.type.value} messages"
            )
        missing = REQUIRED_METADATA.get(self.type, frozenset()) - present
        if missing:
            raise ValueError(
                f"{self.type.value} messages require metadata fields {sorted(missing)}"
            )
        return self


def build_message(
    role: MessageRole,
    type_: MessageType,
    content: str,
    **metadata: Any,
) -> Message:
    """Create a message, leaving out metadata fields that carry no value."""
    fields = {key: value for key, value in metadata.items() if value is not None}
    return Message(
        role=role,
        type=type_,
        content=content,
        metadata=MessageMetadata(**fields) if fields else None,
    )
