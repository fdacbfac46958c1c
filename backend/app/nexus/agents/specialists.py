"""Specialized handlers: one remote-model configuration per capability."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, Sequence

from nexus.agents.lib_agent.agent_prompt_loader import AgentPromptLoader
from nexus.agents.lib_agent.base_llm import (
    BaseLLM,
    Citation,
    GenerationRequest,
    InlineBinaryReply,
    InlineImage,
    ModelReply,
    TextReply,
)
from nexus.agents.lib_agent.base_memory import conversation_turns
from nexus.agents.lib_agent.errors import GenerationFailedError, UnexpectedReplyError
from nexus.models.message_models import (
    Message,
    MessageRole,
    MessageType,
    WebSource,
    build_message,
)

DEFAULT_IMAGE_MIME = "image/png"
DEFAULT_SOURCE_TITLE = "Source"
DIRECT_ANSWER_PLACEHOLDER = "I processed that request."
NO_CODE_PLACEHOLDER = "// No code generated"
NO_ANALYSIS_PLACEHOLDER = "Analysis complete."
AUDIO_READY_TEXT = "Audio output generated."
IMAGE_FAILED_NOTICE = "I couldn't generate an image. Please try a different prompt."
AUDIO_MISSING_NOTICE = "Audio data missing in response"


@dataclass(frozen=True)
class SpecialistsConfig:
    """Model and output settings of each capability."""

    orchestrator_model: str = "gemini-2.5-flash"
    coder_model: str = "gemini-3-pro-preview"
    artist_model: str = "gemini-2.5-flash-image"
    speaker_model: str = "gemini-2.5-flash-preview-tts"
    analyst_model: str = "gemini-2.5-flash"
    coder_thinking_budget: int = 2048
    code_language: str = "typescript"
    speaker_voice: str = "Kore"
    enable_web_search: bool = True
    history_window: int = 40


def decode_attachment(attachment: str) -> InlineImage:
    """
    Strip the data URI prefix of an uploaded image and decode its payload.

    Args:
        attachment (str): "data:<mime>;base64,<payload>" or bare base64.

    Returns:
        InlineImage: decoded bytes with the mime type from the prefix
        (image/png when the prefix is missing or has none).
    """
    mime_type = DEFAULT_IMAGE_MIME
    payload = attachment
    if attachment.startswith("data:") and "," in attachment:
        header, payload = attachment.split(",", 1)
        declared = header[len("data:"):].split(";", 1)[0].strip()
        if declared:
            mime_type = declared
    try:
        data = base64.b64decode(payload.strip(), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Attachment is not valid base64 data: {exc}") from exc
    return InlineImage(data=data, mime_type=mime_type)


def attachment_data_uri(attachment: str) -> str:
    """Return the attachment as a displayable data URI, adding the prefix to bare base64."""
    if attachment.startswith("data:"):
        return attachment
    image = decode_attachment(attachment)
    encoded = base64.b64encode(image.data).decode("ascii")
    return f"data:{image.mime_type};base64,{encoded}"


def normalize_web_sources(citations: Sequence[Citation]) -> Optional[list[WebSource]]:
    """Keep citation order, default missing titles, and return None instead of []."""
    sources = [
        WebSource(uri=citation.uri or "", title=citation.title or DEFAULT_SOURCE_TITLE)
        for citation in citations
    ]
    return sources or None


def answer_text(reply: TextReply) -> Message:
    """Text/search leg: the model's own answer, with its search sources if any."""
    return build_message(
        MessageRole.MODEL,
        MessageType.TEXT,
        reply.text or DIRECT_ANSWER_PLACEHOLDER,
        web_sources=normalize_web_sources(reply.citations),
    )


def _expect_text(reply: ModelReply) -> TextReply:
    if not isinstance(reply, TextReply):
        raise UnexpectedReplyError(reply, "a text answer")
    return reply


class Specialists:
    """Each method issues exactly one remote call and returns a normalized Message."""

    def __init__(
        self,
        llm: BaseLLM,
        config: Optional[SpecialistsConfig] = None,
        prompt_loader: Optional[AgentPromptLoader] = None,
    ) -> None:
        self.llm = llm
        self.config = config or SpecialistsConfig()
        self.prompt_loader = prompt_loader or AgentPromptLoader()

    def write_code(self, task_description: str, history: Sequence[Message] = ()) -> Message:
        """Generate code with the reasoning model; history is forwarded as context."""
        reply = self.llm.generate(
            GenerationRequest(
                model=self.config.coder_model,
                prompt=task_description,
                system_instruction=self.prompt_loader.get_system_prompt("coder"),
                history=conversation_turns(history, self.config.history_window),
                thinking_budget=self.config.coder_thinking_budget,
            )
        )
        text = _expect_text(reply).text
        return build_message(
            MessageRole.MODEL,
            MessageType.CODE,
            text or NO_CODE_PLACEHOLDER,
            code_language=self.config.code_language,
        )

    def create_image(self, prompt: str) -> Message:
        """Generate an image; a reply without one raises GenerationFailedError."""
        reply = self.llm.generate(
            GenerationRequest(model=self.config.artist_model, prompt=prompt)
        )
        if isinstance(reply, InlineBinaryReply):
            mime_type = reply.mime_type or DEFAULT_IMAGE_MIME
            encoded = base64.b64encode(reply.data).decode("ascii")
            return build_message(
                MessageRole.MODEL,
                MessageType.IMAGE,
                reply.caption or f"Generated: {prompt}",
                image_url=f"data:{mime_type};base64,{encoded}",
            )
        if isinstance(reply, TextReply):
            raise GenerationFailedError("image", IMAGE_FAILED_NOTICE)
        raise UnexpectedReplyError(reply, "an inline image")

    def speak_text(self, text: str) -> Message:
        """Synthesize speech; a reply without audio raises GenerationFailedError."""
        reply = self.llm.generate(
            GenerationRequest(
                model=self.config.speaker_model,
                prompt=text,
                response_modalities=("AUDIO",),
                voice_name=self.config.speaker_voice,
            )
        )
        if isinstance(reply, InlineBinaryReply):
            return build_message(
                MessageRole.MODEL,
                MessageType.AUDIO,
                AUDIO_READY_TEXT,
                audio_data=base64.b64encode(reply.data).decode("ascii"),
                audio_mime_type=reply.mime_type or None,
            )
        if isinstance(reply, TextReply):
            raise GenerationFailedError("speech", AUDIO_MISSING_NOTICE)
        raise UnexpectedReplyError(reply, "inline audio")

    def analyze(self, prompt: str, attachment: Optional[str] = None) -> Message:
        """Answer about the attached image (if any) with the vision model."""
        image = decode_attachment(attachment) if attachment else None
        reply = self.llm.generate(
            GenerationRequest(
                model=self.config.analyst_model,
                prompt=prompt,
                system_instruction=self.prompt_loader.get_system_prompt("analyst"),
                image=image,
            )
        )
        text = _expect_text(reply).text
        return build_message(
            MessageRole.MODEL, MessageType.TEXT, text or NO_ANALYSIS_PLACEHOLDER
        )
