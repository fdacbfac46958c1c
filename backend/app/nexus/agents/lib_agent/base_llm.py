"""LLM interface used by the agents and the reply shapes it returns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class InlineImage:
    """Raw image bytes sent along with a prompt."""

    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class ConversationTurn:
    """Earlier exchange forwarded as context; role is "user" or "model"."""

    role: str
    text: str


@dataclass(frozen=True)
class GenerationRequest:
    """Everything one remote call needs, independent of the SDK types."""

    model: str
    prompt: str
    system_instruction: Optional[str] = None
    history: tuple[ConversationTurn, ...] = ()
    image: Optional[InlineImage] = None
    function_declarations: tuple[dict[str, Any], ...] = ()
    web_search: bool = False
    thinking_budget: Optional[int] = None
    response_modalities: tuple[str, ...] = ()
    voice_name: Optional[str] = None


@dataclass(frozen=True)
class Citation:
    """Grounding chunk as reported by the model; title may be missing."""

    uri: str
    title: Optional[str] = None


@dataclass(frozen=True)
class TextReply:
    """Free-text answer, with search citations when grounding was used."""

    text: str = ""
    citations: tuple[Citation, ...] = ()


@dataclass(frozen=True)
class ActionCall:
    """A structured action the model asked to run."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ActionRequest:
    """One or more action calls, in the order the model emitted them."""

    calls: tuple[ActionCall, ...]

    @property
    def first(self) -> ActionCall:
        return self.calls[0]


@dataclass(frozen=True)
class InlineBinaryReply:
    """Inline binary payload (image or audio) with optional accompanying text."""

    data: bytes
    mime_type: str = ""
    caption: str = ""


ModelReply = Union[TextReply, ActionRequest, InlineBinaryReply]


class BaseLLM:
    """Abstract base class for the remote generative model."""

    def generate(self, request: GenerationRequest) -> ModelReply:
        """
        Issue a single generation request and return the parsed reply.

        Args:
            request (GenerationRequest): Model name, prompt, optional history,
                inline image, callable actions and output configuration.

        Returns:
            ModelReply: Exactly one of TextReply, ActionRequest or
            InlineBinaryReply. Action calls take precedence over inline
            payloads, which take precedence over text.
        """
        raise NotImplementedError
