"""Gemini client wrapper turning SDK responses into ModelReply variants."""

import os
from typing import Any, Optional

from google import genai
from google.genai import types

from nexus.agents.lib_agent.base_llm import (
    ActionCall,
    ActionRequest,
    BaseLLM,
    Citation,
    GenerationRequest,
    InlineBinaryReply,
    ModelReply,
    TextReply,
)
from nexus.logger_config import get_logger

logger = get_logger(__name__)


class GeminiLLM(BaseLLM):
    """Wrapper around the google-genai client used by every agent mode."""

    def __init__(
        self, client: Optional[genai.Client] = None, api_key: Optional[str] = None
    ) -> None:
        """Reuse the given client or build one from the API key (env by default)."""
        if client is None:
            client = genai.Client(api_key=api_key or os.getenv("GEMINI_API_KEY"))
        self.client = client

    def generate(self, request: GenerationRequest) -> ModelReply:
        """Call generate_content and normalize the response to a reply variant."""
        response = self.client.models.generate_content(
            model=request.model,
            contents=build_contents(request),
            config=build_config(request),
        )
        reply = parse_response(response)
        logger.debug("Model %s answered with %s", request.model, type(reply).__name__)
        return reply


def build_contents(request: GenerationRequest) -> list[types.Content]:
    """Render history and the current prompt (image first, then text) as contents."""
    contents = [
        types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
        for turn in request.history
    ]
    parts: list[types.Part] = []
    if request.image is not None:
        parts.append(
            types.Part.from_bytes(data=request.image.data, mime_type=request.image.mime_type)
        )
    # Image-only turns carry no text part.
    if request.prompt or not parts:
        parts.append(types.Part.from_text(text=request.prompt))
    contents.append(types.Content(role="user", parts=parts))
    return contents


def build_config(request: GenerationRequest) -> types.GenerateContentConfig:
    """Translate the request options into a GenerateContentConfig."""
    tools: list[types.Tool] = []
    if request.function_declarations:
        tools.append(
            types.Tool(
                function_declarations=[
                    types.FunctionDeclaration(**declaration)
                    for declaration in request.function_declarations
                ]
            )
        )
    if request.web_search:
        tools.append(types.Tool(google_search=types.GoogleSearch()))

    thinking_config = None
    if request.thinking_budget is not None:
        thinking_config = types.ThinkingConfig(thinking_budget=request.thinking_budget)

    speech_config = None
    if request.voice_name:
        speech_config = types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(
                    voice_name=request.voice_name
                )
            )
        )

    return types.GenerateContentConfig(
        system_instruction=request.system_instruction or None,
        tools=tools or None,
        thinking_config=thinking_config,
        response_modalities=list(request.response_modalities) or None,
        speech_config=speech_config,
    )


def _first_candidate(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None


def _candidate_parts(candidate: Any) -> list[Any]:
    content = getattr(candidate, "content", None) if candidate is not None else None
    return list(getattr(content, "parts", None) or [])


def _citations(candidate: Any) -> tuple[Citation, ...]:
    grounding = getattr(candidate, "grounding_metadata", None) if candidate is not None else None
    chunks = getattr(grounding, "grounding_chunks", None) or []
    citations = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        citations.append(Citation(uri=web.uri or "", title=web.title))
    return tuple(citations)


def parse_response(response: Any) -> ModelReply:
    """
    Map a generate_content response onto exactly one reply variant.

    Function calls win over inline payloads, which win over text. For inline
    payloads the last binary part is kept along with the last text part as
    its caption. Thought parts never count as answer text.
    """
    candidate = _first_candidate(response)
    parts = _candidate_parts(candidate)

    calls = [
        ActionCall(name=part.function_call.name, args=dict(part.function_call.args or {}))
        for part in parts
        if getattr(part, "function_call", None)
    ]
    if calls:
        return ActionRequest(calls=tuple(calls))

    inline = None
    caption = ""
    texts = []
    for part in parts:
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and inline_data.data:
            inline = inline_data
        elif getattr(part, "text", None) and not getattr(part, "thought", False):
            caption = part.text
            texts.append(part.text)

    if inline is not None:
        return InlineBinaryReply(
            data=inline.data, mime_type=inline.mime_type or "", caption=caption
        )
    return TextReply(text="".join(texts), citations=_citations(candidate))
