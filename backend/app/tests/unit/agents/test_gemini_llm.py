"""Test the Gemini adapter: request building and response parsing."""

from types import SimpleNamespace
from unittest.mock import MagicMock

from nexus.agents.graph_agents import build_dispatcher
from nexus.agents.lib_agent.base_llm import (
    ActionRequest,
    ConversationTurn,
    GenerationRequest,
    InlineBinaryReply,
    InlineImage,
    TextReply,
)
from nexus.agents.lib_agent.utils.gemini_llm import (
    GeminiLLM,
    build_config,
    build_contents,
    parse_response,
)
from nexus.models.message_models import AgentMode, MessageType


def _part(**kwargs):
    fields = {"text": None, "inline_data": None, "function_call": None, "thought": None}
    fields.update(kwargs)
    return SimpleNamespace(**fields)


def _response(parts, grounding_chunks=None):
    grounding = (
        SimpleNamespace(grounding_chunks=grounding_chunks)
        if grounding_chunks is not None
        else None
    )
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts), grounding_metadata=grounding
    )
    return SimpleNamespace(candidates=[candidate])


def test_function_calls_win_and_keep_their_order() -> None:
    response = _response(
        [
            _part(text="let me route this"),
            _part(function_call=SimpleNamespace(name="dispatch_write_code", args={"task_description": "x"})),
            _part(function_call=SimpleNamespace(name="dispatch_create_image", args={"prompt": "y"})),
        ]
    )

    reply = parse_response(response)

    assert isinstance(reply, ActionRequest)
    assert [c.name for c in reply.calls] == ["dispatch_write_code", "dispatch_create_image"]
    assert reply.first.args == {"task_description": "x"}


def test_inline_payload_with_caption() -> None:
    response = _response(
        [
            _part(text="A fox in the snow"),
            _part(inline_data=SimpleNamespace(data=b"\x89PNG", mime_type="image/png")),
        ]
    )

    reply = parse_response(response)

    assert reply == InlineBinaryReply(data=b"\x89PNG", mime_type="image/png", caption="A fox in the snow")


def test_text_with_grounding_citations() -> None:
    response = _response(
        [_part(text="Sunny, "), _part(text="22C")],
        grounding_chunks=[
            SimpleNamespace(web=SimpleNamespace(uri="https://weather.example", title="Weather")),
            SimpleNamespace(web=None),
            SimpleNamespace(web=SimpleNamespace(uri="https://b.example", title=None)),
        ],
    )

    reply = parse_response(response)

    assert isinstance(reply, TextReply)
    assert reply.text == "Sunny, 22C"
    assert [(c.uri, c.title) for c in reply.citations] == [
        ("https://weather.example", "Weather"),
        ("https://b.example", None),
    ]


def test_thought_parts_are_not_answer_text() -> None:
    response = _response([_part(text="thinking...", thought=True), _part(text="done")])

    assert parse_response(response) == TextReply(text="done")


def test_response_without_candidates_is_empty_text() -> None:
    assert parse_response(SimpleNamespace(candidates=None)) == TextReply()


def test_contents_put_history_first_and_image_before_text() -> None:
    request = GenerationRequest(
        model="m",
        prompt="what is this?",
        history=(ConversationTurn(role="user", text="hi"), ConversationTurn(role="model", text="hello")),
        image=InlineImage(data=b"img", mime_type="image/jpeg"),
    )

    contents = build_contents(request)

    assert [c.role for c in contents] == ["user", "model", "user"]
    last_parts = contents[-1].parts
    assert last_parts[0].inline_data.mime_type == "image/jpeg"
    assert last_parts[0].inline_data.data == b"img"
    assert last_parts[1].text == "what is this?"


def test_config_carries_tools_search_thinking_and_voice() -> None:
    request = GenerationRequest(
        model="m",
        prompt="p",
        system_instruction="route",
        function_declarations=(
            {
                "name": "dispatch_speak_text",
                "description": "speak",
                "parameters": {
                    "type": "OBJECT",
                    "properties": {"text": {"type": "STRING"}},
                    "required": ["text"],
                },
            },
        ),
        web_search=True,
        thinking_budget=2048,
        response_modalities=("AUDIO",),
        voice_name="Kore",
    )

    config = build_config(request)

    assert config.system_instruction == "route"
    assert config.tools[0].function_declarations[0].name == "dispatch_speak_text"
    assert config.tools[1].google_search is not None
    assert config.thinking_config.thinking_budget == 2048
    assert [str(m.value) if hasattr(m, "value") else m for m in config.response_modalities] == ["AUDIO"]
    assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"


def test_plain_config_has_no_optional_parts() -> None:
    config = build_config(GenerationRequest(model="m", prompt="p"))

    assert config.tools is None
    assert config.thinking_config is None
    assert config.speech_config is None


def test_generate_uses_the_injected_client() -> None:
    client = MagicMock()
    client.models.generate_content.return_value = _response([_part(text="hello")])
    llm = GeminiLLM(client=client)

    reply = llm.generate(GenerationRequest(model="gemini-2.5-flash", prompt="hi"))

    assert reply == TextReply(text="hello")
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"


def test_image_only_turn_sends_no_empty_text_part() -> None:
    request = GenerationRequest(
        model="m", prompt="", image=InlineImage(data=b"img", mime_type="image/png")
    )

    parts = build_contents(request)[-1].parts

    assert len(parts) == 1
    assert parts[0].inline_data.data == b"img"
    assert not parts[0].text


def test_text_only_turn_keeps_its_text_part() -> None:
    parts = build_contents(GenerationRequest(model="m", prompt=""))[-1].parts

    assert [part.text for part in parts] == [""]


def test_attachment_only_turn_reaches_the_analyst_without_text() -> None:
    client = MagicMock()
    client.models.generate_content.return_value = _response([_part(text="A cat.")])
    dispatcher = build_dispatcher(GeminiLLM(client=client))

    reply = dispatcher.respond("", AgentMode.ORCHESTRATOR, (), "data:image/png;base64,AAAA")

    assert reply.type == MessageType.TEXT
    assert reply.content == "A cat."
    contents = client.models.generate_content.call_args.kwargs["contents"]
    texts = [part.text for part in contents[-1].parts if part.text is not None]
    assert texts == []
