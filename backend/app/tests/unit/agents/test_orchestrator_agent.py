"""Test automatic routing by the orchestrator."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from nexus.agents.lib_agent.base_llm import (
    ActionCall,
    ActionRequest,
    BaseLLM,
    Citation,
    InlineBinaryReply,
    TextReply,
)
from nexus.agents.lib_agent.errors import UnexpectedReplyError, UnknownActionError
from nexus.agents.orchestrator_agent import build_router
from nexus.agents.specialists import Specialists, SpecialistsConfig
from nexus.models.message_models import MessageRole, MessageType, build_message


@pytest.fixture()
def llm() -> MagicMock:
    return MagicMock(spec=BaseLLM)


@pytest.fixture()
def specialists(llm: MagicMock) -> MagicMock:
    mock = MagicMock(spec=Specialists)
    mock.config = SpecialistsConfig()
    mock.prompt_loader = Specialists(llm).prompt_loader
    return mock


@pytest.fixture()
def router(llm: MagicMock, specialists: MagicMock):
    return build_router(llm, specialists)


def _actions(*calls: ActionCall) -> ActionRequest:
    return ActionRequest(calls=tuple(calls))


def test_attachment_always_goes_to_analysis(router, llm, specialists) -> None:
    result = router.route("draw me a cat", [], attachment="data:image/png;base64,AAAA")

    assert result is specialists.analyze.return_value
    specialists.analyze.assert_called_once_with("draw me a cat", "data:image/png;base64,AAAA")
    llm.generate.assert_not_called()


def test_decision_request_declares_actions_and_search(router, llm) -> None:
    llm.generate.return_value = TextReply(text="hi")

    router.route("hello")

    request = llm.generate.call_args.args[0]
    assert request.model == "gemini-2.5-flash"
    assert request.web_search is True
    assert "orchestration hub" in request.system_instruction
    names = [d["name"] for d in request.function_declarations]
    assert names == ["dispatch_create_image", "dispatch_speak_text", "dispatch_write_code"]
    image_params = request.function_declarations[0]["parameters"]
    assert image_params["type"] == "OBJECT"
    assert image_params["properties"]["prompt"]["type"] == "STRING"
    assert image_params["required"] == ["prompt"]


def test_code_action_forwards_task_and_history(router, llm, specialists) -> None:
    history = [build_message(MessageRole.USER, MessageType.TEXT, "earlier")]
    llm.generate.return_value = _actions(
        ActionCall(name="dispatch_write_code", args={"task_description": "reverse a string"})
    )

    result = router.route("write a function to reverse a string", history)

    assert result is specialists.write_code.return_value
    specialists.write_code.assert_called_once_with("reverse a string", history)


def test_only_first_action_runs(router, llm, specialists) -> None:
    llm.generate.return_value = _actions(
        ActionCall(name="dispatch_create_image", args={"prompt": "  a red fox  "}),
        ActionCall(name="dispatch_speak_text", args={"text": "hello"}),
    )

    router.route("draw a fox and say hello")

    specialists.create_image.assert_called_once_with("  a red fox  ")
    specialists.speak_text.assert_not_called()


def test_speak_action_forwards_text_without_history(router, llm, specialists) -> None:
    llm.generate.return_value = _actions(ActionCall(name="dispatch_speak_text", args={"text": "hello"}))

    router.route("say hello", [build_message(MessageRole.USER, MessageType.TEXT, "x")])

    specialists.speak_text.assert_called_once_with("hello")


def test_unknown_action_raises(router, llm) -> None:
    llm.generate.return_value = _actions(ActionCall(name="dispatch_launch_rocket", args={}))

    with pytest.raises(UnknownActionError):
        router.route("launch")


def test_invalid_action_arguments_raise(router, llm, specialists) -> None:
    llm.generate.return_value = _actions(ActionCall(name="dispatch_create_image", args={}))

    with pytest.raises(ValidationError):
        router.route("draw")
    specialists.create_image.assert_not_called()


def test_text_answer_with_sources(router, llm) -> None:
    llm.generate.return_value = TextReply(
        text="Sunny in Tokyo.",
        citations=(Citation(uri="https://weather.example", title="Weather"), Citation(uri="https://a", title=None)),
    )

    message = router.route("what's the weather in Tokyo today")

    assert message.type == MessageType.TEXT
    assert message.content == "Sunny in Tokyo."
    assert [(s.uri, s.title) for s in message.metadata.web_sources] == [
        ("https://weather.example", "Weather"),
        ("https://a", "Source"),
    ]


def test_text_answer_without_sources_has_no_metadata(router, llm) -> None:
    llm.generate.return_value = TextReply(text="Paris.")

    message = router.route("capital of France?")

    assert message.metadata is None


def test_inline_payload_from_decision_is_unexpected(router, llm) -> None:
    llm.generate.return_value = InlineBinaryReply(data=b"x")

    with pytest.raises(UnexpectedReplyError):
        router.route("hi")


def test_web_search_can_be_disabled(llm, specialists) -> None:
    specialists.config = SpecialistsConfig(enable_web_search=False)
    router = build_router(llm, specialists)
    llm.generate.return_value = TextReply(text="ok")

    router.route("hi")

    assert llm.generate.call_args.args[0].web_search is False
