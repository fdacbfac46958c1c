"""Dispatch table between agent modes and the agents that serve them."""

from typing import Callable, Mapping, Optional, Sequence

from nexus.agents.lib_agent.base_llm import BaseLLM
from nexus.agents.lib_agent.errors import GenerationFailedError
from nexus.agents.orchestrator_agent import Router, build_router
from nexus.agents.specialists import Specialists, SpecialistsConfig
from nexus.logger_config import get_logger
from nexus.models.message_models import (
    AgentMode,
    Message,
    MessageRole,
    MessageType,
    MissingPayloadPolicy,
    build_message,
)

logger = get_logger(__name__)

ModeHandler = Callable[[str, Sequence[Message], Optional[str]], Message]

DEFAULT_MISSING_PAYLOAD_POLICIES: dict[str, MissingPayloadPolicy] = {
    "image": MissingPayloadPolicy.NOTICE,
    "speech": MissingPayloadPolicy.ERROR,
}


def build_mode_table(router: Router, specialists: Specialists) -> dict[AgentMode, ModeHandler]:
    """Bind every agent mode to the callable serving it."""
    return {
        AgentMode.ORCHESTRATOR: router.route,
        AgentMode.CODER: lambda prompt, history, _attachment: specialists.write_code(
            prompt, history
        ),
        AgentMode.ARTIST: lambda prompt, _history, _attachment: specialists.create_image(
            prompt
        ),
        AgentMode.SPEAKER: lambda prompt, _history, _attachment: specialists.speak_text(
            prompt
        ),
        AgentMode.ANALYST: lambda prompt, _history, attachment: specialists.analyze(
            prompt, attachment
        ),
    }


def error_message(exc: BaseException) -> Message:
    """Render a failure as the error message shown in the conversation."""
    description = str(exc) or "Unknown error occurred."
    return build_message(MessageRole.MODEL, MessageType.ERROR, f"System Error: {description}")


class AgentDispatcher:
    """Routes a prompt to the handler of the selected mode and never raises."""

    def __init__(
        self,
        table: Mapping[AgentMode, ModeHandler],
        missing_payload_policies: Optional[Mapping[str, MissingPayloadPolicy]] = None,
    ) -> None:
        missing = set(AgentMode) - set(table)
        if missing:
            raise ValueError(f"No handler bound to modes: {sorted(m.value for m in missing)}")
        self.table = dict(table)
        self.missing_payload_policies = dict(
            missing_payload_policies or DEFAULT_MISSING_PAYLOAD_POLICIES
        )

    def respond(
        self,
        prompt: str,
        mode: AgentMode,
        history: Sequence[Message] = (),
        attachment: Optional[str] = None,
    ) -> Message:
        """Produce the reply for one turn; failures come back as messages."""
        handler = self.table[mode]
        try:
            return handler(prompt, history, attachment)
        except GenerationFailedError as exc:
            policy = self.missing_payload_policies.get(
                exc.capability, MissingPayloadPolicy.ERROR
            )
            logger.warning(
                "%s agent returned no %s payload (%s)", mode.value, exc.capability, policy.value
            )
            if policy == MissingPayloadPolicy.NOTICE:
                return build_message(MessageRole.MODEL, MessageType.TEXT, exc.notice)
            return error_message(exc)
        except Exception as exc:
            logger.exception("Gemini API error in %s mode", mode.value)
            return error_message(exc)


def build_dispatcher(
    llm: BaseLLM,
    config: Optional[SpecialistsConfig] = None,
    missing_payload_policies: Optional[Mapping[str, MissingPayloadPolicy]] = None,
) -> AgentDispatcher:
    """Assemble specialists, router and dispatch table around one client."""
    specialists = Specialists(llm, config)
    router = build_router(llm, specialists)
    return AgentDispatcher(build_mode_table(router, specialists), missing_payload_policies)
