"""Failures raised by agents and handlers; the dispatcher turns them into messages."""

from typing import Any


class AgentError(Exception):
    """Base class for failures raised while producing a reply."""


class GenerationFailedError(AgentError):
    """The remote model answered without the payload the capability needs."""

    def __init__(self, capability: str, notice: str) -> None:
        super().__init__(notice)
        self.capability = capability
        self.notice = notice


class UnknownActionError(AgentError):
    """The decision model requested an action that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Action "{name}" is not registered.')
        self.name = name


class UnexpectedReplyError(AgentError):
    """The remote model answered with a reply shape the caller cannot use."""

    def __init__(self, reply: Any, expected: str) -> None:
        super().__init__(
            f"Expected {expected} from the model, got {type(reply).__name__}."
        )
        self.reply = reply
