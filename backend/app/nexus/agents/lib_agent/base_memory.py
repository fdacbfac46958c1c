"""In-memory conversation history of a chat session."""

from typing import Iterable, Optional, Sequence

from nexus.agents.lib_agent.base_llm import ConversationTurn
from nexus.models.message_models import Message, MessageRole, MessageType

# Only these exchanges are replayed to the model as context.
FORWARDED_ROLES = {MessageRole.USER: "user", MessageRole.MODEL: "model"}
FORWARDED_TYPES = {MessageType.TEXT, MessageType.CODE}


class Memory:
    """Append-only message history, discarded only when cleared."""

    def __init__(self, seed: Iterable[Message] = ()) -> None:
        """Initialize the history, optionally with messages shown before any turn."""
        self._seed = tuple(seed)
        self.messages: list[Message] = list(self._seed)

    def add(self, msg: Message) -> None:
        """Append a message to the history."""
        self.messages.append(msg)

    def snapshot(self) -> tuple[Message, ...]:
        """Return the history as it is now; later appends do not show up in it."""
        return tuple(self.messages)

    def find(self, message_id: str) -> Optional[Message]:
        """Return the message with the given id, if present."""
        return next((m for m in self.messages if m.id == message_id), None)

    def clear(self) -> None:
        """Drop every message and restore the seed messages."""
        self.messages = list(self._seed)

    def __len__(self) -> int:
        return len(self.messages)


def conversation_turns(
    messages: Sequence[Message], window: Optional[int] = None
) -> tuple[ConversationTurn, ...]:
    """Keep user/model text and code messages, oldest first, limited to the last `window`."""
    turns = [
        ConversationTurn(role=FORWARDED_ROLES[m.role], text=m.content)
        for m in messages
        if m.role in FORWARDED_ROLES and m.type in FORWARDED_TYPES and m.content
    ]
    if window is not None:
        turns = turns[-window:] if window > 0 else []
    return tuple(turns)
