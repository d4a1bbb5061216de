"""Dataclasses representing conversation turns."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    """Single conversational turn kept in memory."""

    role: Role
    content: str

    def as_message(self) -> dict[str, Any]:
        """Return the turn in chat-completion message form."""

        return {"role": self.role.value, "content": self.content}
