from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


ROLES = ("user", "assistant", "system")

PathItem = Union[str, int]


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported chat role '{self.role}'")

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls("user", content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls("assistant", content)

    @classmethod
    def from_payload(cls, payload: Any, *, default_role: str = "assistant") -> "ChatMessage":
        """Normalize a dict or a pydantic-style message object from a client library."""
        if isinstance(payload, ChatMessage):
            return payload
        if hasattr(payload, "model_dump"):
            payload = payload.model_dump(exclude_none=True)
        if not isinstance(payload, dict):
            raise TypeError(f"Cannot build a chat message from {type(payload).__name__}")

        content = payload.get("content") or ""
        if isinstance(content, list):
            content = "".join(map(str, content))
        role = payload.get("role") or default_role
        return cls(str(role), str(content))

    def to_json(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class HistoryEntry:
    """One completed exchange: the serialized input and the reply it earned."""
    user: ChatMessage
    assistant: ChatMessage

    def messages(self) -> List[ChatMessage]:
        return [self.user, self.assistant]


@dataclass(frozen=True)
class Violation:
    path: Tuple[PathItem, ...]
    message: str
    expected: Optional[str] = None
    received: Optional[str] = None
    code: str = ""

    @property
    def path_text(self) -> str:
        return ".".join(str(part) for part in self.path)

    @property
    def is_type_mismatch(self) -> bool:
        return self.expected is not None and self.received is not None

    def describe(self) -> str:
        if self.is_type_mismatch:
            return f"{self.path_text}: Received {self.received} but expected {self.expected}, {self.message}"
        return f"{self.path_text}: {self.message}"

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "path": list(self.path),
            "message": self.message,
        }
        if self.expected is not None:
            payload["expected"] = self.expected
        if self.received is not None:
            payload["received"] = self.received
        if self.code:
            payload["code"] = self.code
        return payload


def flatten_history(items: Iterable[Union[HistoryEntry, ChatMessage]]) -> List[ChatMessage]:
    messages: List[ChatMessage] = []
    for item in items:
        if isinstance(item, HistoryEntry):
            messages.extend(item.messages())
        else:
            messages.append(ChatMessage.from_payload(item, default_role="user"))
    return messages


__all__ = ["ROLES", "ChatMessage", "HistoryEntry", "Violation", "flatten_history"]
