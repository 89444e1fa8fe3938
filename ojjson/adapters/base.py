from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from ..schemas import ChatMessage


class ChatAdapter(ABC):
    """Sends an ordered list of chat messages to a backend and returns its reply.

    Implementations raise ``TransportError`` for connectivity, authentication
    or envelope problems. Anything else about the reply content is left to the
    generator.
    """

    def __init__(self, model: str) -> None:
        if not model or not model.strip():
            raise ValueError("model must not be empty")
        self.model = model

    @abstractmethod
    async def chat(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        ...

    @staticmethod
    def _to_wire(messages: Sequence[ChatMessage]) -> List[Dict[str, str]]:
        return [message.to_json() for message in messages]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"


def describe_response(response: Any, max_len: int = 200) -> str:
    text = repr(response)
    return text if len(text) <= max_len else text[:max_len] + "..."


__all__ = ["ChatAdapter", "describe_response"]
