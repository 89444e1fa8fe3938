from __future__ import annotations

from collections import deque
from typing import Iterable, List, Sequence, Union

from ..schemas import ChatMessage
from .base import ChatAdapter

Reply = Union[str, ChatMessage, BaseException]


class MockAdapter(ChatAdapter):
    """Replays scripted replies in order; useful for tests and offline runs.

    A scripted exception is raised instead of returned. Every request is kept
    in ``requests`` for inspection.
    """

    def __init__(self, replies: Iterable[Reply] = (), model: str = "mock") -> None:
        super().__init__(model)
        self.replies = deque(replies)
        self.requests: List[List[ChatMessage]] = []

    def queue(self, *replies: Reply) -> None:
        self.replies.extend(replies)

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        self.requests.append(list(messages))
        if not self.replies:
            raise AssertionError("MockAdapter ran out of scripted replies")
        reply = self.replies.popleft()
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, ChatMessage):
            return reply
        return ChatMessage.assistant(reply)


__all__ = ["MockAdapter"]
