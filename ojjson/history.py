from __future__ import annotations

from typing import Iterator, List

from .schemas import ChatMessage, HistoryEntry


class HistoryBuffer:
    """Keeps a rolling window of successful exchanges, oldest evicted first."""

    def __init__(self, max_messages: int = 10) -> None:
        if max_messages < 1:
            raise ValueError("max_messages must be a positive integer")
        self.max_messages = max_messages
        self._entries: List[HistoryEntry] = []

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        while len(self._entries) > self.max_messages:
            self._entries.pop(0)

    def record(self, user: ChatMessage, assistant: ChatMessage) -> HistoryEntry:
        entry = HistoryEntry(user=user, assistant=assistant)
        self.append(entry)
        return entry

    def flatten(self) -> List[ChatMessage]:
        return [message for entry in self._entries for message in entry.messages()]

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries))


__all__ = ["HistoryBuffer"]
