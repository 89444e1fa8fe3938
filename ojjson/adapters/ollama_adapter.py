from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

import ollama
from ollama import ResponseError

from ..exceptions import TransportError
from ..schemas import ChatMessage
from .base import ChatAdapter, describe_response

logger = logging.getLogger(__name__)


class OllamaAdapter(ChatAdapter):
    """Talks to a local (or remote) Ollama server in JSON mode."""

    def __init__(
        self,
        model: str,
        *,
        options: Optional[Mapping[str, Any]] = None,
        client: Optional[ollama.AsyncClient] = None,
        host: Optional[str] = None,
    ) -> None:
        super().__init__(model)
        self.options: Dict[str, Any] = dict(options or {})
        self.client = client or ollama.AsyncClient(host=host)

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        try:
            response = await self.client.chat(
                model=self.model,
                messages=self._to_wire(messages),
                format="json",
                options=self.options or None,
            )
        except ResponseError as exc:
            # The server sometimes rejects its own output but echoes it back;
            # that text is a reply to repair, not a transport failure.
            raw = self._extract_raw_from_error(exc)
            if raw is not None:
                logger.debug("Recovered raw model output from Ollama error: %s", raw)
                return ChatMessage.assistant(raw)
            raise TransportError(f"Ollama request failed: {exc.error}", exc.status_code) from exc
        except ConnectionError as exc:
            raise TransportError(f"Could not reach Ollama: {exc}") from exc

        return self._extract_message(response)

    @staticmethod
    def _extract_message(response: Any) -> ChatMessage:
        message = getattr(response, "message", None)
        if message is None and isinstance(response, dict):
            message = response.get("message")
        if not message:
            raise TransportError(f"Ollama response has no message: {describe_response(response)}")
        try:
            return ChatMessage.from_payload(message)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"Malformed Ollama message: {describe_response(message)}") from exc

    @staticmethod
    def _extract_raw_from_error(exc: Exception) -> Optional[str]:
        msg = str(exc)
        marker = "raw='"
        start = msg.find(marker)
        if start == -1:
            return None
        start += len(marker)
        end = msg.rfind("'")
        return None if end < start else msg[start:end]


__all__ = ["OllamaAdapter"]
