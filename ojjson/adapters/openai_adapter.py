from __future__ import annotations

from typing import Any, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from ..exceptions import TransportError
from ..schemas import ChatMessage
from .base import ChatAdapter, describe_response


class OpenAIAdapter(ChatAdapter):
    """Chat Completions backend (OpenAI or any compatible endpoint) in JSON mode.

    Extra keyword arguments go to ``AsyncOpenAI`` when no client is supplied,
    so ``base_url``, ``api_key``, ``timeout`` and ``max_retries`` can be set
    there.
    """

    def __init__(self, model: str, *, client: Optional[AsyncOpenAI] = None, **client_kwargs: Any) -> None:
        super().__init__(model)
        self.client = client or AsyncOpenAI(**client_kwargs)

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._to_wire(messages),
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            status_code = getattr(exc, "status_code", None) or -1
            raise TransportError(f"OpenAI request failed: {exc}", status_code) from exc

        choices = getattr(response, "choices", None)
        if not choices:
            raise TransportError(f"OpenAI response missing choices: {describe_response(response)}")

        message = choices[0].message
        if message is None:
            raise TransportError(f"OpenAI response missing choices[0].message: {describe_response(response)}")
        return ChatMessage(role=message.role or "assistant", content=message.content or "")


__all__ = ["OpenAIAdapter"]
