from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from .adapters.base import ChatAdapter
from .exceptions import ConformanceError, ExhaustionError
from .extraction import parse_reply
from .history import HistoryBuffer
from .prompt_builders import build_correction_prompt, build_instruction_prompt, to_payload_text
from .schemas import ChatMessage, HistoryEntry, flatten_history
from .settings import Example, GeneratorOptions
from .shapes import describe
from .validation import validate_output

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)

ExplicitHistory = Iterable[Union[HistoryEntry, ChatMessage]]


@dataclass(frozen=True)
class _Conversation:
    """Everything fixed for the duration of one ``generate`` call."""
    examples: List[ChatMessage]
    prompt: ChatMessage
    input_turn: ChatMessage


class OjjsonGenerator(Generic[InputT, OutputT]):
    """Turns a chat backend into a producer of ``output_schema`` instances.

    Each ``generate`` call runs up to ``retries + 1`` attempts. An attempt
    sends the full conversation once and, when the reply does not conform,
    asks for a correction up to ``fix_tries`` times before starting over.
    Transport errors from the adapter are never retried here.

    One call at a time per instance: concurrent calls race on the history.
    """

    def __init__(
        self,
        adapter: ChatAdapter,
        input_schema: Type[InputT],
        output_schema: Type[OutputT],
        options: Optional[GeneratorOptions] = None,
        **option_kwargs: Any,
    ) -> None:
        if options is not None and option_kwargs:
            raise TypeError("Pass either a GeneratorOptions instance or option keywords, not both")
        self.adapter = adapter
        self.input_schema = input_schema
        self.output_schema = output_schema
        self.options = options or GeneratorOptions(**option_kwargs)
        self.history = HistoryBuffer(self.options.max_messages)

    # -------------------------------------------------

    async def generate(
        self,
        input: Union[InputT, Any],
        retries: int = 2,
        fix_tries: int = 1,
        history: Optional[ExplicitHistory] = None,
    ) -> OutputT:
        """Generate an output for ``input``.

        Args:
            input: A model instance (or plain mapping) matching the input schema.
            retries: Full restarts allowed after the first attempt fails.
            fix_tries: Correction round-trips allowed per attempt.
            history: Replaces the instance's own history for this call.

        Raises:
            ExhaustionError: no attempt produced a valid output.
            TransportError: the adapter failed; propagated untouched.
        """
        if retries < 0 or fix_tries < 0:
            raise ValueError("retries and fix_tries must not be negative")

        conversation = self._assemble(input)
        explicit = flatten_history(history) if history is not None else None
        attempts = retries + 1
        calls = 0
        last_error: Optional[ConformanceError] = None

        self._log("request started (%s attempt(s), %s fix(es) each)", attempts, fix_tries)

        for attempt in range(1, attempts + 1):
            past = explicit if explicit is not None else self.history.flatten()
            messages = [
                *conversation.examples,
                conversation.prompt,
                *past,
                conversation.input_turn,
            ]

            reply = await self.adapter.chat(messages)
            calls += 1
            logger.debug("Attempt %s raw reply: %s", attempt, reply.content)

            try:
                output = self._conform(reply.content)
            except ConformanceError as exc:
                logger.warning("Attempt %s/%s rejected: %s", attempt, attempts, exc)
                last_error = exc
            else:
                self.history.record(conversation.input_turn, reply)
                self._log("success on attempt %s after %s call(s)", attempt, calls)
                return output

            first_rejected = reply
            for fix in range(1, fix_tries + 1):
                correction = ChatMessage.user(build_correction_prompt(last_error.violations))
                fixed = await self.adapter.chat(
                    [
                        *conversation.examples,
                        conversation.prompt,
                        conversation.input_turn,
                        ChatMessage.assistant(reply.content),
                        correction,
                    ]
                )
                calls += 1
                logger.debug("Attempt %s fix %s raw reply: %s", attempt, fix, fixed.content)

                try:
                    output = self._conform(fixed.content)
                except ConformanceError as exc:
                    logger.warning("Attempt %s fix %s/%s rejected: %s", attempt, fix, fix_tries, exc)
                    last_error = exc
                    reply = fixed
                    continue

                recorded = fixed if self.options.record_corrected_reply else first_rejected
                self.history.record(conversation.input_turn, ChatMessage.assistant(recorded.content))
                self._log("fixed on attempt %s after %s call(s)", attempt, calls)
                return output

            if attempt < attempts:
                self._log("failed to fix, retrying prompt [%s/%s]", attempt + 1, attempts)

        assert last_error is not None
        raise ExhaustionError(last_error, calls=calls, attempts=attempts)

    # -------------------------------------------------

    def prompt_text(self, conversion_help: Optional[str] = None) -> str:
        mode = self.options.describe_mode
        return build_instruction_prompt(
            describe(self.input_schema, mode),
            describe(self.output_schema, mode),
            conversion_help,
        )

    def _assemble(self, input: Any) -> _Conversation:
        examples: List[ChatMessage] = []
        for example in self.options.resolve_examples():
            examples.extend(self._example_turns(example))

        prompt = self.prompt_text(self.options.resolve_conversion_help())
        return _Conversation(
            examples=examples,
            prompt=ChatMessage.user(prompt),
            input_turn=ChatMessage.user(to_payload_text(input)),
        )

    @staticmethod
    def _example_turns(example: Example) -> List[ChatMessage]:
        return [
            ChatMessage.user(to_payload_text(example.input)),
            ChatMessage.assistant(to_payload_text(example.output)),
        ]

    def _conform(self, content: str) -> OutputT:
        data = parse_reply(content)
        return validate_output(self.output_schema, data, content=content)

    def _log(self, message: str, *args: Any) -> None:
        if self.options.verbose:
            logger.info("[OJJSON] " + message, *args)


__all__ = ["OjjsonGenerator"]
