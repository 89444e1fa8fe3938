"""Backends the generator can talk to.

Nothing else in the package knows about Ollama or OpenAI; the generator
only calls ``adapter.chat(messages)``.
"""

from .base import ChatAdapter
from .mock import MockAdapter
from .ollama_adapter import OllamaAdapter
from .openai_adapter import OpenAIAdapter

__all__ = ["ChatAdapter", "MockAdapter", "OllamaAdapter", "OpenAIAdapter"]
