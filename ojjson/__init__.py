"""Schema-constrained JSON generation on top of chat backends."""

from .adapters import ChatAdapter, MockAdapter, OllamaAdapter, OpenAIAdapter
from .exceptions import (
    ConformanceError,
    ExhaustionError,
    OjjsonError,
    OutputValidationError,
    ParseError,
    TransportError,
)
from .generator import OjjsonGenerator
from .history import HistoryBuffer
from .schemas import ChatMessage, HistoryEntry, Violation
from .settings import Computed, Example, GeneratorOptions, Static

__all__ = [
    "ChatAdapter",
    "ChatMessage",
    "Computed",
    "ConformanceError",
    "Example",
    "ExhaustionError",
    "GeneratorOptions",
    "HistoryBuffer",
    "HistoryEntry",
    "MockAdapter",
    "OjjsonError",
    "OjjsonGenerator",
    "OllamaAdapter",
    "OpenAIAdapter",
    "OutputValidationError",
    "ParseError",
    "Static",
    "TransportError",
    "Violation",
]
