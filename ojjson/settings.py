from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar, Union

from .shapes import DESCRIBE_MODES

T = TypeVar("T")


# -------------------------
# Static or computed values
# -------------------------

@dataclass(frozen=True)
class Static(Generic[T]):
    value: T

    def resolve(self) -> T:
        return self.value


@dataclass(frozen=True)
class Computed(Generic[T]):
    producer: Callable[[], T]

    def resolve(self) -> T:
        return self.producer()


Setting = Union[Static[T], Computed[T]]


def as_setting(value: Any) -> Setting:
    """Wrap a literal in ``Static`` and a zero-argument callable in ``Computed``."""
    if isinstance(value, (Static, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Static(value)


# -------------------------
# Options
# -------------------------

@dataclass(frozen=True)
class Example:
    """A worked input/output pair replayed ahead of the prompt.

    Either side may be a model instance or a plain mapping.
    """
    input: Any
    output: Any


ConversionHelp = Union[str, Callable[[], Optional[str]], None]
Examples = Union[Sequence[Example], Callable[[], Sequence[Example]], None]


@dataclass
class GeneratorOptions:
    conversion_help: ConversionHelp = None
    examples: Examples = None
    max_messages: int = 10
    verbose: bool = False
    describe_mode: str = "example"
    record_corrected_reply: bool = False

    def __post_init__(self) -> None:
        if self.max_messages < 1:
            raise ValueError("max_messages must be a positive integer")
        if self.describe_mode not in DESCRIBE_MODES:
            raise ValueError(f"describe_mode must be one of {DESCRIBE_MODES}")

    def resolve_conversion_help(self) -> Optional[str]:
        return as_setting(self.conversion_help).resolve() or None

    def resolve_examples(self) -> list[Example]:
        return list(as_setting(self.examples).resolve() or [])


__all__ = [
    "Computed",
    "Example",
    "GeneratorOptions",
    "Setting",
    "Static",
    "as_setting",
]
