from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from .schemas import Violation


class OjjsonError(RuntimeError):
    """Base class for every error raised by the generator."""


class TransportError(OjjsonError):
    """Raised by adapters when the backend cannot be reached or answers garbage.

    The generator never retries these; retry/backoff for transport issues
    belongs to the adapter's client.
    """

    def __init__(self, message: str, status_code: int = -1) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_http_error(self) -> bool:
        return self.status_code > 0


class ConformanceError(OjjsonError):
    """A reply that could not be turned into a valid output value."""

    def __init__(self, message: str, violations: Sequence[Violation], content: str = "") -> None:
        super().__init__(message)
        self.violations: Tuple[Violation, ...] = tuple(violations)
        self.content = content


class ParseError(ConformanceError):
    """The extracted reply content is not well-formed JSON."""


class OutputValidationError(ConformanceError):
    """The parsed reply does not match the output schema."""


class ExhaustionError(OjjsonError):
    """Every retry and every repair attempt failed."""

    def __init__(self, last_error: ConformanceError, *, calls: int, attempts: int) -> None:
        lines = "\n".join(f"  {violation.describe()}" for violation in last_error.violations)
        super().__init__(
            f"Backend failed to produce a valid output after {attempts} attempt(s) "
            f"and {calls} call(s). Last issues:\n{lines}"
        )
        self.last_error = last_error
        self.calls = calls
        self.attempts = attempts

    @property
    def violations(self) -> Tuple[Violation, ...]:
        return self.last_error.violations

    @property
    def content(self) -> Optional[str]:
        return self.last_error.content

    def to_json(self) -> Dict[str, Any]:
        return {
            "attempts": self.attempts,
            "calls": self.calls,
            "violations": [violation.to_json() for violation in self.violations],
        }


__all__ = [
    "OjjsonError",
    "TransportError",
    "ConformanceError",
    "ParseError",
    "OutputValidationError",
    "ExhaustionError",
]
