from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import OutputValidationError
from .schemas import Violation
from .shapes import annotation_at, annotation_kind

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# pydantic error types that mean "wrong kind of value", keyed to the kind expected
_EXPECTED_BY_ERROR_TYPE: Dict[str, str] = {
    "string_type": "string",
    "string_unicode": "string",
    "int_type": "number",
    "int_parsing": "number",
    "float_type": "number",
    "float_parsing": "number",
    "decimal_type": "number",
    "decimal_parsing": "number",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
    "list_type": "array",
    "tuple_type": "array",
    "set_type": "array",
    "frozen_set_type": "array",
    "iterable_type": "array",
    "model_type": "object",
    "model_attributes_type": "object",
    "dict_type": "object",
    "dataclass_type": "object",
    "none_required": "null",
}


def json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _violation(schema: Type[BaseModel], error: Mapping[str, Any]) -> Violation:
    path = tuple(error.get("loc") or ())
    error_type = str(error.get("type", ""))
    message = str(error.get("msg", ""))

    expected: Optional[str] = None
    received: Optional[str] = None
    if error_type == "missing":
        received = "undefined"
        expected = annotation_kind(annotation_at(schema, path))
    elif error_type in _EXPECTED_BY_ERROR_TYPE:
        expected = _EXPECTED_BY_ERROR_TYPE[error_type]
        received = json_kind(error.get("input"))

    if expected is None:
        received = None
    return Violation(path=path, message=message, expected=expected, received=received, code=error_type)


def violations_from_error(schema: Type[BaseModel], exc: ValidationError) -> List[Violation]:
    """Flatten a pydantic error into violations.

    pydantic already reports each failing union branch as its own error
    (the branch label is part of the location), so every arm ends up listed.
    """
    return [_violation(schema, error) for error in exc.errors()]


def validate_output(schema: Type[ModelT], data: Any, *, content: str = "") -> ModelT:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        violations = violations_from_error(schema, exc)
        logger.debug("Validation against %s failed with %s issue(s)", schema.__name__, len(violations))
        raise OutputValidationError(
            f"Output does not match {schema.__name__}", violations, content
        ) from exc


__all__ = ["json_kind", "validate_output", "violations_from_error"]
