"""Render pydantic models as compact shape descriptions for prompts.

Only a closed set of field kinds is understood: strings, numbers, booleans,
arrays and nested models. Anything else (dicts, literals, enums, arbitrary
types) is skipped silently rather than treated as an error.
"""

from __future__ import annotations

import json
import types
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo


DESCRIBE_MODES = ("example", "types")

_ARRAY_TYPES = (list, tuple, set, frozenset)
_NUMBER_TYPES = (int, float, Decimal)
_UNION_TYPES = (Union, types.UnionType)


# -------------------------
# Annotation helpers
# -------------------------

def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Strip ``None`` from ``Optional[X]``; returns (X, was_optional)."""
    if get_origin(annotation) in _UNION_TYPES:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return annotation, False


def is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def annotation_kind(annotation: Any) -> Optional[str]:
    annotation, _ = unwrap_optional(annotation)
    if annotation is str:
        return "string"
    # bool before numbers: bool is an int subclass
    if annotation is bool:
        return "boolean"
    if annotation in _NUMBER_TYPES:
        return "number"
    if annotation in _ARRAY_TYPES or get_origin(annotation) in _ARRAY_TYPES:
        return "array"
    if is_model(annotation):
        return "object"
    return None


def element_annotation(annotation: Any) -> Any:
    annotation, _ = unwrap_optional(annotation)
    args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
    return args[0] if args else None


def field_key(name: str, info: FieldInfo) -> str:
    """The key a field is read from when validating JSON (its alias, if any)."""
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _field_by_key(schema: Type[BaseModel], key: str) -> Optional[FieldInfo]:
    for name, info in schema.model_fields.items():
        if key in (name, field_key(name, info)):
            return info
    return None


def annotation_at(schema: Type[BaseModel], path: Sequence[Union[str, int]]) -> Any:
    """Follow a validation error location through the schema; None when it leaves it."""
    current: Any = schema
    for part in path:
        current, _ = unwrap_optional(current)
        if isinstance(part, int):
            if annotation_kind(current) != "array":
                return None
            current = element_annotation(current)
            continue
        info = _field_by_key(current, part) if is_model(current) else None
        if info is None:
            return None
        current = info.annotation
    return current


# -------------------------
# Example skeleton
# -------------------------

def example_value(schema: Type[BaseModel]) -> Dict[str, Any]:
    example: Dict[str, Any] = {}
    for name, info in schema.model_fields.items():
        key = field_key(name, info)
        annotation, _ = unwrap_optional(info.annotation)
        kind = annotation_kind(annotation)
        if kind == "string":
            example[key] = ""
        elif kind == "number":
            example[key] = 0
        elif kind == "boolean":
            example[key] = True
        elif kind == "array":
            example[key] = []
        elif kind == "object":
            example[key] = example_value(annotation)
    return example


# -------------------------
# Type grammar
# -------------------------

def _type_text(annotation: Any) -> Optional[str]:
    annotation, _ = unwrap_optional(annotation)
    kind = annotation_kind(annotation)
    if kind == "object":
        return type_description(annotation)
    if kind == "array":
        inner = element_annotation(annotation)
        inner_text = _type_text(inner) if inner is not None else None
        return f"{inner_text}[]" if inner_text else "array"
    return kind


def type_description(schema: Type[BaseModel]) -> str:
    parts: List[str] = []
    for name, info in schema.model_fields.items():
        text = _type_text(info.annotation)
        if text is None:
            continue
        _, optional = unwrap_optional(info.annotation)
        parts.append(f"{field_key(name, info)}{'?' if optional else ''}: {text}")
    if not parts:
        return "{}"
    return "{ " + ", ".join(parts) + " }"


def describe(schema: Type[BaseModel], mode: str = "example") -> str:
    if mode == "example":
        return json.dumps(example_value(schema), indent=2)
    if mode == "types":
        return type_description(schema)
    raise ValueError(f"Unknown describe mode '{mode}', expected one of {DESCRIBE_MODES}")


__all__ = [
    "DESCRIBE_MODES",
    "annotation_at",
    "annotation_kind",
    "describe",
    "example_value",
    "field_key",
    "type_description",
    "unwrap_optional",
]
