"""Schema validation and normalization of decoded model output."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from studygen.modules.generation.shapes import FieldKind, FieldSpec, RecordShape

T = TypeVar("T", bound=BaseModel)

_MISSING = object()
_TRUE = {"true", "yes", "1"}
_FALSE = {"false", "no", "0"}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    accepted: list[T]
    rejected: int = 0


def validate(value: Any, shape: RecordShape[T]) -> ValidationResult[T]:
    """Keep the well-formed records of ``value`` as fresh ``shape.model`` instances.

    Never raises and never mutates ``value``. Elements that miss a required
    field (or carry an empty one) are counted in ``rejected``.
    """
    items = _as_items(value, shape)
    accepted: list[T] = []
    rejected = 0
    for item in items:
        record = build_record(item, shape)
        if record is None:
            rejected += 1
        else:
            accepted.append(record)
    return ValidationResult(accepted=accepted, rejected=rejected)


def build_record(item: Any, shape: RecordShape[T]) -> Optional[T]:
    if not isinstance(item, dict):
        return None
    data: dict[str, Any] = {}
    for spec in shape.fields:
        raw = _lookup(item, spec)
        value = _MISSING if raw is _MISSING else coerce(raw, spec)
        if value is _MISSING or _is_empty(value):
            if spec.required:
                return None
            value = spec.empty_value()
        data[spec.key] = value
    try:
        return shape.model.model_validate(data)
    except ValidationError:
        return None


def coerce(raw: Any, spec: FieldSpec) -> Any:
    """Convert ``raw`` to the field's kind; returns ``_MISSING`` when impossible."""
    if raw is None:
        return _MISSING
    kind = spec.kind
    if kind is FieldKind.TEXT:
        text = _to_text(raw)
        if text is _MISSING or not spec.choices:
            return text
        lowered = text.lower()
        return lowered if lowered in {c.lower() for c in spec.choices} else _MISSING
    if kind is FieldKind.INTEGER:
        return _to_int(raw)
    if kind is FieldKind.BOOLEAN:
        return _to_bool(raw)
    if kind is FieldKind.RECORD:
        record = build_record(raw, spec.shape)
        return _MISSING if record is None else record
    if kind is FieldKind.RECORDS:
        if not isinstance(raw, list):
            return _MISSING
        return validate(raw, spec.shape).accepted
    return _MISSING


def _as_items(value: Any, shape: RecordShape[Any]) -> list[Any]:
    if isinstance(value, dict) and shape.envelope and shape.envelope in value:
        value = value[shape.envelope]
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return [value]
    return [] if value is None else [value]


def _lookup(item: dict, spec: FieldSpec) -> Any:
    for key in spec.lookup_keys:
        if key in item and item[key] is not None:
            return item[key]
    return _MISSING


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return not value
    if isinstance(value, list):
        return not value
    return False


def _to_text(raw: Any) -> Any:
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float) and math.isfinite(raw):
        return str(int(raw)) if raw.is_integer() else str(raw)
    return _MISSING


def _to_int(raw: Any) -> Any:
    if isinstance(raw, bool):
        return _MISSING
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) and raw.is_integer() else _MISSING
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return _MISSING
    return _MISSING


def _to_bool(raw: Any) -> Any:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return _MISSING
