"""Declarative record shapes consumed by the validator.

A ``RecordShape`` names the pydantic model a record becomes and lists the
JSON fields it is built from. Field lookups are explicit: a key plus
optional aliases, never attribute probing on the decoded value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class FieldKind(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    RECORD = "record"
    RECORDS = "records"


@dataclass(frozen=True)
class FieldSpec:
    key: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = True
    aliases: tuple[str, ...] = ()
    # Allowed TEXT values, compared case-insensitively and normalized to lowercase.
    choices: tuple[str, ...] = ()
    default: Any = None
    shape: Optional["RecordShape[Any]"] = None

    def __post_init__(self) -> None:
        if self.kind in (FieldKind.RECORD, FieldKind.RECORDS) and self.shape is None:
            raise ValueError(f"field {self.key!r} of kind {self.kind.value} needs a shape")

    @property
    def lookup_keys(self) -> tuple[str, ...]:
        return (self.key, *self.aliases)

    def empty_value(self) -> Any:
        if self.default is not None:
            return self.default
        if self.kind is FieldKind.RECORDS:
            return []
        return None


@dataclass(frozen=True)
class RecordShape(Generic[T]):
    name: str
    model: type[T]
    fields: tuple[FieldSpec, ...]
    envelope: Optional[str] = None
    salvage_keys: Optional[tuple[str, str]] = None
    identity_key: Optional[str] = None

    def identify(self, record: T) -> str:
        """Short identifier of ``record`` used to steer supplemental prompts."""
        if not self.identity_key:
            return ""
        value = record.model_dump(by_alias=True).get(self.identity_key)
        return "" if value is None else str(value)
