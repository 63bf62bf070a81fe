"""Turn free-form model output into decoded JSON.

Models wrap JSON in prose or code fences, leave trailing commas, put raw
newlines inside strings, or emit stray backslashes. ``extract_structure``
runs an ordered cascade of increasingly aggressive passes and stops at the
first one that parses, so valid payloads are never rewritten.

Passes:

1. ``FENCE_STRIP``: unwrap code fences and cut out the first balanced
   top-level array or object with a string-aware bracket scan.
2. ``SYNTAX_REPAIR``: drop trailing commas, escape raw newlines/tabs inside
   strings, strip control characters, double invalid backslashes.
3. ``WHITESPACE_COLLAPSE``: flatten all newlines and whitespace runs.
4. ``RECORD_SALVAGE``: parse individual flat ``{...}`` fragments carrying
   the two essential keys; may return a partial list.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

from studygen.core.logging import get_logger
from studygen.modules.generation.errors import MalformedAfterAllPasses, NoJsonFound

logger = get_logger(__name__)


class RepairPass(str, Enum):
    FENCE_STRIP = "fence_strip"
    SYNTAX_REPAIR = "syntax_repair"
    WHITESPACE_COLLAPSE = "whitespace_collapse"
    RECORD_SALVAGE = "record_salvage"


@dataclass(frozen=True)
class RepairResult:
    value: Any
    repair_pass: RepairPass
    attempts: tuple[RepairPass, ...]


# Fences only count at line boundaries; ``` inside a JSON string stays put.
_FENCED_BLOCK = re.compile(
    r"^[ \t]*```[\w-]*[ \t]*\r?\n(.*?)```[ \t]*$", re.DOTALL | re.MULTILINE
)
_FENCE_LINE = re.compile(r"^[ \t]*```[\w-]*[ \t]*$", re.MULTILINE)
_LEADING_FENCE = re.compile(r"\A\s*```[\w-]*")
_TRAILING_FENCE = re.compile(r"```\s*\Z")
_FLAT_OBJECT = re.compile(r"\{[^{}]*\}")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_WHITESPACE_RUN = re.compile(r"\s+")
_HEX = set("0123456789abcdefABCDEF")
_SIMPLE_ESCAPES = set('"\\/bfnrt')
_CLOSERS = {"[": "]", "{": "}"}


def strip_fences(text: str) -> str:
    """Return fenced content if any fences exist, else the text without stray markers.

    Only markers that open or close a line (or the whole text) are treated
    as fences.
    """
    blocks = [b for b in _FENCED_BLOCK.findall(text) if b.strip()]
    if blocks:
        return "\n".join(blocks)
    text = _FENCE_LINE.sub("", text)
    text = _LEADING_FENCE.sub("", text)
    return _TRAILING_FENCE.sub("", text)


def find_payload(text: str) -> Optional[str]:
    """Cut out the first balanced top-level array or object.

    Brackets inside string literals are ignored. When the payload is never
    closed (truncated output) the remainder of the text is returned so the
    later passes still get a chance.
    """
    start = -1
    for i, ch in enumerate(text):
        if ch in _CLOSERS:
            start = i
            break
    if start < 0:
        return None

    stack: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in "]}":
            if stack and stack[-1] == ch:
                stack.pop()
                if not stack:
                    return text[start : i + 1]
            else:
                # Mismatched closer; the bracket structure is broken.
                return text[start : i + 1]
    return text[start:]


def repair_syntax(payload: str) -> str:
    """Fix the usual JSON slips with a single string-aware scan."""
    out: list[str] = []
    in_string = False
    i = 0
    n = len(payload)
    while i < n:
        ch = payload[i]
        if in_string:
            if ch == "\\":
                nxt = payload[i + 1] if i + 1 < n else ""
                if nxt and nxt in _SIMPLE_ESCAPES:
                    out.append(ch + nxt)
                    i += 2
                    continue
                if nxt == "u" and i + 6 <= n and set(payload[i + 2 : i + 6]) <= _HEX:
                    out.append(payload[i : i + 6])
                    i += 6
                    continue
                out.append("\\\\")
            elif ch == '"':
                in_string = False
                out.append(ch)
            elif ch == "\n":
                out.append("\\n")
            elif ch == "\t":
                out.append("\\t")
            elif ord(ch) < 0x20 or ch == "\x7f":
                pass
            else:
                out.append(ch)
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch == ",":
            j = i + 1
            while j < n and payload[j] in " \t\r\n":
                j += 1
            if j >= n or payload[j] not in "]}":
                out.append(ch)
        elif (ord(ch) < 0x20 and ch not in "\n\r\t") or ch == "\x7f":
            pass
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def collapse_whitespace(payload: str) -> str:
    flattened = payload.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return _WHITESPACE_RUN.sub(" ", flattened).strip()


def salvage_records(text: str, keys: Sequence[str]) -> list[dict]:
    """Parse flat ``{...}`` fragments one by one, keeping those with ``keys``."""
    records: list[dict] = []
    for match in _FLAT_OBJECT.finditer(text):
        fragment = _TRAILING_COMMA.sub(r"\1", collapse_whitespace(match.group(0)))
        value = _loads(fragment)
        if not isinstance(value, dict):
            continue
        if all(_has_content(value.get(k)) for k in keys):
            records.append(value)
    return records


def extract_structure(
    text: str, salvage_keys: Optional[Sequence[str]] = None
) -> RepairResult:
    """Decode the JSON array or object embedded in ``text``.

    ``salvage_keys`` enables the per-record salvage pass; pass the two keys
    every record must carry (e.g. ``("question", "answer")``).

    Raises ``NoJsonFound`` when the text has no brackets at all and
    ``MalformedAfterAllPasses`` when every pass failed.
    """
    attempts: list[RepairPass] = []

    def _done(value: Any, rpass: RepairPass) -> RepairResult:
        logger.debug("Repair succeeded with pass %s", rpass.value)
        return RepairResult(value=value, repair_pass=rpass, attempts=tuple(attempts))

    cleaned = strip_fences(text or "")
    payload = find_payload(cleaned)

    attempts.append(RepairPass.FENCE_STRIP)
    value = _loads_structure((text or "").strip())
    if value is None:
        value = _loads_structure(payload)
    if value is not None:
        return _done(value, RepairPass.FENCE_STRIP)

    attempts.append(RepairPass.SYNTAX_REPAIR)
    repaired = repair_syntax(payload) if payload is not None else None
    value = _loads_structure(repaired)
    if value is not None:
        return _done(value, RepairPass.SYNTAX_REPAIR)

    attempts.append(RepairPass.WHITESPACE_COLLAPSE)
    collapsed = collapse_whitespace(repaired) if repaired is not None else None
    value = _loads_structure(collapsed)
    if value is not None:
        return _done(value, RepairPass.WHITESPACE_COLLAPSE)

    if salvage_keys:
        attempts.append(RepairPass.RECORD_SALVAGE)
        records = salvage_records(cleaned, salvage_keys)
        if records:
            return _done(records, RepairPass.RECORD_SALVAGE)

    if payload is None:
        raise NoJsonFound("no JSON array or object in model output", tuple(attempts))
    raise MalformedAfterAllPasses(
        f"unparseable after {len(attempts)} repair passes", tuple(attempts)
    )


def _loads(text: Optional[str]) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _loads_structure(text: Optional[str]) -> Any:
    value = _loads(text)
    if isinstance(value, (list, dict)):
        return value
    return None


def _has_content(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
