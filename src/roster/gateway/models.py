"""Data models for the student gateway."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_INTEGER_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class StudentRecord:
    """A student as owned by the remote API.

    Attributes:
        id: Server-assigned identifier, never set by the client.
        name: Display name.
        email: Contact address, not validated locally.
        age: Age in years.
    """

    id: int
    name: str
    email: str
    age: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentRecord:
        return cls(id=data["id"], name=data["name"], email=data["email"], age=data["age"])


def coerce_age(text: str) -> int | None:
    """Read the leading integer of ``text``.

    Leading whitespace and a sign are accepted and trailing garbage is
    ignored ("22 years" -> 22). Only ASCII digits count. Text without leading
    digits gives None, which is sent as JSON null and left for the server to
    reject.
    """
    match = _INTEGER_PREFIX.match(text)
    if match is None:
        return None
    return int(match.group(1))
