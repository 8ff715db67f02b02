"""Search filter over the student list."""

from __future__ import annotations

from collections.abc import Iterable

from roster.gateway import StudentRecord


def filter_students(students: Iterable[StudentRecord], term: str) -> list[StudentRecord]:
    """Keep students whose name or email contains ``term``, ignoring case.

    An empty term keeps everything. Order is preserved.
    """
    needle = term.lower()
    return [
        student
        for student in students
        if needle in student.name.lower() or needle in student.email.lower()
    ]
