"""Root collections of the shared store namespace."""

import typing as t

from .kv import join

SUBJECTS: t.Final = "subjects"
STUDENTS: t.Final = "students"
STUDENTS_LEGACY: t.Final = "students_legacy"
TEMPLATES: t.Final = "templates"
GRADES: t.Final = "grades"


def template(template_id: str) -> str:
    return join(TEMPLATES, template_id)


def grade_entry_set(subject: str, template_id: str, student: str) -> str:
    return join(GRADES, subject, template_id, student)
