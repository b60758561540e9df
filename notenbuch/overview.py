"""Results of every student on one template, laid out as a table."""

from __future__ import annotations

import collections

from notenbuch.model import AssessmentTemplate, BaseModel, Criterion, GradeEntrySet, GradeLabel, Student
from notenbuch.storage import grade as grade_storage
from notenbuch.storage import template as template_storage
from notenbuch.storage.kv import KeyValueStore
from notenbuch.storage.roster import Roster


class OverviewCell(BaseModel):
    grade: GradeLabel | None = None
    points: int | None = None
    max_points: int | None = None

    @property
    def display(self) -> str:
        if self.points is not None and self.max_points is not None:
            return f"{self.points}/{self.max_points}"
        return self.grade.value if self.grade else ""


class OverviewRow(BaseModel):
    student: Student
    cells: list[OverviewCell]


class Overview(BaseModel):
    template: AssessmentTemplate
    rows: list[OverviewRow]

    @property
    def criteria(self) -> list[Criterion]:
        return self.template.criteria

    def column(self, criterion: str) -> list[OverviewCell]:
        i = next((i for i, c in enumerate(self.criteria) if c.text == criterion), None)
        if i is None:
            raise KeyError(criterion)
        return [row.cells[i] for row in self.rows]

    def grade_counts(self, criterion: str) -> dict[GradeLabel, int]:
        """Number of students per grade for one criterion, best grade first."""
        counts = collections.Counter(cell.grade for cell in self.column(criterion) if cell.grade)
        return {label: counts[label] for label in sorted(GradeLabel, key=lambda g: g.rank)}

    @classmethod
    def build(
        cls,
        template: AssessmentTemplate,
        entries: dict[str, GradeEntrySet],
        students: list[Student],
    ) -> Overview:
        rows = []
        for s in students:
            es = entries.get(s.name, GradeEntrySet())
            cells = []
            for c in template.criteria:
                entry = es.entry(c.text)
                cells.append(
                    OverviewCell(
                        grade=entry.grade if entry else None,
                        points=entry.points if entry else None,
                        max_points=c.max_points,
                    )
                )
            rows.append(OverviewRow(student=s, cells=cells))
        return cls(template=template, rows=rows)


async def load(subject: str, template_id: str, *, roster: Roster, store: KeyValueStore) -> Overview | None:
    """Overview of a template for every student on the roster.

    Returns:
        None if the template does not exist or belongs to another subject
    """
    template = await template_storage.get(template_id, store=store)
    if template is None or template.subject != subject:
        return None
    students = roster.students
    entries = await grade_storage.find(subject, template_id, [s.name for s in students], store=store)
    return Overview.build(template, entries, students)
