"""Pytest fixtures for notenbuch tests.

Storage functions take the store as a keyword argument, so tests run against a
fresh in-memory store per test and never need the DI container. Use the
factory fixtures to put templates into the store:

    async def test_something(store, template_factory):
        tpl = await template_factory(name="Ringen", criteria=[("Griff", 10)])
"""

from __future__ import annotations

import datetime
import typing as t

import pytest

from notenbuch.core import TimestampProvider
from notenbuch.lib.json import JSONValue
from notenbuch.model import AssessmentTemplate, Student
from notenbuch.storage import template as template_storage
from notenbuch.storage.errors import StoreUnavailableError
from notenbuch.storage.kv import InMemoryKeyValueStore
from notenbuch.storage.roster import Roster
from notenbuch.storage.template import CriterionParams, TemplateCreateParams

FIXED_NOW = datetime.datetime(2024, 9, 2, 8, 0, tzinfo=datetime.UTC)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """A fresh, empty in-memory store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def utcnow() -> TimestampProvider:
    """Provide a fixed timestamp provider for tests."""
    return lambda: FIXED_NOW


@pytest.fixture
def known_subjects() -> list[str]:
    return ["Deutsch", "Sport", "Mathematik"]


@pytest.fixture
def students() -> list[Student]:
    return [
        Student(name="Anna", class_name="1A"),
        Student(name="Benjamin", class_name="1B"),
        Student(name="Clara", class_name="1A"),
    ]


@pytest.fixture
def roster(store: InMemoryKeyValueStore, known_subjects: list[str], students: list[Student]) -> Roster:
    """Roster seeded with the test subjects and students on first load."""
    return Roster(store, default_subjects=known_subjects, default_students=students)


@pytest.fixture
def template_factory(
    store: InMemoryKeyValueStore,
    utcnow: TimestampProvider,
    known_subjects: list[str],
) -> t.Callable[..., t.Awaitable[AssessmentTemplate]]:
    """Factory fixture for saving templates.

    Criteria are given as plain texts (label-graded) or ``(text, max_points)``
    pairs (points-graded).
    """

    async def create_template(
        name: str = "Lesetest",
        subject: str = "Deutsch",
        criteria: t.Sequence[str | tuple[str, int]] = ("Lesen", "Schreiben"),
        total_points: int | None = None,
    ) -> AssessmentTemplate:
        params = TemplateCreateParams(
            name=name,
            subject=subject,
            criteria=tuple(
                CriterionParams(text=c) if isinstance(c, str) else CriterionParams(text=c[0], max_points=c[1])
                for c in criteria
            ),
            total_points=total_points,
        )
        return await template_storage.save(params, known_subjects=known_subjects, store=store, utcnow=utcnow)

    return create_template


class FailingStore(object):
    """Store double whose operations fail once `fail` is set.

    Delegates to an in-memory store until then, so tests can prepare data and
    switch the backend off afterwards.
    """

    def __init__(self, data: dict[str, JSONValue] | None = None) -> None:
        self.inner = InMemoryKeyValueStore(data)
        self.fail = False
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, path: str) -> None:
        self.calls.append((operation, path))
        if self.fail:
            raise StoreUnavailableError(operation, path, ConnectionError("connection refused"))

    async def get(self, path: str) -> JSONValue:
        self._check("get", path)
        return await self.inner.get(path)

    async def set(self, path: str, value: JSONValue) -> None:
        self._check("set", path)
        await self.inner.set(path, value)

    async def remove(self, path: str) -> None:
        self._check("remove", path)
        await self.inner.remove(path)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
