import pydantic as p

from notenbuch.model import Student

from .base import BaseSettings


class RosterSettings(BaseSettings):
    """Values seeded into the store when subjects or students are missing."""

    default_subjects: list[str] = p.Field(default_factory=lambda: ["Deutsch"])
    default_students: list[Student] = p.Field(default_factory=list)
