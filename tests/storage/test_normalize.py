"""Tests for notenbuch.storage.normalize module."""

from __future__ import annotations

import datetime

from notenbuch.model import GradeEntrySet, GradeLabel, Student
from notenbuch.storage.normalize import (
    EPOCH,
    normalize_grade_entry_set,
    normalize_roster,
    normalize_subjects,
    normalize_template,
)


class TestNormalizeTemplate(object):
    """Tests for normalize_template()."""

    def test_current_shape(self) -> None:
        """Point-carrying criteria keep their maximum."""
        tpl = normalize_template(
            "Ringen",
            {
                "name": "Ringen",
                "schoolSubject": "Sport",
                "descriptions": [{"text": "Griff", "maxPoints": 10}, {"text": "Stand"}],
                "totalPoints": 10,
                "timestamp": "2024-09-02T08:00:00Z",
            },
        )

        assert tpl is not None
        assert tpl.template_id == "Ringen"
        assert tpl.subject == "Sport"
        assert [(c.text, c.max_points) for c in tpl.criteria] == [("Griff", 10), ("Stand", None)]
        assert tpl.total_points == 10
        assert tpl.created_at == datetime.datetime(2024, 9, 2, 8, 0, tzinfo=datetime.UTC)

    def test_legacy_string_criteria(self) -> None:
        """Plain string criteria become label-graded criteria."""
        tpl = normalize_template(
            "Lesetest",
            {"name": "Lesetest", "schoolSubject": "Deutsch", "descriptions": ["Lesen", "Schreiben"]},
        )

        assert tpl is not None
        assert [c.text for c in tpl.criteria] == ["Lesen", "Schreiben"]
        assert not any(c.points_graded for c in tpl.criteria)

    def test_keyed_mapping_criteria(self) -> None:
        """Criteria stored as an index-keyed mapping are read in order."""
        tpl = normalize_template(
            "Lesetest",
            {"name": "Lesetest", "schoolSubject": "Deutsch", "descriptions": {"0": "Lesen", "1": "Schreiben"}},
        )

        assert tpl is not None
        assert [c.text for c in tpl.criteria] == ["Lesen", "Schreiben"]

    def test_blank_and_unreadable_criteria_are_dropped(self) -> None:
        """Criteria with blank text or an unknown shape are skipped."""
        tpl = normalize_template(
            "Lesetest",
            {"name": "Lesetest", "schoolSubject": "Deutsch", "descriptions": ["Lesen", "  ", 42, {"x": 1}]},
        )

        assert tpl is not None
        assert [c.text for c in tpl.criteria] == ["Lesen"]

    def test_invalid_max_points_become_label_graded(self) -> None:
        """A non-positive or non-numeric maximum is dropped."""
        tpl = normalize_template(
            "Test",
            {
                "name": "Test",
                "schoolSubject": "Deutsch",
                "descriptions": [
                    {"text": "A", "maxPoints": 0},
                    {"text": "B", "maxPoints": "x"},
                    {"text": "C", "maxPoints": "4"},
                ],
            },
        )

        assert tpl is not None
        assert [c.max_points for c in tpl.criteria] == [None, None, 4]

    def test_missing_timestamp_defaults_to_epoch(self) -> None:
        """Templates without a readable timestamp sort as oldest."""
        tpl = normalize_template("A", {"name": "A", "schoolSubject": "Deutsch", "timestamp": "gestern"})

        assert tpl is not None
        assert tpl.created_at == EPOCH

    def test_absent_is_none(self) -> None:
        """A missing record normalizes to None."""
        assert normalize_template("A", None) is None

    def test_unreadable_is_none(self) -> None:
        """Records without a name or subject are treated as absent."""
        assert normalize_template("A", "Lesetest") is None
        assert normalize_template("A", {"schoolSubject": "Deutsch"}) is None
        assert normalize_template("A", {"name": "A"}) is None


class TestNormalizeGradeEntrySet(object):
    """Tests for normalize_grade_entry_set()."""

    def test_legacy_flat_mapping(self) -> None:
        """A flat label mapping becomes the wrapper shape with no points."""
        es = normalize_grade_entry_set({"Lesen": "gut"})

        assert es == GradeEntrySet(grades={"Lesen": GradeLabel.Gut}, points={})
        assert es.to_record() == {"grades": {"Lesen": "gut"}, "points": {}}

    def test_wrapper_shape_is_identity(self) -> None:
        """The current wrapper shape reads back unchanged."""
        raw = {"grades": {"Griff": "sehr gut", "Lesen": "gut"}, "points": {"Griff": 9}}

        assert normalize_grade_entry_set(raw).to_record() == raw

    def test_wrapper_without_points(self) -> None:
        """Missing points default to an empty mapping."""
        es = normalize_grade_entry_set({"grades": {"Lesen": "gut"}})

        assert es.points == {}

    def test_unknown_labels_are_dropped(self) -> None:
        """Labels outside the scale are skipped along with their points."""
        es = normalize_grade_entry_set({"grades": {"A": "gut", "B": "super"}, "points": {"A": 8, "B": 3}})

        assert es.grades == {"A": GradeLabel.Gut}
        assert es.points == {"A": 8}

    def test_points_without_grade_are_dropped(self) -> None:
        """Points need a grade for the same criterion."""
        es = normalize_grade_entry_set({"grades": {"A": "gut"}, "points": {"A": 8, "Z": 2}})

        assert es.points == {"A": 8}

    def test_unreadable_points_keep_grades(self) -> None:
        """A points value that is not a mapping loses only the points."""
        for points in ([8], "8", 8):
            es = normalize_grade_entry_set({"grades": {"A": "gut"}, "points": points})

            assert es == GradeEntrySet(grades={"A": GradeLabel.Gut}, points={})

    def test_absent_or_unreadable_is_empty(self) -> None:
        """Missing and unreadable sets normalize to an empty set."""
        assert normalize_grade_entry_set(None) == GradeEntrySet()
        assert normalize_grade_entry_set(["gut"]) == GradeEntrySet()
        assert normalize_grade_entry_set({"Lesen": 3}) == GradeEntrySet()


class TestNormalizeRoster(object):
    """Tests for normalize_roster()."""

    def test_plain_names(self) -> None:
        """Name strings get an empty class."""
        assert normalize_roster(["Anna", "Ben"]) == [Student(name="Anna"), Student(name="Ben")]

    def test_records(self) -> None:
        """Records carry their class under Klasse or class."""
        roster = normalize_roster(
            [{"name": "Anna", "Klasse": "1A"}, {"name": "Ben", "class": "1B"}, {"name": "Cem"}]
        )

        assert [(s.name, s.class_name) for s in roster] == [("Anna", "1A"), ("Ben", "1B"), ("Cem", "")]

    def test_keyed_mapping(self) -> None:
        """A keyed mapping of either shape is read by its values."""
        roster = normalize_roster({"a": "Anna", "b": {"name": "Ben", "Klasse": "1B"}})

        assert [(s.name, s.class_name) for s in roster] == [("Anna", ""), ("Ben", "1B")]

    def test_unreadable_entries_are_dropped(self) -> None:
        """Entries without a name are skipped."""
        roster = normalize_roster(["Anna", {"Klasse": "1A"}, "", ["x"]])

        assert [s.name for s in roster] == ["Anna"]

    def test_current_shape_record(self) -> None:
        """Students dump into the current roster shape."""
        assert Student(name="Anna").to_record() == {"name": "Anna", "Klasse": ""}

    def test_absent_is_empty(self) -> None:
        assert normalize_roster(None) == []


class TestNormalizeSubjects(object):
    """Tests for normalize_subjects()."""

    def test_list_and_mapping(self) -> None:
        """Subjects are read from a list or keyed mapping."""
        assert normalize_subjects(["Deutsch", "Sport"]) == ["Deutsch", "Sport"]
        assert normalize_subjects({"0": "Deutsch", "1": "Sport"}) == ["Deutsch", "Sport"]

    def test_non_strings_are_dropped(self) -> None:
        assert normalize_subjects(["Deutsch", 3, "", None]) == ["Deutsch"]

    def test_scalar_is_empty(self) -> None:
        assert normalize_subjects("Deutsch") == []
