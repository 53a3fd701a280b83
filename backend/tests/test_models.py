"""
Tests for domain models and small helpers.
"""
import pytest

from mylife.core.models.base import is_id, new_id
from mylife.core.models.note import BookNote, HikeNote
from mylife.core.models.person import Person, format_middle_name, person_lookup_name
from mylife.core.models.tag import Role, Tag, has_role
from mylife.utils.arrays import canonical_key, contains_duplicates, duplicated_items
from mylife.utils.dates import is_calendar_date, is_iso8601


class TestTagRoles:
    def test_roles_reflect_flags(self):
        tag = Tag(name="Yoga", is_workout=True, is_tag=True)
        assert tag.roles == frozenset({Role.WORKOUT, Role.TAG})
        assert has_role(tag, Role.WORKOUT)
        assert not has_role(tag, Role.TYPE)

    def test_role_labels(self):
        assert [r.label for r in Role] == ["type", "tag", "workout", "person tag"]

    def test_wire_names(self):
        wire = Tag(name="Family", is_person=True).to_wire()
        assert wire["isPerson"] is True
        assert set(wire) == {"id", "name", "description", "isType", "isTag", "isWorkout", "isPerson", "createdAt", "updatedAt"}


class TestPersonName:
    def test_full_name(self):
        person = Person(first_name="Janet", preferred_name="Jan", middle_name="M", last_name="Doe")
        assert person.name == "Janet (Jan) M. Doe"
        assert person.lookup_name == "Janet M. Doe"

    def test_first_name_only(self):
        person = Person(first_name="Cher")
        assert person.name == "Cher"
        assert person.lookup_name == "Cher"

    @pytest.mark.parametrize("middle,expected", [("", ""), (None, ""), ("M", "M."), ("Maria", "Maria")])
    def test_middle_name(self, middle, expected):
        assert format_middle_name(middle) == expected

    def test_lookup_name_collapses_empty_parts(self):
        assert person_lookup_name("Janet", "", "Doe") == "Janet Doe"

    def test_name_is_rendered_but_not_stored(self):
        person = Person(first_name="Janet", last_name="Doe")
        assert person.to_wire()["name"] == "Janet Doe"
        assert "name" not in person.to_document()


class TestNoteModels:
    def test_book_document_round_trip(self):
        book = BookNote(
            type=new_id(),
            date="2020-09-13",
            title="The Handmaid's Tale",
            authors=["Margaret Atwood"],
            status="Completed",
            rating="9",
        )
        doc = book.to_document()

        assert doc["kind"] == "Book"
        assert doc["date"] == "2020-09-13"
        assert doc["rating"] == 9
        assert BookNote.model_validate(doc) == book

    def test_hike_metrics_ignore_unknown_keys(self):
        hike = HikeNote(type=new_id(), date="2020-09-13", title="Hike", metrics=[{"distance": "5.5", "heartRate": 120}])
        assert hike.metrics[0].distance == 5.5

    def test_sparse_metrics_dump_only_given_fields(self):
        hike = HikeNote(type=new_id(), date="2020-09-13", title="Hike", metrics=[{"dataSource": "GPS"}])

        assert hike.to_document()["metrics"] == [{"dataSource": "GPS"}]
        assert hike.to_wire()["metrics"] == [{"dataSource": "GPS"}]
        assert HikeNote.model_validate(hike.to_document()) == hike


class TestHelpers:
    def test_ids(self):
        assert is_id(new_id())
        assert not is_id("Travelling")
        assert not is_id(None)

    def test_canonical_key_ignores_order_and_nulls(self):
        assert canonical_key({"a": 1, "b": None, "c": [1, {"d": 2}]}) == canonical_key({"c": [1, {"d": 2}], "a": 1})

    def test_duplicated_items_in_first_seen_order(self):
        assert duplicated_items(["b", "a", "b", "c", "a", "b"]) == ["b", "a"]
        assert contains_duplicates([{"x": 1}, {"x": 1}])
        assert not contains_duplicates([{"x": 1}, {"x": 2}])

    @pytest.mark.parametrize("value,ok", [("2020-02-29", True), ("2019-02-29", False), ("2020-2-3", False), (20200101, False)])
    def test_calendar_dates(self, value, ok):
        assert is_calendar_date(value) is ok

    @pytest.mark.parametrize("value,ok", [("2020-09-13T08:15:00Z", True), ("2020-09-13", True), ("soon", False), ("", False)])
    def test_iso8601(self, value, ok):
        assert is_iso8601(value) is ok
