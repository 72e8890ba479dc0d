"""
Behaviour shared by every storage backend.

The ``storage`` fixture is parametrized over the memory, SQLite and
SQLAlchemy backends, so each test here runs once per backend.
"""

from datetime import datetime, timedelta, timezone

import pytest

from student_records_api.app.core.exceptions import RecordNotFoundError
from student_records_api.app.schemas.student import StudentFields
from student_records_api.app.storage import memory, relational, sqlite


def _fields(name="Amy", age=21, gender="F", midterm=70.0, final=80.0) -> StudentFields:
    return StudentFields(name=name, age=age, gender=gender, midterm=midterm, final=final)


def test_create_assigns_id_and_timestamp(storage):
    before = datetime.now(timezone.utc)
    record = storage.create(_fields())
    assert record.id >= 1
    assert record.created_at.tzinfo is not None
    assert before - timedelta(seconds=1) <= record.created_at <= datetime.now(timezone.utc) + timedelta(seconds=1)
    assert (record.name, record.age, record.gender, record.midterm, record.final) == ("Amy", 21, "F", 70.0, 80.0)


def test_create_then_get_returns_equal_record(storage):
    created = storage.create(_fields(midterm=85.5, final=88.0))
    assert storage.get(created.id) == created


def test_ids_are_unique(storage):
    ids = {storage.create(_fields(name=f"S{i}")).id for i in range(5)}
    assert len(ids) == 5


def test_update_preserves_id_and_created_at(storage):
    created = storage.create(_fields())
    updated = storage.update(created.id, _fields(age=22, midterm=75.0, name="Amy B", gender="X", final=90.0))
    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert (updated.name, updated.age, updated.gender, updated.midterm, updated.final) == ("Amy B", 22, "X", 75.0, 90.0)
    assert storage.get(created.id) == updated


def test_update_unknown_id_raises(storage):
    with pytest.raises(RecordNotFoundError):
        storage.update(404, _fields())


def test_delete_then_get_raises(storage):
    created = storage.create(_fields())
    storage.delete(created.id)
    with pytest.raises(RecordNotFoundError):
        storage.get(created.id)


def test_second_delete_reports_not_found(storage):
    created = storage.create(_fields())
    storage.delete(created.id)
    with pytest.raises(RecordNotFoundError):
        storage.delete(created.id)


def test_deleted_ids_are_not_reused(storage):
    first = storage.create(_fields(name="A"))
    second = storage.create(_fields(name="B"))
    storage.delete(second.id)
    third = storage.create(_fields(name="C"))
    assert third.id not in (first.id, second.id)
    assert third.id > second.id


def test_deleting_first_record_does_not_cause_collision(storage):
    first = storage.create(_fields(name="A"))
    second = storage.create(_fields(name="B"))
    storage.delete(first.id)
    third = storage.create(_fields(name="C"))
    assert third.id != second.id
    assert storage.get(second.id).name == "B"


def test_zero_scores_are_stored(storage):
    created = storage.create(_fields(age=0, midterm=0.0, final=0.0))
    fetched = storage.get(created.id)
    assert (fetched.age, fetched.midterm, fetched.final) == (0, 0.0, 0.0)


class TestSearch:
    @pytest.fixture
    def seeded(self, storage):
        john = storage.create(_fields(name="John Doe", gender="M"))
        jane = storage.create(_fields(name="Jane Smith"))
        return storage, john, jane

    def test_name_substring_is_case_insensitive(self, seeded):
        storage, john, jane = seeded
        assert [r.id for r in storage.list("jane")] == [jane.id]
        assert [r.id for r in storage.list("SMI")] == [jane.id]
        assert [r.id for r in storage.list("doe")] == [john.id]

    def test_numeric_query_matches_id(self, seeded):
        storage, john, jane = seeded
        assert [r.id for r in storage.list(str(jane.id))] == [jane.id]

    def test_no_match_returns_empty(self, seeded):
        storage, _, _ = seeded
        assert storage.list("xyz") == []

    def test_shared_substring_matches_both(self, seeded):
        storage, john, jane = seeded
        assert {r.id for r in storage.list("j")} == {john.id, jane.id}

    def test_blank_query_lists_everything(self, seeded):
        storage, john, jane = seeded
        assert {r.id for r in storage.list("   ")} == {john.id, jane.id}
        assert {r.id for r in storage.list(None)} == {john.id, jane.id}

    def test_wildcard_characters_are_literal(self, seeded):
        storage, _, _ = seeded
        assert storage.list("%") == []
        assert storage.list("_") == []


def test_list_without_filter_is_most_recent_first(storage):
    ids = [storage.create(_fields(name=f"S{i}")).id for i in range(3)]
    assert [r.id for r in storage.list()] == list(reversed(ids))


def test_list_orders_by_created_at_not_id(storage, monkeypatch):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    # The first record gets the newest timestamp.
    stamps = iter([base + timedelta(hours=5), base + timedelta(hours=1), base + timedelta(hours=3)])

    def fake_now():
        return next(stamps)

    for module in (memory, sqlite, relational):
        monkeypatch.setattr(module, "utcnow", fake_now)

    first = storage.create(_fields(name="First"))
    second = storage.create(_fields(name="Second"))
    third = storage.create(_fields(name="Third"))
    assert [r.id for r in storage.list()] == [first.id, third.id, second.id]


def test_list_is_restartable(storage):
    storage.create(_fields())
    assert storage.list() == storage.list()


def test_reachable_backends_report_available(storage):
    assert storage.is_available() is True
    assert storage.describe()


@pytest.mark.parametrize("record_id", [0, -1, 2**63, 10**20])
def test_ids_outside_the_integer_column_are_not_found(storage, record_id):
    storage.create(_fields())
    with pytest.raises(RecordNotFoundError):
        storage.get(record_id)
    with pytest.raises(RecordNotFoundError):
        storage.update(record_id, _fields())
    with pytest.raises(RecordNotFoundError):
        storage.delete(record_id)


def test_oversized_numeric_query_matches_nothing(storage):
    storage.create(_fields())
    assert storage.list("99999999999999999999") == []


def test_underscored_number_is_not_an_id_query(storage):
    records = [storage.create(_fields(name=f"S{i}")) for i in range(10)]
    assert records[-1].id == 10
    assert [r.id for r in storage.list("10")] == [10]
    assert storage.list("1_0") == []


def test_search_uses_full_case_folding(storage):
    created = storage.create(_fields(name="Anna Straße"))
    assert [r.id for r in storage.list("STRASSE")] == [created.id]
    assert [r.id for r in storage.list("straße")] == [created.id]
