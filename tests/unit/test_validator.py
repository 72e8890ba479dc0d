import pytest

from student_records_api.app.core.exceptions import (
    InvalidFieldError,
    MissingFieldError,
    RecordValidationError,
)
from student_records_api.app.services.validator import REQUIRED_FIELDS, validate


def _complete(**overrides):
    data = {"name": "Amy", "age": 21, "gender": "F", "midterm": 70.5, "final": 80}
    data.update(overrides)
    return data


def test_valid_record_is_coerced():
    fields = validate(_complete())
    assert fields.name == "Amy"
    assert fields.age == 21
    assert fields.gender == "F"
    assert fields.midterm == 70.5
    assert isinstance(fields.final, float) and fields.final == 80.0


def test_missing_name_reported_before_age():
    data = _complete()
    del data["name"]
    del data["age"]
    with pytest.raises(MissingFieldError) as exc_info:
        validate(data)
    assert exc_info.value.field == "name"
    assert exc_info.value.message == "Name is required"


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_each_field_is_required(field):
    data = _complete()
    data[field] = None
    with pytest.raises(MissingFieldError) as exc_info:
        validate(data)
    assert exc_info.value.field == field


def test_fields_checked_in_fixed_order():
    with pytest.raises(MissingFieldError) as exc_info:
        validate({"final": 1})
    assert exc_info.value.field == "name"
    with pytest.raises(MissingFieldError) as exc_info:
        validate({"name": "Amy", "age": 3, "final": 1})
    assert exc_info.value.field == "gender"


@pytest.mark.parametrize("field", ["name", "gender"])
@pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
def test_blank_text_counts_as_missing(field, blank):
    with pytest.raises(MissingFieldError) as exc_info:
        validate(_complete(**{field: blank}))
    assert exc_info.value.field == field


def test_zero_values_are_not_missing():
    fields = validate(_complete(age=0, midterm=0, final=0))
    assert (fields.age, fields.midterm, fields.final) == (0, 0.0, 0.0)


def test_text_is_trimmed():
    fields = validate(_complete(name="  Amy Lee ", gender=" F "))
    assert fields.name == "Amy Lee"
    assert fields.gender == "F"


def test_numeric_strings_are_accepted():
    fields = validate(_complete(age="22", midterm="70", final="81.5"))
    assert fields.age == 22
    assert fields.midterm == 70.0
    assert fields.final == 81.5


@pytest.mark.parametrize(
    "field,value",
    [("age", "twenty"), ("age", 21.5), ("midterm", "abc"), ("final", [80]), ("name", 42)],
)
def test_incoherent_types_are_rejected(field, value):
    with pytest.raises(InvalidFieldError) as exc_info:
        validate(_complete(**{field: value}))
    assert exc_info.value.field == field


def test_booleans_are_rejected():
    with pytest.raises(InvalidFieldError) as exc_info:
        validate(_complete(age=True))
    assert exc_info.value.field == "age"


@pytest.mark.parametrize("candidate", [None, [], "Amy", 5])
def test_non_object_body_is_rejected(candidate):
    with pytest.raises(RecordValidationError):
        validate(candidate)


def test_extra_fields_are_ignored():
    fields = validate(_complete(id=99, created_at="yesterday"))
    assert not hasattr(fields, "id")


@pytest.mark.parametrize("field", ["midterm", "final"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN", "Infinity"])
def test_non_finite_scores_are_rejected(field, value):
    with pytest.raises(InvalidFieldError) as exc_info:
        validate(_complete(**{field: value}))
    assert exc_info.value.field == field


@pytest.mark.parametrize("age", [-1, 151, 10**20])
def test_age_out_of_range_is_rejected(age):
    with pytest.raises(InvalidFieldError) as exc_info:
        validate(_complete(age=age))
    assert exc_info.value.field == "age"
    assert exc_info.value.message.startswith("Age is invalid")


def test_age_bounds_are_inclusive():
    assert validate(_complete(age=0)).age == 0
    assert validate(_complete(age=150)).age == 150
