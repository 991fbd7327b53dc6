"""Tests for the validation driver."""

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from tagval import (
    Cause,
    MappingRecord,
    NotAStructError,
    TagvalConfig,
    ValidationErrors,
    Validator,
    check,
    validate,
)


@dataclass
class User:
    ID: str = field(metadata={"validate": "len:36"})
    Name: str = ""
    Age: int = field(default=0, metadata={"validate": "min:18;max:50"})
    Email: str = field(default="", metadata={"validate": "min:3"})
    Role: str = field(default="admin", metadata={"validate": "in:admin,stuff"})
    meta: dict = field(default_factory=dict)


@dataclass
class Response:
    Code: int = field(metadata={"validate": "in:200,404,500"})
    Body: str = ""


class Token(BaseModel):
    header: str = Field(json_schema_extra={"validate": "len:4"})
    payload: str = ""


def _valid_user(**overrides) -> User:
    values = {
        "ID": "0" * 36,
        "Name": "Alice",
        "Age": 30,
        "Email": "a@b.c",
        "Role": "admin",
    }
    values.update(overrides)
    return User(**values)


class TestPreconditions:
    """Test inputs that are not records."""

    @pytest.mark.parametrize("value", [None, 42, "text", [1, 2], {"a": 1}, User])
    def test_non_record_raises_not_a_struct(self, value):
        with pytest.raises(NotAStructError):
            validate(value)

    def test_not_a_struct_is_a_type_error(self):
        with pytest.raises(TypeError):
            check(3.14)


class TestValidate:
    """Test the validate entry point."""

    def test_valid_record_returns_none(self):
        assert validate(_valid_user()) is None

    def test_len_failure(self):
        with pytest.raises(ValidationErrors) as exc_info:
            validate(_valid_user(ID="ab"))

        errors = exc_info.value
        assert len(errors) == 1
        assert errors.has(Cause.LEN_FAILED)
        assert str(errors) == "ID: len validation failed"

    def test_in_success_for_string(self):
        assert check(_valid_user(Role="stuff")).ok

    def test_in_failure_for_int(self):
        with pytest.raises(ValidationErrors) as exc_info:
            validate(Response(Code=7))

        assert exc_info.value.causes == [Cause.IN_FAILED]
        assert exc_info.value.errors[0].field == "Code"

    def test_pydantic_model(self):
        with pytest.raises(ValidationErrors) as exc_info:
            validate(Token(header="abc"))

        assert exc_info.value.has(Cause.LEN_FAILED)

    def test_errors_from_several_fields_are_attributed(self):
        with pytest.raises(ValidationErrors) as exc_info:
            validate(_valid_user(ID="short", Age=10, Role="guest"))

        errors = exc_info.value
        assert [(e.field, e.cause) for e in errors] == [
            ("ID", Cause.LEN_FAILED),
            ("Age", Cause.MIN_FAILED),
            ("Role", Cause.IN_FAILED),
        ]
        assert errors.has(Cause.MIN_FAILED)
        assert not errors.has(Cause.MAX_FAILED)


class TestCheck:
    """Test per-field semantics through check."""

    def test_untagged_fields_are_skipped(self):
        record = MappingRecord({"Name": 12345}, {"Name": ""})
        result = check(record)
        assert result.ok
        assert result.counters == {"fields_skipped": 1}

    def test_all_clauses_of_a_field_are_evaluated(self):
        record = MappingRecord({"Nick": "hi"}, {"Nick": "min:5;max:1"})
        result = check(record)
        assert [e.cause for e in result.errors] == [Cause.MIN_FAILED, Cause.MAX_FAILED]
        assert result.counters["rules_evaluated"] == 2

    def test_non_numeric_len_param_is_syntax_error_only(self):
        result = check(MappingRecord({"Code": "abc"}, {"Code": "len:abc"}))
        assert [e.cause for e in result.errors] == [Cause.INVALID_SYNTAX]

    def test_len_on_int_is_type_mismatch(self):
        result = check(MappingRecord({"Count": 3}, {"Count": "len:3"}))
        assert [e.cause for e in result.errors] == [Cause.TYPE_MISMATCH]
        assert not result.errors[0].is_cause(Cause.LEN_FAILED)

    def test_unexported_field_with_rules(self):
        record = MappingRecord({"_secret": "abc"}, {"_secret": "len:3;min:1"})
        result = check(record)
        assert [(e.field, e.cause) for e in result.errors] == [("_secret", Cause.UNEXPORTED_FIELD)]
        assert "rules_evaluated" not in result.counters

    def test_unexported_field_with_invalid_rules_reports_only_unexported(self):
        result = check(MappingRecord({"_x": 1}, {"_x": "garbage"}))
        assert [e.cause for e in result.errors] == [Cause.UNEXPORTED_FIELD]

    def test_unexported_dataclass_field(self):
        @dataclass
        class Secret:
            _pin: str = field(default="1234", metadata={"validate": "len:4"})

        result = check(Secret())
        assert [e.cause for e in result.errors] == [Cause.UNEXPORTED_FIELD]

    def test_missing_colon_aborts_field_only(self):
        record = MappingRecord(
            {"A": "x", "B": "toolong"},
            {"A": "min:5;nocolon;max:0", "B": "max:3"},
        )
        result = check(record)
        assert [(e.field, e.cause) for e in result.errors] == [
            ("A", Cause.INVALID_SYNTAX),
            ("B", Cause.MAX_FAILED),
        ]

    def test_unknown_kind_does_not_stop_sibling_clauses(self):
        record = MappingRecord({"A": "x"}, {"A": "regexp:x;min:5"})
        result = check(record)
        assert [e.cause for e in result.errors] == [Cause.INVALID_SYNTAX, Cause.MIN_FAILED]

    def test_repeated_checks_are_identical(self):
        user = _valid_user(ID="x", Age=99, Email="")
        first = check(user)
        second = check(user)
        assert first.errors == second.errors
        assert [str(e) for e in first.errors] == [str(e) for e in second.errors]

    @pytest.mark.parametrize("raw", [5, 0, [], ["len:1"]])
    def test_non_string_rule_value_is_syntax_error(self, raw):
        @dataclass
        class Counter:
            Count: int = field(default=3, metadata={"validate": raw})
            Name: str = field(default="ab", metadata={"validate": "len:1"})

        result = check(Counter())
        assert [(e.field, e.cause) for e in result.errors] == [
            ("Count", Cause.INVALID_SYNTAX),
            ("Name", Cause.LEN_FAILED),
        ]

    def test_non_string_rule_value_on_model(self):
        class Limits(BaseModel):
            size: int = Field(default=1, json_schema_extra={"validate": ["min:0"]})

        result = check(Limits())
        assert [e.cause for e in result.errors] == [Cause.INVALID_SYNTAX]

    def test_none_rule_value_is_skipped(self):
        result = check(MappingRecord({"A": 1}, {"A": None}))
        assert result.ok

    def test_duplicate_failures_are_not_deduplicated(self):
        result = check(MappingRecord({"A": "abc"}, {"A": "len:1;len:1"}))
        assert [e.cause for e in result.errors] == [Cause.LEN_FAILED, Cause.LEN_FAILED]

    def test_result_to_dict(self):
        result = check(MappingRecord({"A": "abc"}, {"A": "len:1"}))
        data = result.to_dict()
        assert data["ok"] is False
        assert data["exit_code"] == 1
        assert data["errors"] == [
            {"field": "A", "cause": "len_failed", "message": "A: len validation failed"}
        ]


class TestValidator:
    """Test Validator configuration."""

    def test_custom_tag_key(self):
        @dataclass
        class Item:
            Sku: str = field(default="x", metadata={"check": "len:3", "validate": "len:1"})

        validator = Validator(TagvalConfig(tag_key="check"))
        result = validator.check(Item())
        assert [e.cause for e in result.errors] == [Cause.LEN_FAILED]
        assert check(Item()).ok

    def test_validate_raises_aggregate(self):
        validator = Validator()
        with pytest.raises(ValidationErrors):
            validator.validate(MappingRecord({"A": 1}, {"A": "max:0"}))
