"""Unit tests for the argument validation helpers."""

import pytest

from castme_api.app.core.errors import InvalidTypeError, InvalidValueError
from castme_api.app.core.validation import (
    error_from_request,
    validate_model,
    validate_optional_string,
    validate_string,
    validate_string_list,
)
from castme_api.app.schemas.user import PersonalData, PhysicalData


class TestValidateString:
    def test_returns_value_unchanged(self):
        assert validate_string(" a@b.com ", "user email") == " a@b.com "

    @pytest.mark.parametrize("value", [None, 42, 1.5, ["x"], {"a": 1}, b"bytes"])
    def test_non_string_is_invalid_type(self, value):
        with pytest.raises(InvalidTypeError, match="^user email is not a string$"):
            validate_string(value, "user email")

    @pytest.mark.parametrize("value", ["", "     ", "\t\n"])
    def test_blank_is_invalid_value(self, value):
        with pytest.raises(InvalidValueError, match="^user id is empty or blank$"):
            validate_string(value, "user id")

    def test_error_kinds(self):
        with pytest.raises(InvalidTypeError) as type_error:
            validate_string(None, "x")
        with pytest.raises(InvalidValueError) as value_error:
            validate_string("", "x")
        assert type_error.value.kind == "InvalidType"
        assert value_error.value.kind == "InvalidValue"
        assert isinstance(type_error.value, TypeError)
        assert isinstance(value_error.value, ValueError)


def test_optional_string_accepts_none():
    assert validate_optional_string(None, "videobook link") is None
    with pytest.raises(InvalidValueError, match="videobook link is empty or blank"):
        validate_optional_string("  ", "videobook link")


class TestValidateModel:
    def test_accepts_instance(self):
        data = PersonalData(name="Alex", surname="Peracaula")
        assert validate_model(data, PersonalData, "personal data") is data

    @pytest.mark.parametrize("value", [None, "", {"name": "Alex", "surname": "P"}])
    def test_rejects_untyped_values(self, value):
        with pytest.raises(InvalidTypeError, match="^personal data is not what it should be$"):
            validate_model(value, PersonalData, "personal data")

    def test_rejects_other_model(self):
        with pytest.raises(InvalidTypeError):
            validate_model(PhysicalData(), PersonalData, "personal data")


class TestValidateStringList:
    def test_none_is_empty(self):
        assert validate_string_list(None, "pics") == []

    def test_returns_copy(self):
        pics = ["a.png"]
        result = validate_string_list(pics, "pics")
        assert result == pics
        assert result is not pics

    @pytest.mark.parametrize("value", ["a.png", [1], ("a.png",)])
    def test_rejects_non_lists(self, value):
        with pytest.raises(InvalidTypeError, match="pics is not a list of strings"):
            validate_string_list(value, "pics")


class TestErrorFromRequest:
    def test_first_field_in_check_order_wins(self):
        error = error_from_request(
            [
                {"loc": ("body", "personal_data", "surname"), "type": "missing", "msg": "Field required"},
                {"loc": ("body", "password"), "type": "string_type", "msg": "Input should be a valid string"},
            ]
        )
        assert isinstance(error, InvalidTypeError)
        assert error.message == "user password is not a string"

    def test_pics_and_records(self):
        assert error_from_request([{"loc": ("body", "pics", 0), "type": "string_type"}]).message == (
            "pics is not a list of strings"
        )
        assert error_from_request([{"loc": ("body", "physical_data"), "type": "model_type"}]).message == (
            "physical data is not what it should be"
        )

    def test_whole_body_and_other_values(self):
        assert error_from_request([{"loc": ("body",), "type": "json_invalid"}]).message == (
            "request body is not what it should be"
        )
        error = error_from_request([{"loc": ("body", "email"), "type": "string_too_long", "msg": "too long"}])
        assert isinstance(error, InvalidValueError)
        assert error.message == "user email is not valid: too long"
