"""
Argument checks shared by the services.

Each helper raises on failure and returns the checked value, so
services validate their arguments one after the other and the first
invalid argument decides the reported error.
"""

from typing import Any, List, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from .errors import InvalidTypeError, InvalidValueError, LogicError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_string(value: Any, field: str) -> str:
    """Require a non-blank string.

    Raises ``InvalidTypeError`` if ``value`` is not a ``str`` and
    ``InvalidValueError`` if it is empty or only whitespace.
    """
    if not isinstance(value, str):
        raise InvalidTypeError(f"{field} is not a string")
    if not value.strip():
        raise InvalidValueError(f"{field} is empty or blank")
    return value


def validate_optional_string(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    return validate_string(value, field)


def validate_model(value: Any, model: Type[ModelT], field: str) -> ModelT:
    """Require an instance of the given pydantic model."""
    if not isinstance(value, model):
        raise InvalidTypeError(f"{field} is not what it should be")
    return value


def validate_string_list(value: Any, field: str) -> List[str]:
    """Require a list of strings; ``None`` counts as an empty list."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidTypeError(f"{field} is not a list of strings")
    return list(value)


# Request body fields in the order the services check them, with the
# names used in their error messages.
REQUEST_FIELDS = {
    "user_id": "user id",
    "email": "user email",
    "password": "user password",
    "new_email": "user new email",
    "new_password": "user new password",
    "personal_data": "personal data",
    "physical_data": "physical data",
    "professional_data": "professional data",
    "videobook_link": "videobook link",
    "pics": "pics",
    "project_id": "project id",
    "casting_id": "casting id",
    "title": "project title",
}

_RECORD_FIELDS = {"personal_data", "physical_data", "professional_data", "castings"}


def _field_rank(error: Mapping[str, Any]) -> int:
    loc = error.get("loc", ())
    name = loc[1] if len(loc) > 1 else None
    order = list(REQUEST_FIELDS)
    return order.index(name) if name in order else len(order)


def error_from_request(errors: Sequence[Mapping[str, Any]]) -> LogicError:
    """Turn pydantic request errors into the error the services would raise.

    Only the first offending field, in service check order, is reported.
    """
    error = min(errors, key=_field_rank)
    loc = [part for part in error.get("loc", ()) if part != "body"]
    if not loc:
        return InvalidTypeError("request body is not what it should be")

    name = str(loc[0])
    label = REQUEST_FIELDS.get(name, name.replace("_", " "))
    kind = error.get("type", "")
    if name == "pics":
        return InvalidTypeError(f"{label} is not a list of strings")
    if name in _RECORD_FIELDS or len(loc) > 1:
        return InvalidTypeError(f"{label} is not what it should be")
    if kind == "missing" or kind.endswith("_type"):
        return InvalidTypeError(f"{label} is not a string")
    return InvalidValueError(f"{label} is not valid: {error.get('msg', kind)}")
