"""Helpers shared by the test modules."""

from typing import Any, Dict


def register_args(data: Dict[str, Any]) -> tuple:
    """Positional arguments of ``UserService.register_user`` for ``data``."""
    return (
        data["email"],
        data["password"],
        data["personal_data"],
        data["physical_data"],
        data["professional_data"],
        data["videobook_link"],
        data["pics"],
    )


def user_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """The stored form of a user, for writing fixtures straight to the store."""
    return {
        "email": data["email"],
        "password": data["password"],
        "personal_data": data["personal_data"].model_dump(mode="json"),
        "physical_data": data["physical_data"].model_dump(mode="json"),
        "professional_data": data["professional_data"].model_dump(mode="json"),
        "videobook_link": data["videobook_link"],
        "pics": data["pics"],
        "castings": [],
    }
