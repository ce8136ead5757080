"""
User endpoints for API v1.

Provide registration, login, profile retrieval and update, account
removal and the casting applications of a user.  Failures raised by
``UserService`` are turned into HTTP responses by the exception handler
installed in ``main.create_app``.
"""

from typing import List

from fastapi import APIRouter, status

from castme_api.app.schemas.project import CastingApplicationRead
from castme_api.app.schemas.user import (
    CastingApplicationCreate,
    UserCreate,
    UserCredentials,
    UserRead,
    UserUpdate,
)
from castme_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate) -> dict:
    """Register a new user.  Answers 409 if the email is taken."""
    await UserService.register_user(
        user.email,
        user.password,
        user.personal_data,
        user.physical_data,
        user.professional_data,
        user.videobook_link,
        user.pics,
    )
    return {"status": "OK"}


@router.post("/auth")
async def authenticate_user(credentials: UserCredentials) -> dict:
    """Check email and password and return the user id."""
    user_id = await UserService.authenticate_user(credentials.email, credentials.password)
    return {"id": user_id}


@router.get("/{user_id}", response_model=UserRead)
async def retrieve_user(user_id: str) -> UserRead:
    return await UserService.retrieve_user(user_id)


@router.patch("/")
async def update_user(user: UserUpdate) -> dict:
    """Replace credentials and profile of the account identified by
    ``email`` and ``password``."""
    await UserService.update_user(
        user.email,
        user.password,
        user.new_email,
        user.new_password,
        user.personal_data,
        user.physical_data,
        user.professional_data,
        user.videobook_link,
        user.pics,
    )
    return {"status": "OK"}


@router.delete("/{user_id}")
async def unregister_user(user_id: str, credentials: UserCredentials) -> dict:
    """Delete the account.  The body must carry its email and password."""
    await UserService.unregister_user(user_id, credentials.email, credentials.password)
    return {"status": "OK"}


@router.get("/{user_id}/castings", response_model=List[CastingApplicationRead])
async def get_castings(user_id: str) -> List[CastingApplicationRead]:
    return await UserService.get_castings(user_id)


@router.post("/{user_id}/castings", status_code=status.HTTP_201_CREATED)
async def apply_to_casting(user_id: str, application: CastingApplicationCreate) -> dict:
    await UserService.apply_to_casting(user_id, application.project_id, application.casting_id)
    return {"status": "OK"}
