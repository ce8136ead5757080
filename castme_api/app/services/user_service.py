"""
Business logic for users.

The ``UserService`` validates the arguments of every operation, in
declaration order, and then orchestrates the document store.  The first
invalid argument decides the error raised.  Email uniqueness is
enforced by the store's unique index; a duplicate key reported by the
store becomes a ``ConflictError``.

Passwords are stored and compared verbatim (constant-time compare).
Credentials are re-verified before every update or deletion.
"""

import asyncio
import hmac
import logging
from typing import Any, Dict, List, Optional

from castme_api.app.core.db import DuplicateKeyError, store
from castme_api.app.core.errors import (
    ConflictError,
    InvalidValueError,
    NotFoundError,
    UnauthorizedError,
)
from castme_api.app.core.validation import (
    validate_model,
    validate_optional_string,
    validate_string,
    validate_string_list,
)
from castme_api.app.schemas.project import CastingApplicationRead, CastingRead, ProjectRead
from castme_api.app.schemas.user import PersonalData, PhysicalData, ProfessionalData, UserRead

logger = logging.getLogger(__name__)


def _passwords_match(stored: str, given: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), given.encode("utf-8"))


class UserService:
    """Service for user accounts and their casting applications."""

    @classmethod
    async def register_user(
        cls,
        email: Any,
        password: Any,
        personal_data: Any,
        physical_data: Any,
        professional_data: Any,
        videobook_link: Any = None,
        pics: Any = None,
    ) -> bool:
        """Create a new user with an empty casting list.

        Raises ``ConflictError`` if the email is already registered.
        """
        validate_string(email, "user email")
        validate_string(password, "user password")
        validate_model(personal_data, PersonalData, "personal data")
        validate_model(physical_data, PhysicalData, "physical data")
        validate_model(professional_data, ProfessionalData, "professional data")
        videobook_link = validate_optional_string(videobook_link, "videobook link")
        pics = validate_string_list(pics, "pics")

        email = email.strip()
        document = {
            "email": email,
            "password": password,
            "personal_data": personal_data.model_dump(mode="json"),
            "physical_data": physical_data.model_dump(mode="json"),
            "professional_data": professional_data.model_dump(mode="json"),
            "videobook_link": videobook_link,
            "pics": pics,
            "castings": [],
        }
        try:
            user = await store.create("users", document)
        except DuplicateKeyError as e:
            raise ConflictError(f"user with email {email} already exists") from e
        logger.info("Registered user %s (%s)", email, user["id"])
        return True

    @classmethod
    async def authenticate_user(cls, email: Any, password: Any) -> str:
        """Check the credentials and return the user id."""
        validate_string(email, "user email")
        validate_string(password, "user password")

        user = await cls._verify_credentials(email.strip(), password)
        logger.info("Authenticated user %s", user["id"])
        return user["id"]

    @classmethod
    async def retrieve_user(cls, user_id: Any) -> UserRead:
        """Return the public projection of a user."""
        validate_string(user_id, "user id")

        user = await cls._get_user(user_id)
        return UserRead.model_validate(user)

    @classmethod
    async def update_user(
        cls,
        email: Any,
        password: Any,
        new_email: Any,
        new_password: Any,
        personal_data: Any,
        physical_data: Any,
        professional_data: Any,
        videobook_link: Any = None,
        pics: Any = None,
    ) -> bool:
        """Replace the credentials and profile of an existing user.

        ``email`` and ``password`` must match the stored account.  The
        casting list is left untouched.  Raises ``ConflictError`` if
        ``new_email`` belongs to another user.
        """
        validate_string(email, "user email")
        validate_string(password, "user password")
        validate_string(new_email, "user new email")
        validate_string(new_password, "user new password")
        validate_model(personal_data, PersonalData, "personal data")
        validate_model(physical_data, PhysicalData, "physical data")
        validate_model(professional_data, ProfessionalData, "professional data")
        videobook_link = validate_optional_string(videobook_link, "videobook link")
        pics = validate_string_list(pics, "pics")

        new_email = new_email.strip()
        user = await cls._verify_credentials(email.strip(), password)

        if new_email != user["email"]:
            other = await store.find_one("users", {"email": new_email})
            if other is not None and other["id"] != user["id"]:
                raise ConflictError(f"user with email {new_email} already exists")

        changes = {
            "email": new_email,
            "password": new_password,
            "personal_data": personal_data.model_dump(mode="json"),
            "physical_data": physical_data.model_dump(mode="json"),
            "professional_data": professional_data.model_dump(mode="json"),
            "videobook_link": videobook_link,
            "pics": pics,
        }
        try:
            updated = await store.update_one("users", {"id": user["id"]}, changes)
        except DuplicateKeyError as e:
            # Another account took the email between the check and the write.
            raise ConflictError(f"user with email {new_email} already exists") from e
        if not updated:
            raise NotFoundError(f"user with id {user['id']} does not exist")
        logger.info("Updated user %s", user["id"])
        return True

    @classmethod
    async def unregister_user(cls, user_id: Any, email: Any, password: Any) -> bool:
        """Delete a user after checking that the credentials belong to it."""
        validate_string(user_id, "user id")
        validate_string(email, "user email")
        validate_string(password, "user password")

        user = await cls._get_user(user_id)
        if user["email"] != email.strip() or not _passwords_match(user["password"], password):
            raise UnauthorizedError("wrong credentials")

        deleted = await store.delete_one("users", {"id": user_id})
        if not deleted:
            raise NotFoundError(f"user with id {user_id} does not exist")
        logger.info("Unregistered user %s", user_id)
        return True

    @classmethod
    async def get_castings(cls, user_id: Any) -> List[CastingApplicationRead]:
        """Resolve the user's casting list into projects and castings.

        Entries are resolved concurrently; the result keeps the order of
        the stored casting list.
        """
        validate_string(user_id, "user id")

        user = await cls._get_user(user_id)
        entries = user.get("castings") or []
        resolved = await asyncio.gather(*(cls._resolve_application(entry) for entry in entries))
        return list(resolved)

    @classmethod
    async def apply_to_casting(cls, user_id: Any, project_id: Any, casting_id: Any) -> bool:
        """Add a casting to the user's applications for its project.

        Applying twice to the same casting changes nothing.
        """
        validate_string(user_id, "user id")
        validate_string(project_id, "project id")
        validate_string(casting_id, "casting id")

        user = await cls._get_user(user_id)
        project = await store.find_by_id("projects", project_id)
        if project is None:
            raise NotFoundError(f"project with id {project_id} does not exist")
        casting = await store.find_by_id("castings", casting_id)
        if casting is None:
            raise NotFoundError(f"casting with id {casting_id} does not exist")
        if casting.get("project") != project_id:
            raise InvalidValueError(f"casting {casting_id} does not belong to project {project_id}")

        def add_application(body: Dict[str, Any]) -> None:
            applications: List[Dict[str, Any]] = body.setdefault("castings", [])
            entry = next((item for item in applications if item["project"] == project_id), None)
            if entry is None:
                applications.append({"project": project_id, "castings": [casting_id]})
            elif casting_id not in entry["castings"]:
                entry["castings"].append(casting_id)

        # Runs under the store's write lock for this user document.
        updated = await store.modify_one("users", {"id": user["id"]}, add_application)
        if not updated:
            raise NotFoundError(f"user with id {user_id} does not exist")
        logger.info("User %s applied to casting %s of project %s", user_id, casting_id, project_id)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @classmethod
    async def _get_user(cls, user_id: str) -> Dict[str, Any]:
        user = await store.find_by_id("users", user_id)
        if user is None:
            raise NotFoundError(f"user with id {user_id} does not exist")
        return user

    @classmethod
    async def _verify_credentials(cls, email: str, password: str) -> Dict[str, Any]:
        user: Optional[Dict[str, Any]] = await store.find_one("users", {"email": email})
        if user is None:
            raise NotFoundError(f"user with email {email} does not exist")
        if not _passwords_match(user["password"], password):
            raise UnauthorizedError("wrong credentials")
        return user

    @classmethod
    async def _resolve_application(cls, entry: Dict[str, Any]) -> CastingApplicationRead:
        project = await store.find_by_id("projects", entry["project"])
        if project is None:
            raise NotFoundError(f"project with id {entry['project']} does not exist")
        castings = await store.find_by_ids("castings", entry["castings"])
        for casting_id, casting in zip(entry["castings"], castings):
            if casting is None:
                raise NotFoundError(f"casting with id {casting_id} does not exist")
        return CastingApplicationRead(
            project=ProjectRead.model_validate(project),
            castings=[CastingRead.model_validate(casting) for casting in castings],
        )
