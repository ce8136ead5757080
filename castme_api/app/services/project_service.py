"""
Service layer for projects and castings.

Projects own their castings: creating a project also creates one
casting document per nested casting, and each casting records the id
of its project.  The user service only reads these documents.
"""

import logging
from typing import Any, List

from castme_api.app.core.db import store
from castme_api.app.core.errors import NotFoundError
from castme_api.app.core.validation import validate_model, validate_string
from castme_api.app.schemas.project import CastingRead, ProjectCreate, ProjectRead

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for managing projects and their castings."""

    @classmethod
    async def create_project(cls, data: Any) -> ProjectRead:
        """Insert a project and its castings and return the created project.

        If any write after the project insert fails, the documents
        created so far are deleted again before the error propagates.
        """
        validate_model(data, ProjectCreate, "project")
        validate_string(data.title, "project title")
        for casting in data.castings:
            validate_string(casting.title, "casting title")

        project = await store.create(
            "projects",
            data.model_dump(exclude={"castings"}) | {"castings": []},
        )
        casting_ids: List[str] = []
        try:
            for casting in data.castings:
                created = await store.create(
                    "castings", casting.model_dump() | {"project": project["id"]}
                )
                casting_ids.append(created["id"])
            if casting_ids:
                await store.update_one("projects", {"id": project["id"]}, {"castings": casting_ids})
        except Exception:
            logger.exception("Creating project %s failed, removing it", project["id"])
            await cls._remove_project(project["id"], casting_ids)
            raise
        project["castings"] = casting_ids
        logger.info("Created project %s with %d castings", project["id"], len(casting_ids))
        return ProjectRead.model_validate(project)

    @classmethod
    async def _remove_project(cls, project_id: str, casting_ids: List[str]) -> None:
        for casting_id in casting_ids:
            await store.delete_one("castings", {"id": casting_id})
        await store.delete_one("projects", {"id": project_id})

    @classmethod
    async def list_projects(cls) -> List[ProjectRead]:
        projects = await store.find_all("projects")
        return [ProjectRead.model_validate(project) for project in projects]

    @classmethod
    async def get_project(cls, project_id: Any) -> ProjectRead:
        validate_string(project_id, "project id")
        project = await store.find_by_id("projects", project_id)
        if project is None:
            raise NotFoundError(f"project with id {project_id} does not exist")
        return ProjectRead.model_validate(project)

    @classmethod
    async def get_casting(cls, casting_id: Any) -> CastingRead:
        validate_string(casting_id, "casting id")
        casting = await store.find_by_id("castings", casting_id)
        if casting is None:
            raise NotFoundError(f"casting with id {casting_id} does not exist")
        return CastingRead.model_validate(casting)
