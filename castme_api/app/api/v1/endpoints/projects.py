"""
Project endpoints for API v1.

Projects are created together with their castings.  Listing and
retrieval are open so clients can show the castings a user may apply
to.
"""

from typing import List

from fastapi import APIRouter, status

from castme_api.app.schemas.project import CastingRead, ProjectCreate, ProjectRead
from castme_api.app.services.project_service import ProjectService

router = APIRouter()


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(project_in: ProjectCreate) -> ProjectRead:
    return await ProjectService.create_project(project_in)


@router.get("/", response_model=List[ProjectRead])
async def list_projects() -> List[ProjectRead]:
    return await ProjectService.list_projects()


# Declared before ``/{project_id}`` so the literal segment wins.
@router.get("/castings/{casting_id}", response_model=CastingRead)
async def get_casting(casting_id: str) -> CastingRead:
    return await ProjectService.get_casting(casting_id)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(project_id: str) -> ProjectRead:
    """Retrieve a single project by id.  Answers 404 if missing."""
    return await ProjectService.get_project(project_id)
