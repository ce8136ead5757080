"""
Pydantic schemas for projects and their castings.

A project is a production (film, play, advert) that publishes one or
more castings.  Users apply to castings; the user document only keeps
the ids, and ``CastingApplicationRead`` is the resolved form returned
when listing a user's applications.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class CastingCreate(BaseModel):
    title: str = Field(..., description="Role or profile being cast")
    description: Optional[str] = None
    requirements: Optional[str] = None


class CastingRead(CastingCreate):
    id: str
    project: str = Field(..., description="Id of the project publishing the casting")


class ProjectCreate(BaseModel):
    """Schema for creating a project together with its castings."""

    title: str
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    castings: List[CastingCreate] = Field(default_factory=list)


class ProjectRead(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    castings: List[str] = Field(default_factory=list, description="Casting ids")


class CastingApplicationRead(BaseModel):
    project: ProjectRead
    castings: List[CastingRead]
