"""
Pydantic models for user data.

A user document embeds three profile records (personal, physical and
professional data).  These records have no identity of their own and
are frozen once built; updating a profile means replacing the whole
record.  ``UserRead`` is the public projection of a user and never
carries the password or the internal id.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class PersonalData(BaseModel):
    name: str = Field(..., description="First name")
    surname: str = Field(..., description="Last name")
    birth_date: Optional[date] = None
    sex: Optional[str] = None
    twins: Optional[bool] = Field(None, description="Whether the user has a twin sibling")
    province: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"frozen": True}


class PhysicalData(BaseModel):
    height: Optional[float] = Field(None, description="Height in metres")
    weight: Optional[float] = Field(None, description="Weight in kilograms")
    physical_condition: Optional[str] = None
    eyes: Optional[str] = None
    hair: Optional[str] = None
    ethnicity: Optional[str] = None
    beard: Optional[bool] = None
    tattoos: Optional[bool] = None
    piercings: Optional[bool] = None

    model_config = {"frozen": True}


class ProfessionalData(BaseModel):
    profession: str = Field(..., description="E.g. actor/actress, dancer, model")
    singing: Optional[bool] = None
    dancing: Optional[bool] = None
    other_abilities: Optional[str] = None
    previous_job_experiences: Optional[int] = Field(None, ge=0)
    curriculum: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class CastingApplication(BaseModel):
    """Castings a user applied to within one project."""

    project: str = Field(..., description="Project id")
    castings: List[str] = Field(default_factory=list, description="Casting ids, in application order")


class UserProfile(BaseModel):
    personal_data: PersonalData
    physical_data: PhysicalData
    professional_data: ProfessionalData
    videobook_link: Optional[str] = Field(None, description="Link to the user's video book")
    pics: List[str] = Field(default_factory=list, description="Image references")


class UserCreate(UserProfile):
    """Schema for registering a user."""

    email: str
    password: str


class UserCredentials(BaseModel):
    email: str
    password: str


class UserUpdate(UserProfile):
    """Schema for updating a user.

    ``email`` and ``password`` identify the account; every other field
    replaces the stored value.
    """

    email: str
    password: str
    new_email: str
    new_password: str


class CastingApplicationCreate(BaseModel):
    project_id: str
    casting_id: str


class UserRead(UserProfile):
    """Public projection of a user: no id, no password."""

    email: str
    castings: List[CastingApplication] = Field(default_factory=list)
