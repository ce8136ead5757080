"""Shared fixtures: a fresh SQLite document store per test and sample users."""

from datetime import date
from typing import Any, Dict

import pytest

from castme_api.app.core import db
from castme_api.app.core.config import settings
from castme_api.app.schemas.user import PersonalData, PhysicalData, ProfessionalData


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch) -> str:
    """Point the store at a temporary database file and migrate it."""
    path = str(tmp_path / "castme-test.db")
    monkeypatch.setattr(settings, "database_url", path)
    db.init_db()
    return path


@pytest.fixture
def user_data() -> Dict[str, Any]:
    return {
        "email": "aperacaula@gmail.com",
        "password": "12345",
        "personal_data": PersonalData(
            name="Alex",
            surname="Peracaula",
            birth_date=date(1993, 10, 7),
            sex="male",
            twins=True,
            province="Barcelona",
            phone="630075725",
        ),
        "physical_data": PhysicalData(
            height=1.77,
            weight=67,
            physical_condition="fit",
            eyes="green",
            hair="buzzed",
            ethnicity="caucasian",
            beard=True,
            tattoos=True,
            piercings=False,
        ),
        "professional_data": ProfessionalData(
            profession="actor/actress",
            singing=True,
            dancing=True,
            other_abilities="surfing",
            previous_job_experiences=20,
            curriculum=["The Importance of Being Earnest, TNC", "Hello World, E.G.Wells"],
        ),
        "videobook_link": "https://youtube.com",
        "pics": [],
    }


@pytest.fixture
def other_user_data() -> Dict[str, Any]:
    return {
        "email": "apr1993@hotmail.com",
        "password": "12345",
        "personal_data": PersonalData(
            name="Alexia",
            surname="Peracaula",
            birth_date=date(2000, 10, 7),
            sex="female",
            twins=True,
            province="Madrid",
            phone="630075726",
        ),
        "physical_data": PhysicalData(
            height=1.60,
            weight=61,
            physical_condition="fit",
            eyes="green",
            hair="brown",
            ethnicity="caucasian",
            beard=False,
            tattoos=False,
            piercings=False,
        ),
        "professional_data": ProfessionalData(
            profession="actor/actress",
            singing=False,
            dancing=True,
            other_abilities="yoga",
            previous_job_experiences=10,
            curriculum=["Here, Malnascuts"],
        ),
        "videobook_link": "https://youtube.com",
        "pics": [],
    }
