# tests/conftest.py
import os

# Settings are read at import time; point them at an in-memory store first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENV"] = "dev"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from datetime import datetime, timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient

from classroom_api.core.db import DatabaseManager, get_db
from classroom_api.core.request_guard import AllowAllGuard
from classroom_api.main import app
from classroom_api.models import Base, Class, Department, Enrollment, Subject, User

BASE_TIME = datetime(2026, 1, 1, 9, 0, 0)


@pytest.fixture(scope="function")
def db_manager():
    """A fresh in-memory database with every table created."""
    manager = DatabaseManager("sqlite:///:memory:")
    manager.initialize()
    Base.metadata.create_all(bind=manager.engine)
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def db_session(db_manager):
    session = db_manager.SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_manager):
    """
    TestClient whose routes use the per-test database.
    Server exceptions are turned into responses so the 500 envelope is observable.
    """
    def override_get_db():
        yield from db_manager.get_session()

    app.dependency_overrides[get_db] = override_get_db
    app.state.request_guard = AllowAllGuard()
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class Seeder:
    """Inserts rows with increasing created_at so ordering is predictable."""

    def __init__(self, session):
        self.session = session
        self._ticks = count(1)

    def _stamp(self, at=None):
        moment = at or BASE_TIME + timedelta(minutes=next(self._ticks))
        return {"created_at": moment, "updated_at": moment}

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def user(self, user_id, name=None, role="student", email=None, at=None):
        name = name or user_id.title()
        return self._save(User(
            id=user_id,
            name=name,
            email=email or f"{user_id}@school.test",
            role=role,
            **self._stamp(at),
        ))

    def department(self, code, name=None):
        return self._save(Department(code=code, name=name or code, **self._stamp()))

    def subject(self, department, code, name=None):
        return self._save(Subject(
            department_id=department.id,
            code=code,
            name=name or code,
            **self._stamp(),
        ))

    def klass(self, subject, teacher, name, invite_code=None):
        return self._save(Class(
            subject_id=subject.id,
            teacher_id=teacher.id,
            name=name,
            invite_code=invite_code or f"inv{next(self._ticks):04d}",
            **self._stamp(),
        ))

    def enroll(self, student, class_obj):
        return self._save(Enrollment(student_id=student.id, class_id=class_obj.id, **self._stamp()))


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)


@pytest.fixture
def campus(seed):
    """
    A small school:
      - Science holds Physics (2 classes) and Chemistry (1 class); Arts holds Drawing (no classes)
      - Ada teaches both Physics classes, Grace teaches Chemistry
      - Sam is enrolled in both Physics classes and Chemistry; Lee only in Physics A
    """
    admin = seed.user("admin-1", name="Root Admin", role="admin")
    ada = seed.user("teacher-ada", name="Ada Lovelace", role="teacher")
    grace = seed.user("teacher-grace", name="Grace Hopper", role="teacher")
    sam = seed.user("student-sam", name="Sam Carter", role="student")
    lee = seed.user("student-lee", name="Lee Adams", role="student")

    science = seed.department("SCI", name="Science")
    arts = seed.department("ART", name="Arts")

    physics = seed.subject(science, "PHY101", name="Physics")
    chemistry = seed.subject(science, "CHE101", name="Chemistry")
    drawing = seed.subject(arts, "DRW101", name="Drawing")

    physics_a = seed.klass(physics, ada, "Physics A", invite_code="phya001")
    physics_b = seed.klass(physics, ada, "Physics B", invite_code="phyb001")
    chemistry_a = seed.klass(chemistry, grace, "Chemistry A", invite_code="chea001")

    seed.enroll(sam, physics_a)
    seed.enroll(sam, physics_b)
    seed.enroll(sam, chemistry_a)
    seed.enroll(lee, physics_a)

    return {
        "admin": admin,
        "ada": ada,
        "grace": grace,
        "sam": sam,
        "lee": lee,
        "science": science,
        "arts": arts,
        "physics": physics,
        "chemistry": chemistry,
        "drawing": drawing,
        "physics_a": physics_a,
        "physics_b": physics_b,
        "chemistry_a": chemistry_a,
    }
