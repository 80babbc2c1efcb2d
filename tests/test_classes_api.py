# tests/test_classes_api.py
import re
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select

from classroom_api.core.db import get_db
from classroom_api.main import app
from classroom_api.models import Class
from classroom_api.services.class_service import generate_invite_code


def _new_class_payload(campus, **overrides):
    payload = {
        "name": "Physics C",
        "teacherId": campus["ada"].id,
        "subjectId": campus["physics"].id,
        "description": "Evening section",
    }
    payload.update(overrides)
    return payload


class TestInviteCode:

    def test_shape(self):
        for _ in range(50):
            assert re.fullmatch(r"[0-9a-z]{7}", generate_invite_code())

    def test_codes_vary(self):
        codes = {generate_invite_code() for _ in range(20)}
        assert len(codes) > 1


class TestCreateClass:

    def test_create_sets_invite_code_and_empty_schedules(self, client, campus, db_session):
        # Act
        response = client.post("/classes", json=_new_class_payload(campus))

        # Assert
        assert response.status_code == 201
        new_id = response.json()["data"]["id"]
        created = db_session.execute(select(Class).where(Class.id == new_id)).scalar_one()
        assert re.fullmatch(r"[0-9a-z]{7}", created.invite_code)
        assert created.schedules == []
        assert created.capacity == 50
        assert created.status == "active"

    def test_created_class_detail(self, client, campus):
        new_id = client.post("/classes", json=_new_class_payload(campus, capacity=30)).json()["data"]["id"]

        data = client.get(f"/classes/{new_id}").json()["data"]

        assert data["name"] == "Physics C"
        assert data["capacity"] == 30
        assert data["schedules"] == []
        assert data["subject"]["code"] == "PHY101"
        assert data["teacher"]["id"] == "teacher-ada"

    def test_unknown_teacher_fails_with_generic_error(self, client, campus):
        response = client.post("/classes", json=_new_class_payload(campus, teacherId="ghost"))

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create class"}

    def test_unknown_status_is_refused_by_storage(self, client, campus):
        response = client.post("/classes", json=_new_class_payload(campus, status="paused"))

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create class"}

    def test_wrong_field_type_is_rejected(self, client, campus):
        response = client.post("/classes", json=_new_class_payload(campus, capacity="lots"))

        assert response.status_code == 400

    def test_insert_without_id_is_reported_and_rolled_back(self, client, campus, db_manager, db_session):
        """
        Scenario: the insert hands back no id.
        Expected: 500 with the create message, and nothing is stored.
        """
        # Arrange
        session = db_manager.SessionLocal()
        session.flush = lambda *args, **kwargs: None
        session.rollback = MagicMock(wraps=session.rollback)

        def override_get_db():
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db

        # Act
        response = client.post("/classes", json=_new_class_payload(campus, name="Ghost Section"))

        # Assert
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create class"}
        session.rollback.assert_called()
        assert db_session.execute(select(Class).where(Class.name == "Ghost Section")).first() is None


class TestListClasses:

    def test_classes_embed_subject_and_teacher(self, client, campus):
        body = client.get("/classes").json()

        assert [c["name"] for c in body["data"]] == ["Chemistry A", "Physics B", "Physics A"]
        first = body["data"][0]
        assert first["subject"]["name"] == "Chemistry"
        assert first["teacher"]["name"] == "Grace Hopper"
        assert first["inviteCode"] == "chea001"

    def test_search_matches_name_or_invite_code(self, client, campus):
        by_name = client.get("/classes", params={"search": "physics b"}).json()
        by_code = client.get("/classes", params={"search": "CHEA"}).json()

        assert [c["name"] for c in by_name["data"]] == ["Physics B"]
        assert [c["name"] for c in by_code["data"]] == ["Chemistry A"]

    def test_subject_and_teacher_filters(self, client, campus):
        by_subject = client.get("/classes", params={"subject": "phys"}).json()
        by_teacher = client.get("/classes", params={"teacher": "hopper"}).json()

        assert by_subject["pagination"]["total"] == 2
        assert [c["name"] for c in by_teacher["data"]] == ["Chemistry A"]


class TestClassDetail:

    def test_detail_embeds_department(self, client, campus):
        data = client.get(f"/classes/{campus['physics_a'].id}").json()["data"]

        assert data["subject"]["name"] == "Physics"
        assert data["department"]["code"] == "SCI"
        assert data["teacher"]["email"] == "teacher-ada@school.test"

    def test_non_integer_id_is_400(self, client, campus):
        response = client.get("/classes/first")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid class id"}

    def test_unknown_id_is_404(self, client, campus):
        response = client.get("/classes/424242")

        assert response.status_code == 404
        assert response.json() == {"error": "Class not found"}

    def test_id_beyond_integer_range_is_404(self, client, campus):
        response = client.get("/classes/99999999999999999999")

        assert response.status_code == 404
        assert response.json() == {"error": "Class not found"}


class TestClassUsers:

    def test_students_of_class(self, client, campus):
        body = client.get(f"/classes/{campus['physics_a'].id}/users", params={"role": "student"}).json()

        assert [u["id"] for u in body["data"]] == ["student-lee", "student-sam"]
        assert body["pagination"]["total"] == 2

    def test_teacher_of_class(self, client, campus):
        body = client.get(f"/classes/{campus['chemistry_a'].id}/users", params={"role": "teacher"}).json()

        assert [u["id"] for u in body["data"]] == ["teacher-grace"]

    def test_missing_role_is_400(self, client, campus):
        response = client.get(f"/classes/{campus['physics_a'].id}/users")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid role"}

    def test_unknown_class_is_404(self, client, campus):
        response = client.get("/classes/424242/users", params={"role": "student"})

        assert response.status_code == 404
        assert response.json() == {"error": "Class not found"}

    def test_class_id_beyond_integer_range_is_404(self, client, campus):
        response = client.get("/classes/-99999999999999999999/users", params={"role": "student"})

        assert response.status_code == 404
        assert response.json() == {"error": "Class not found"}

    def test_students_created_together_are_ordered_by_id(self, client, seed):
        """
        Scenario: three students share one creation timestamp.
        Expected: the listing falls back to id ascending, whatever the insert order.
        """
        # Arrange
        teacher = seed.user("t-tie", role="teacher")
        subject = seed.subject(seed.department("TIE"), "TIE101")
        section = seed.klass(subject, teacher, "Tie section")
        same_moment = datetime(2026, 3, 1, 8, 0, 0)
        for user_id in ("s-c", "s-a", "s-b"):
            seed.enroll(seed.user(user_id, at=same_moment), section)

        # Act
        body = client.get(f"/classes/{section.id}/users", params={"role": "student"}).json()

        # Assert
        assert [u["id"] for u in body["data"]] == ["s-a", "s-b", "s-c"]
