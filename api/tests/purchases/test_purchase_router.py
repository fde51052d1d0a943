"""Tests for admin course grant endpoints."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursehub.courses.models import Course
from coursehub.purchases.models import PurchaseStatus, create_admin_grant
from coursehub.purchases.service import PurchaseExistsError
from coursehub.users.models import User
from coursehub.users.service import UserNotFoundError


@pytest.fixture
def services(app: FastAPI) -> dict[str, Mock]:
    user_service = Mock()
    user_service.get_student = AsyncMock(return_value=User(name="S", role="user"))

    course_service = Mock()
    course_service.get_course = AsyncMock(return_value=Course(title="Course"))

    purchase_service = Mock()
    purchase_service.grant_course = AsyncMock()
    purchase_service.revoke_course = AsyncMock(return_value=True)
    purchase_service.get_user_purchases = AsyncMock(return_value=[])

    app.state.user_service = user_service
    app.state.course_service = course_service
    app.state.purchase_service = purchase_service
    return {
        "users": user_service,
        "courses": course_service,
        "purchases": purchase_service,
    }


class TestGrantCourseEndpoint:
    """Tests for POST /v1/admin/users/{user_id}/courses."""

    def test_grant_created(self, client: TestClient, services, admin_headers, admin_id):
        user_id = uuid4()
        course_id = uuid4()
        services["purchases"].grant_course.return_value = create_admin_grant(
            user_id=user_id, course_id=course_id, granted_by=admin_id
        )

        response = client.post(
            f"/v1/admin/users/{user_id}/courses",
            json={"course_id": str(course_id)},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["course_id"] == str(course_id)
        assert data["status"] == PurchaseStatus.ACTIVE.value
        services["purchases"].grant_course.assert_awaited_once()

    def test_non_student_is_404(self, client: TestClient, services, admin_headers):
        services["users"].get_student.side_effect = UserNotFoundError("Student not found")

        response = client.post(
            f"/v1/admin/users/{uuid4()}/courses",
            json={"course_id": str(uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 404
        services["purchases"].grant_course.assert_not_awaited()

    def test_unknown_course_is_404(self, client: TestClient, services, admin_headers):
        services["courses"].get_course.return_value = None

        response = client.post(
            f"/v1/admin/users/{uuid4()}/courses",
            json={"course_id": str(uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Course not found"

    def test_already_granted_is_409(self, client: TestClient, services, admin_headers):
        services["purchases"].grant_course.side_effect = PurchaseExistsError

        response = client.post(
            f"/v1/admin/users/{uuid4()}/courses",
            json={"course_id": str(uuid4())},
            headers=admin_headers,
        )

        assert response.status_code == 409

    def test_teacher_forbidden(self, client: TestClient, services, teacher_headers):
        response = client.post(
            f"/v1/admin/users/{uuid4()}/courses",
            json={"course_id": str(uuid4())},
            headers=teacher_headers,
        )

        assert response.status_code == 403


class TestRevokeCourseEndpoint:
    """Tests for DELETE /v1/admin/users/{user_id}/courses/{course_id}."""

    def test_revoke(self, client: TestClient, services, admin_headers):
        response = client.delete(
            f"/v1/admin/users/{uuid4()}/courses/{uuid4()}", headers=admin_headers
        )

        assert response.status_code == 204

    def test_revoke_nothing_is_404(self, client: TestClient, services, admin_headers):
        services["purchases"].revoke_course.return_value = False

        response = client.delete(
            f"/v1/admin/users/{uuid4()}/courses/{uuid4()}", headers=admin_headers
        )

        assert response.status_code == 404


class TestListUserCoursesEndpoint:
    """Tests for GET /v1/admin/users/{user_id}/courses."""

    def test_list(self, client: TestClient, services, admin_headers, admin_id):
        user_id = uuid4()
        services["purchases"].get_user_purchases.return_value = [
            create_admin_grant(user_id=user_id, course_id=uuid4(), granted_by=admin_id)
        ]

        response = client.get(
            f"/v1/admin/users/{user_id}/courses",
            params={"active_only": "true"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["total"] == 1
        services["purchases"].get_user_purchases.assert_awaited_once_with(
            user_id, active_only=True
        )
