"""Tests for chapter access administration endpoints."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursehub.auth.permissions import UserRole
from coursehub.chapter_access.models import ChapterAccess
from coursehub.chapter_access.service import (
    ChapterAccessExistsError,
    ChapterAccessNotFoundError,
    PermissionDeniedError,
    StudentNotFoundError,
)
from coursehub.courses.service import ChapterNotFoundError


@pytest.fixture
def chapter_access_service(app: FastAPI) -> Mock:
    service = Mock()
    service.grant_chapter_access = AsyncMock()
    service.revoke_chapter_access = AsyncMock(return_value=None)
    service.list_granted_chapter_ids = AsyncMock(return_value=[])
    app.state.chapter_access_service = service
    return service


class TestGrantEndpoint:
    """Tests for POST .../users/{user_id}/chapter-access."""

    def test_admin_grant_created(
        self, client: TestClient, chapter_access_service, admin_headers, admin_id
    ) -> None:
        user_id = uuid4()
        chapter_id = uuid4()
        chapter_access_service.grant_chapter_access.return_value = ChapterAccess(
            user_id=user_id,
            course_id=uuid4(),
            chapter_id=chapter_id,
            granted_by=admin_id,
        )

        response = client.post(
            f"/v1/admin/users/{user_id}/chapter-access",
            json={"chapter_id": str(chapter_id)},
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == str(user_id)
        assert data["chapter_id"] == str(chapter_id)
        assert data["granted_by"] == str(admin_id)
        actor = chapter_access_service.grant_chapter_access.await_args.args[0]
        assert actor.role is UserRole.ADMIN

    def test_missing_chapter_id_is_422(
        self, client: TestClient, chapter_access_service, admin_headers
    ) -> None:
        response = client.post(
            f"/v1/admin/users/{uuid4()}/chapter-access",
            json={},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert any("chapter_id" in d["field"] for d in response.json()["details"])
        chapter_access_service.grant_chapter_access.assert_not_awaited()

    def test_duplicate_is_409(
        self, client: TestClient, chapter_access_service, teacher_headers
    ) -> None:
        chapter_access_service.grant_chapter_access.side_effect = (
            ChapterAccessExistsError
        )

        response = client.post(
            f"/v1/teacher/users/{uuid4()}/chapter-access",
            json={"chapter_id": str(uuid4())},
            headers=teacher_headers,
        )

        assert response.status_code == 409

    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (StudentNotFoundError, 404),
            (ChapterNotFoundError, 404),
            (PermissionDeniedError, 403),
        ],
    )
    def test_error_mapping(
        self,
        client: TestClient,
        chapter_access_service,
        teacher_headers,
        error: type[Exception],
        expected_status: int,
    ) -> None:
        chapter_access_service.grant_chapter_access.side_effect = error

        response = client.post(
            f"/v1/teacher/users/{uuid4()}/chapter-access",
            json={"chapter_id": str(uuid4())},
            headers=teacher_headers,
        )

        assert response.status_code == expected_status

    def test_requires_authentication(
        self, client: TestClient, chapter_access_service
    ) -> None:
        response = client.post(
            f"/v1/admin/users/{uuid4()}/chapter-access",
            json={"chapter_id": str(uuid4())},
        )

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "path,headers_fixture",
        [
            ("/v1/admin/users/{}/chapter-access", "teacher_headers"),
            ("/v1/admin/users/{}/chapter-access", "student_headers"),
            ("/v1/teacher/users/{}/chapter-access", "admin_headers"),
            ("/v1/teacher/users/{}/chapter-access", "student_headers"),
        ],
    )
    def test_role_gates(
        self,
        request: pytest.FixtureRequest,
        client: TestClient,
        chapter_access_service,
        path: str,
        headers_fixture: str,
    ) -> None:
        response = client.post(
            path.format(uuid4()),
            json={"chapter_id": str(uuid4())},
            headers=request.getfixturevalue(headers_fixture),
        )

        assert response.status_code == 403
        chapter_access_service.grant_chapter_access.assert_not_awaited()


class TestRevokeEndpoint:
    """Tests for DELETE .../users/{user_id}/chapter-access/{chapter_id}."""

    def test_revoke_no_content(
        self, client: TestClient, chapter_access_service, admin_headers
    ) -> None:
        user_id = uuid4()
        chapter_id = uuid4()

        response = client.delete(
            f"/v1/admin/users/{user_id}/chapter-access/{chapter_id}",
            headers=admin_headers,
        )

        assert response.status_code == 204
        args = chapter_access_service.revoke_chapter_access.await_args.args
        assert args[1:] == (user_id, chapter_id)

    def test_revoke_missing_is_404(
        self, client: TestClient, chapter_access_service, teacher_headers
    ) -> None:
        chapter_access_service.revoke_chapter_access.side_effect = (
            ChapterAccessNotFoundError
        )

        response = client.delete(
            f"/v1/teacher/users/{uuid4()}/chapter-access/{uuid4()}",
            headers=teacher_headers,
        )

        assert response.status_code == 404
        assert "not found" in response.json()["message"]


class TestListEndpoint:
    """Tests for GET .../users/{user_id}/chapter-access."""

    def test_list_with_course_filter(
        self, client: TestClient, chapter_access_service, teacher_headers
    ) -> None:
        user_id = uuid4()
        course_id = uuid4()
        granted = [uuid4(), uuid4()]
        chapter_access_service.list_granted_chapter_ids.return_value = granted

        response = client.get(
            f"/v1/teacher/users/{user_id}/chapter-access",
            params={"course_id": str(course_id)},
            headers=teacher_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "user_id": str(user_id),
            "course_id": str(course_id),
            "chapter_ids": [str(c) for c in granted],
        }
