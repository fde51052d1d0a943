"""Admin endpoints for whole-course access.

Provides:
- POST   /v1/admin/users/{user_id}/courses - Grant a course
- DELETE /v1/admin/users/{user_id}/courses/{course_id} - Revoke a course
- GET    /v1/admin/users/{user_id}/courses - List a user's purchases
"""

from uuid import UUID

from fastapi import APIRouter, status

from coursehub.auth.dependencies import AdminUser
from coursehub.courses.dependencies import CourseServiceDep, handle_course_error
from coursehub.courses.service import CourseNotFoundError
from coursehub.purchases.dependencies import PurchaseServiceDep, handle_purchase_error
from coursehub.purchases.schemas import (
    GrantCourseRequest,
    PurchaseListResponse,
    PurchaseResponse,
)
from coursehub.purchases.service import PurchaseError, PurchaseNotFoundError
from coursehub.users.dependencies import UserServiceDep, handle_user_error
from coursehub.users.service import UserError


router = APIRouter(prefix="/v1/admin/users", tags=["Admin - Purchases"])


@router.post(
    "/{user_id}/courses",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a course to a student",
)
async def grant_course(
    user_id: UUID,
    body: GrantCourseRequest,
    admin: AdminUser,
    purchase_service: PurchaseServiceDep,
    course_service: CourseServiceDep,
    user_service: UserServiceDep,
) -> PurchaseResponse:
    """Give a student an ACTIVE purchase of a course.

    Fails with 404 if the user is not a student or the course does not
    exist, and with 409 if the student already has the course.
    """
    try:
        await user_service.get_student(user_id)
    except UserError as e:
        raise handle_user_error(e) from e

    if await course_service.get_course(body.course_id) is None:
        raise handle_course_error(CourseNotFoundError())

    try:
        purchase = await purchase_service.grant_course(
            user_id=user_id,
            course_id=body.course_id,
            granted_by=admin.id,
            price_paid=body.price_paid,
        )
    except PurchaseError as e:
        raise handle_purchase_error(e) from e

    return PurchaseResponse.from_purchase(purchase)


@router.delete(
    "/{user_id}/courses/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a course from a student",
)
async def revoke_course(
    user_id: UUID,
    course_id: UUID,
    _admin: AdminUser,
    purchase_service: PurchaseServiceDep,
    user_service: UserServiceDep,
) -> None:
    try:
        await user_service.get_student(user_id)
    except UserError as e:
        raise handle_user_error(e) from e

    if not await purchase_service.revoke_course(user_id, course_id):
        raise handle_purchase_error(PurchaseNotFoundError())


@router.get(
    "/{user_id}/courses",
    response_model=PurchaseListResponse,
    summary="List a user's purchases",
)
async def list_user_courses(
    user_id: UUID,
    _admin: AdminUser,
    purchase_service: PurchaseServiceDep,
    active_only: bool = False,
) -> PurchaseListResponse:
    purchases = await purchase_service.get_user_purchases(user_id, active_only=active_only)
    items = [PurchaseResponse.from_purchase(p) for p in purchases]
    return PurchaseListResponse(items=items, total=len(items))
