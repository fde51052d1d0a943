"""Admin user listing endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from coursehub.auth.dependencies import AdminUser
from coursehub.users.dependencies import UserServiceDep
from coursehub.users.schemas import UserListResponse, UserResponse


router = APIRouter(prefix="/v1/admin/users", tags=["Admin - Users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="Users newest first, with optional search on name or email.",
)
async def list_users(
    _admin: AdminUser,
    user_service: UserServiceDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    take: Annotated[int, Query(ge=1, le=100)] = 25,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> UserListResponse:
    users, total = await user_service.list_users(skip=skip, take=take, search=search)
    return UserListResponse(
        users=[UserResponse.from_user(u) for u in users],
        total=total,
        has_more=skip + take < total,
    )
