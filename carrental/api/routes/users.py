"""User administration routes."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from carrental.domain.schemas import (
    AdminRegisterRequest,
    ChangeRoleRequest,
    SetUserStatusRequest,
    UserInfo,
    UserUpdateRequest,
)
from carrental.services.user_service import UserService

from ..dependencies import get_user_service
from ..security import Principal, guard

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserInfo)
async def me(
    principal: Principal = Depends(guard("users.me")),
    service: UserService = Depends(get_user_service),
) -> UserInfo:
    """The account behind the presented token."""
    return await service.get_me(principal.user_id)


@router.post("", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: AdminRegisterRequest,
    _: Principal = Depends(guard("users.create")),
    service: UserService = Depends(get_user_service),
) -> UserInfo:
    return await service.create(request, role_id=request.role_id)


@router.get("", response_model=List[UserInfo])
async def list_users(
    _: Principal = Depends(guard("users.list")),
    service: UserService = Depends(get_user_service),
) -> List[UserInfo]:
    return await service.get_all()


@router.get("/{user_id}", response_model=UserInfo)
async def get_user(
    user_id: int,
    _: Principal = Depends(guard("users.get")),
    service: UserService = Depends(get_user_service),
) -> UserInfo:
    return await service.get_by_id(user_id)


@router.put("/{user_id}", response_model=UserInfo)
async def update_user(
    user_id: int,
    request: UserUpdateRequest,
    _: Principal = Depends(guard("users.update")),
    service: UserService = Depends(get_user_service),
) -> UserInfo:
    return await service.update(user_id, request)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    _: Principal = Depends(guard("users.delete")),
    service: UserService = Depends(get_user_service),
) -> Response:
    await service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/role", status_code=status.HTTP_204_NO_CONTENT)
async def change_role(
    user_id: int,
    request: ChangeRoleRequest,
    _: Principal = Depends(guard("users.change_role")),
    service: UserService = Depends(get_user_service),
) -> Response:
    await service.change_role(user_id, request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def set_status(
    user_id: int,
    request: SetUserStatusRequest,
    _: Principal = Depends(guard("users.set_status")),
    service: UserService = Depends(get_user_service),
) -> Response:
    await service.set_active(user_id, request.is_active)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
