"""Account endpoints: sign-up, login and admin user management."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from drivetime_scheduler.api.dependencies import current_user, get_container
from drivetime_scheduler.api.schemas import (
    ActiveRequest,
    LoginRequest,
    RegisterRequest,
    UserCreateRequest,
    UserUpdateRequest,
)
from drivetime_scheduler.api.serializers import serialize_user
from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.users import User

router = APIRouter(tags=["users"])


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Create a learner account."""
    user = container.user_service.register(body.name, body.email, body.password)
    return serialize_user(user)


@router.post("/auth/login")
async def login(
    body: LoginRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Check credentials and return the account."""
    user = container.user_service.authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )
    return serialize_user(user)


@router.get("/users")
async def list_users(
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    users = container.user_service.list_users()
    return {"users": [serialize_user(user) for user in users]}


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreateRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create an account of any role (admin only)."""
    user = container.user_service.admin_create_user(body.model_dump(), actor)
    return serialize_user(user)


@router.get("/users/{user_id}")
async def get_user(
    user_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return serialize_user(container.user_service.get_user(user_id))


@router.patch("/users/{user_id}")
async def update_user(
    user_id: UUID,
    body: UserUpdateRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Edit a profile; teachers set their booking limits here."""
    payload = body.model_dump(exclude_unset=True)
    user = container.user_service.update_profile(user_id, payload, actor)
    return serialize_user(user)


@router.post("/users/{user_id}/active")
async def set_user_active(
    user_id: UUID,
    body: ActiveRequest,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    user = container.user_service.set_active(user_id, body.active, actor)
    return serialize_user(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    actor: User = Depends(current_user),
    container: AppContainer = Depends(get_container),
) -> Response:
    container.user_service.delete_user(user_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
