"""
API routes for user administration and the caller's own profile.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from newsverify.access import CAN_MODERATE, Identity, get_current_identity, require_roles
from newsverify.database import get_db
from newsverify.models import (
    RoleResponse, UpdateProfileRequest, UpdateRoleRequest, UserResponse
)
from newsverify.user_service import UserService


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse])
def list_users(
    identity: Identity = Depends(require_roles(CAN_MODERATE)),
    db: Session = Depends(get_db)
) -> List[UserResponse]:
    """All accounts (admin only)."""
    return [UserResponse.model_validate(u) for u in UserService(db).list_users(identity)]


@router.patch("/me", response_model=UserResponse)
def update_own_profile(
    request: UpdateProfileRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> UserResponse:
    """
    Update your own name or avatar.

    The role cannot be changed here.
    """
    return UserResponse.model_validate(UserService(db).update_profile(identity, request))


@router.patch("/{user_id}/role", response_model=RoleResponse)
def update_user_role(
    user_id: str,
    request: UpdateRoleRequest,
    identity: Identity = Depends(require_roles(CAN_MODERATE)),
    db: Session = Depends(get_db)
) -> RoleResponse:
    """Change a user's role (admin only)."""
    user = UserService(db).update_role(identity, user_id, request.role)
    return RoleResponse(id=user.id, role=user.role)
