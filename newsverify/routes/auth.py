"""
API routes for registration, sign-in and the current identity.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from newsverify.access import Identity, get_current_identity
from newsverify.database import get_db
from newsverify.models import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from newsverify.user_service import UserService


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db)
) -> AuthResponse:
    """
    Create an account.

    New accounts are readers; an admin can promote them later.
    """
    user, token = UserService(db).register(request)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
) -> AuthResponse:
    """Exchange email and password for a bearer token."""
    user, token = UserService(db).login(request)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> UserResponse:
    """The signed-in user."""
    return UserResponse.model_validate(UserService(db).get_user(identity.user_id))
