"""
Authentication Routes

POST /auth/register - Register new student/alumni account
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
PUT /auth/profile - Update own profile
PUT /auth/change-password - Change password
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import create_access_token, get_current_user
from jobboard.services.serializers import serialize_user
from jobboard.services.user_service import UserService, get_user_service
from jobboard.schemas.schemas import (
    AuthResponse, ChangePasswordRequest, LoginRequest, MessageResponse, ProfileUpdate,
    RegisterRequest, UserEnvelope
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_for(user: dict) -> str:
    return create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Register a new account.

    Students must use the college email domain; alumni may use any address
    but must give a graduation year.
    """
    user = users.register(request)
    return AuthResponse(message="User registered successfully", token=_token_for(user), user=serialize_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.authenticate(request.email, request.password)
    return AuthResponse(message="Login successful", token=_token_for(user), user=serialize_user(user))


@router.get("/me", response_model=UserEnvelope)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return UserEnvelope(user=serialize_user(user))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Update profile fields. Email, role and password are not changed here."""
    updated = users.update_profile(user, data)
    return UserEnvelope(message="Profile updated successfully", user=serialize_user(updated))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    users.change_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully")
