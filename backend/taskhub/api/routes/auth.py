"""Auth Routes — register, login and current profile.

Invariants:
    - register -> 201 with {user, token}; duplicate email -> 409
    - login failures share one 401 message regardless of cause
    - /me requires a valid bearer token
"""

from fastapi import APIRouter, Depends, status

from taskhub.api.dependencies import get_auth_service, get_current_requester
from taskhub.core.authorization import Requester
from taskhub.schemas.auth import AuthResult, LoginRequest, RegisterRequest
from taskhub.schemas.common import SuccessResponse
from taskhub.schemas.user import UserResponse
from taskhub.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/register", response_model=SuccessResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest, auth: AuthService = Depends(get_auth_service),
):
    return SuccessResponse(data=await auth.register(body))


@router.post("/login", response_model=SuccessResponse[AuthResult])
async def login(
    body: LoginRequest, auth: AuthService = Depends(get_auth_service),
):
    return SuccessResponse(data=await auth.login(body.email, body.password))


@router.get("/me", response_model=SuccessResponse[UserResponse])
async def me(
    requester: Requester = Depends(get_current_requester),
    auth: AuthService = Depends(get_auth_service),
):
    return SuccessResponse(data=await auth.get_profile(requester))
