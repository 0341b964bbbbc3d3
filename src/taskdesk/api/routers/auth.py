"""Routes handling registration, login and principal introspection."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from ...core.config import Settings
from ...core.security import GeneratedToken
from ...deps import PrincipalDependency, SettingsDependency, StoreDependency
from ...schemas import (
    AdminLoginRequest,
    LoginRequest,
    PrincipalRead,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from ...services import AuthService, Principal
from ..responses import flag_storage_failure

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(token: GeneratedToken, principal: Principal, settings: Settings) -> TokenResponse:
    return TokenResponse(
        token=token.token,
        expires_in=settings.access_token_expire_minutes * 60,
        user=PrincipalRead.model_validate(principal),
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: RegisterRequest,
    response: Response,
    store: StoreDependency,
    settings: SettingsDependency,
) -> RegisterResponse:
    service = AuthService(store, settings)
    user = service.register(username=payload.username, email=payload.email, password=payload.password)
    flag_storage_failure(response, store)
    return RegisterResponse(user_id=user.id)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate using email and password",
)
async def login(
    payload: LoginRequest,
    store: StoreDependency,
    settings: SettingsDependency,
) -> TokenResponse:
    service = AuthService(store, settings)
    user, token = service.login(email=payload.email, password=payload.password)
    return _token_response(token, Principal.from_user(user), settings)


@router.post(
    "/admin-login",
    response_model=TokenResponse,
    summary="Authenticate as a configured administrator",
)
async def admin_login(
    payload: AdminLoginRequest,
    store: StoreDependency,
    settings: SettingsDependency,
) -> TokenResponse:
    service = AuthService(store, settings)
    principal, token = service.admin_login(username=payload.username, password=payload.password)
    return _token_response(token, principal, settings)


@router.get("/me", response_model=PrincipalRead, summary="Describe the authenticated principal")
async def read_me(principal: PrincipalDependency) -> PrincipalRead:
    return PrincipalRead.model_validate(principal)
