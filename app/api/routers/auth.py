from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import (
    get_current_user,
    get_get_profile_use_case,
    get_login_google_use_case,
    get_login_local_use_case,
    get_logout_session_use_case,
    get_refresh_session_use_case,
    get_register_user_use_case,
    get_resend_verification_use_case,
    get_verify_email_use_case,
)
from app.api.errors import http_error
from app.api.schemas.auth import (
    AccessTokenData,
    AuthData,
    GoogleLoginRequest,
    LoginRequest,
    LogoutRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResendVerificationRequest,
    VerifyEmailRequest,
)
from app.api.schemas.common import ApiResponse, MessageData
from app.api.schemas.users import ProfileData
from app.api.routers.users import to_profile_data
from app.application.dto.auth import (
    AuthTokensOutput,
    LoginGoogleInput,
    LoginLocalInput,
    LogoutInput,
    RefreshSessionInput,
    RegisterUserInput,
    ResendVerificationInput,
    VerifyEmailInput,
)
from app.application.use_cases.get_profile import GetProfileUseCase
from app.application.use_cases.login_google import LoginGoogleUseCase
from app.application.use_cases.login_local import LoginLocalUseCase
from app.application.use_cases.logout_session import LogoutSessionUseCase
from app.application.use_cases.refresh_session import RefreshSessionUseCase
from app.application.use_cases.register_user import RegisterUserUseCase
from app.application.use_cases.resend_verification import ResendVerificationUseCase
from app.application.use_cases.verify_email import VerifyEmailUseCase
from app.domain.entities.user import User
from app.domain.exceptions import (
    AlreadyVerifiedError,
    EmailAlreadyExistsError,
    EmailNotVerifiedError,
    GoogleTokenValidationError,
    InvalidCredentialsError,
    InvalidVerificationTokenError,
    RefreshSessionInvalidError,
    ValidationError,
)


router = APIRouter()


def _auth_data(output: AuthTokensOutput) -> AuthData:
    return AuthData(
        user={
            "id": output.user.id,
            "email": output.user.email,
            "nickname": output.user.nickname,
            "is_verified": output.user.is_verified,
            "premium_status": output.user.premium_status,
            "profile_picture": output.user.profile_picture,
        },
        tokens={
            "access_token": output.access_token,
            "refresh_token": output.refresh_token,
            "access_expires_at": output.access_expires_at,
            "refresh_expires_at": output.refresh_expires_at,
        },
    )


@router.post("/auth/register", response_model=ApiResponse[MessageData], status_code=201)
def register_user(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    try:
        output = use_case.execute(
            RegisterUserInput(
                email=req.email,
                nickname=req.nickname,
                password=req.password,
            )
        )
    except ValidationError as exc:
        raise http_error(400, exc) from exc
    except EmailAlreadyExistsError as exc:
        raise http_error(409, exc) from exc

    return ApiResponse[MessageData](data=MessageData(message=output.message))


@router.post("/auth/login", response_model=ApiResponse[AuthData])
def login_local(
    req: LoginRequest,
    use_case: LoginLocalUseCase = Depends(get_login_local_use_case),
):
    try:
        output = use_case.execute(LoginLocalInput(email=req.email, password=req.password))
    except ValidationError as exc:
        raise http_error(400, exc) from exc
    except (InvalidCredentialsError, EmailNotVerifiedError) as exc:
        raise http_error(401, exc) from exc

    return ApiResponse[AuthData](data=_auth_data(output))


@router.post("/auth/google", response_model=ApiResponse[AuthData])
def login_google(
    req: GoogleLoginRequest,
    use_case: LoginGoogleUseCase = Depends(get_login_google_use_case),
):
    try:
        output = use_case.execute(LoginGoogleInput(id_token=req.id_token))
    except GoogleTokenValidationError as exc:
        raise http_error(401, exc) from exc
    except EmailAlreadyExistsError as exc:
        raise http_error(409, exc) from exc

    return ApiResponse[AuthData](data=_auth_data(output))


@router.post("/auth/verify-email", response_model=ApiResponse[MessageData])
def verify_email(
    req: VerifyEmailRequest,
    use_case: VerifyEmailUseCase = Depends(get_verify_email_use_case),
):
    try:
        output = use_case.execute(VerifyEmailInput(token=req.token))
    except (ValidationError, InvalidVerificationTokenError, AlreadyVerifiedError) as exc:
        raise http_error(400, exc) from exc

    return ApiResponse[MessageData](data=MessageData(message=output.message))


@router.post("/auth/resend-verification", response_model=ApiResponse[MessageData])
def resend_verification(
    req: ResendVerificationRequest,
    use_case: ResendVerificationUseCase = Depends(get_resend_verification_use_case),
):
    try:
        output = use_case.execute(ResendVerificationInput(email=req.email))
    except (ValidationError, AlreadyVerifiedError) as exc:
        raise http_error(400, exc) from exc

    return ApiResponse[MessageData](data=MessageData(message=output.message))


@router.post("/auth/refresh-token", response_model=ApiResponse[AccessTokenData])
def refresh_token(
    req: RefreshTokenRequest,
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    try:
        output = use_case.execute(RefreshSessionInput(refresh_token=req.refresh_token))
    except RefreshSessionInvalidError as exc:
        raise http_error(401, exc) from exc

    return ApiResponse[AccessTokenData](
        data=AccessTokenData(
            access_token=output.access_token,
            access_expires_at=output.access_expires_at,
        )
    )


@router.post("/auth/logout", response_model=ApiResponse[MessageData])
def logout(
    req: LogoutRequest,
    use_case: LogoutSessionUseCase = Depends(get_logout_session_use_case),
):
    output = use_case.execute(LogoutInput(refresh_token=req.refresh_token))
    return ApiResponse[MessageData](data=MessageData(message=output.message))


@router.get("/auth/profile", response_model=ApiResponse[ProfileData])
def auth_profile(
    current_user: User = Depends(get_current_user),
    use_case: GetProfileUseCase = Depends(get_get_profile_use_case),
):
    output = use_case.execute(user=current_user)
    return ApiResponse[ProfileData](data=to_profile_data(output))
