from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import (
    get_change_password_use_case,
    get_delete_account_use_case,
    get_get_profile_use_case,
    get_update_profile_use_case,
    get_verified_user,
)
from app.api.errors import http_error
from app.api.schemas.common import ApiResponse, MessageData
from app.api.schemas.users import ChangePasswordRequest, ProfileData, UpdateProfileRequest
from app.application.dto.user import (
    ChangePasswordInput,
    DeleteAccountInput,
    UpdateProfileInput,
    UserProfileOutput,
)
from app.application.use_cases.change_password import ChangePasswordUseCase
from app.application.use_cases.delete_account import DeleteAccountUseCase
from app.application.use_cases.get_profile import GetProfileUseCase
from app.application.use_cases.update_profile import UpdateProfileUseCase
from app.domain.entities.user import User
from app.domain.exceptions import (
    EmailAlreadyExistsError,
    EmailTakenError,
    InvalidCurrentPasswordError,
    SamePasswordError,
    UserNotFoundError,
    ValidationError,
)


router = APIRouter()


def to_profile_data(output: UserProfileOutput) -> ProfileData:
    return ProfileData(
        user={
            "id": output.id,
            "email": output.email,
            "nickname": output.nickname,
            "is_verified": output.is_verified,
            "premium_status": output.premium_status,
            "premium_expiry": output.premium_expiry,
            "profile_picture": output.profile_picture,
            "created_at": output.created_at,
            "updated_at": output.updated_at,
        }
    )


@router.get("/users/profile", response_model=ApiResponse[ProfileData])
def get_profile(
    current_user: User = Depends(get_verified_user),
    use_case: GetProfileUseCase = Depends(get_get_profile_use_case),
):
    output = use_case.execute(user=current_user)
    return ApiResponse[ProfileData](data=to_profile_data(output))


@router.put("/users/profile", response_model=ApiResponse[ProfileData])
def update_profile(
    req: UpdateProfileRequest,
    current_user: User = Depends(get_verified_user),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    try:
        output = use_case.execute(
            UpdateProfileInput(
                user_id=current_user.id,
                nickname=req.nickname,
                email=req.email,
            )
        )
    except ValidationError as exc:
        raise http_error(400, exc) from exc
    except (EmailTakenError, EmailAlreadyExistsError) as exc:
        raise http_error(409, exc) from exc
    except UserNotFoundError as exc:
        raise http_error(404, exc) from exc

    return ApiResponse[ProfileData](data=to_profile_data(output))


@router.put("/users/password", response_model=ApiResponse[MessageData])
def change_password(
    req: ChangePasswordRequest,
    current_user: User = Depends(get_verified_user),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    try:
        output = use_case.execute(
            ChangePasswordInput(
                user_id=current_user.id,
                current_password=req.current_password,
                new_password=req.new_password,
            )
        )
    except (ValidationError, InvalidCurrentPasswordError, SamePasswordError) as exc:
        raise http_error(400, exc) from exc
    except UserNotFoundError as exc:
        raise http_error(404, exc) from exc

    return ApiResponse[MessageData](data=MessageData(message=output.message))


@router.delete("/users/account", response_model=ApiResponse[MessageData])
def delete_account(
    current_user: User = Depends(get_verified_user),
    use_case: DeleteAccountUseCase = Depends(get_delete_account_use_case),
):
    try:
        output = use_case.execute(DeleteAccountInput(user_id=current_user.id))
    except UserNotFoundError as exc:
        raise http_error(404, exc) from exc

    return ApiResponse[MessageData](data=MessageData(message=output.message))
