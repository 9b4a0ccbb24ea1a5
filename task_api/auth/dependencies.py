from fastapi import Depends, Security
from fastapi.security.api_key import APIKeyHeader

from task_api.auth.schemas import Claims
from task_api.auth.service import TokenValidator
from task_api.auth.users.base import UserStore
from task_api.auth.users.dependencies import get_user_store
from task_api.config import Settings, get_settings


authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_token_validator(
    user_store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> TokenValidator:
    return TokenValidator(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        user_store=user_store,
    )


def get_current_user(
    authorization: str | None = Security(authorization_header),
    token_validator: TokenValidator = Depends(get_token_validator),
) -> Claims:
    return token_validator.validate(authorization)
