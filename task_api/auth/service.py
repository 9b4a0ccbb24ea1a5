import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt

from task_api.auth.exceptions import (
    ExpiredTokenException,
    InvalidSignatureException,
    MalformedTokenException,
    MissingTokenException,
    UnknownSubjectException,
)
from task_api.auth.schemas import Claims
from task_api.auth.users.base import UserStore
from task_api.common.current_datetime import get_current_datetime

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def create_access_token(
    *,
    user_id: str,
    username: str,
    secret: str,
    algorithm: str = "HS256",
    expires_in: int = 24 * 60 * 60,
    issued_at: datetime | None = None,
) -> str:
    """
    Issue a signed access token for a user.

    The payload carries ``userId``, ``username``, ``iat`` and ``exp``, which
    is the layout ``TokenValidator`` expects.
    """
    issued_at = issued_at or get_current_datetime()
    payload = {
        "userId": user_id,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


class TokenValidator:
    """
    Turns an ``Authorization`` header into verified ``Claims``.

    Checks run in a fixed order and each failure raises its own exception:
    presence, bearer format, signature, expiry, then subject existence in
    the user store.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str,
        user_store: UserStore,
        clock: Callable[[], datetime] = get_current_datetime,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.user_store = user_store
        self.clock = clock

    def _extract_token(self, authorization: str | None) -> str:
        if not authorization:
            raise MissingTokenException()

        if not authorization.startswith(BEARER_PREFIX):
            raise MalformedTokenException("Authorization header is not a bearer token")

        token = authorization[len(BEARER_PREFIX) :].strip()
        if not token:
            raise MalformedTokenException("Bearer token is empty")
        return token

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            # Expiry is checked against the injected clock below
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "require": ["exp"]},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidSignatureException(str(e)) from e

    def _check_expiry(self, payload: dict[str, Any]) -> datetime:
        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidSignatureException("Token has an invalid 'exp' claim") from e

        if expires_at <= self.clock():
            raise ExpiredTokenException(f"Token expired at {expires_at.isoformat()}")
        return expires_at

    def validate(self, authorization: str | None) -> Claims:
        token = self._extract_token(authorization)
        payload = self._decode(token)
        expires_at = self._check_expiry(payload)

        subject_id = payload.get("userId")
        if not subject_id:
            raise UnknownSubjectException("Token has no subject")

        user = self.user_store.get_user(str(subject_id))
        if not user:
            raise UnknownSubjectException(f"User '{subject_id}' does not exist")

        return Claims(sub=user.id, username=user.username, exp=expires_at)
