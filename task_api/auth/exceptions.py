import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "Access denied. No token provided."
INVALID_TOKEN_MESSAGE = "Invalid token."
EXPIRED_TOKEN_MESSAGE = "Token expired."


class AuthException(Exception):
    status_code: int = status.HTTP_401_UNAUTHORIZED
    message: str = INVALID_TOKEN_MESSAGE

    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(self.message)


class MissingTokenException(AuthException):
    message = NO_TOKEN_MESSAGE


class MalformedTokenException(AuthException):
    message = NO_TOKEN_MESSAGE


class InvalidSignatureException(AuthException):
    status_code = status.HTTP_400_BAD_REQUEST


class ExpiredTokenException(AuthException):
    message = EXPIRED_TOKEN_MESSAGE


class UnknownSubjectException(AuthException):
    pass


def auth_exception_handler(request: Request, exc: AuthException):
    logger.error(f"{type(exc).__name__}: {exc.reason or exc.message}")
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if exc.status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


auth_error_responses = {
    400: {
        "description": "Invalid token",
        "content": {"application/json": {"example": {"error": INVALID_TOKEN_MESSAGE}}},
    },
    401: {
        "description": "Missing, expired or unknown token",
        "content": {"application/json": {"example": {"error": NO_TOKEN_MESSAGE}}},
    },
}
