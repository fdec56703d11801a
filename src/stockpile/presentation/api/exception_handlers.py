"""Map auth errors to JSON error responses.

Every error body has the shape ``{"detail": <message>, "code": <ErrorCode>}``.
The status gives the class of failure; ``code`` names the exact error kind.
The token errors, bad credentials and a rejected refresh token all answer
401 and are told apart only by ``code``. Responses with status 401 also
carry ``WWW-Authenticate: Bearer``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from stockpile_auth.exceptions import AuthError, ErrorCode, InvalidTokenError

logger = logging.getLogger(__name__)

_UNAUTHORIZED_CODES = (
    ErrorCode.INVALID_CREDENTIALS,
    ErrorCode.INVALID_REFRESH_TOKEN,
    ErrorCode.INVALID_TOKEN,
    ErrorCode.WRONG_TOKEN_TYPE,
    ErrorCode.TOKEN_EXPIRED,
    ErrorCode.INVALID_SIGNATURE,
    ErrorCode.MALFORMED_TOKEN,
    ErrorCode.INVALID_CLAIMS,
)

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    **{code: status.HTTP_401_UNAUTHORIZED for code in _UNAUTHORIZED_CODES},
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_status_for_exception(exc: AuthError) -> int:
    """HTTP status for ``exc``; unmapped token errors are 401, the rest 400."""
    if exc.code in ERROR_CODE_TO_STATUS:
        return ERROR_CODE_TO_STATUS[exc.code]
    if isinstance(exc, InvalidTokenError):
        return status.HTTP_401_UNAUTHORIZED
    return status.HTTP_400_BAD_REQUEST


def _error_response(
    status_code: int,
    message: str,
    code: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the AuthError and catch-all handlers on ``app``."""

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> JSONResponse:
        # Internal errors keep their cause in the log; the client only
        # sees the generic message.
        status_code = get_status_for_exception(exc)

        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "%s %s failed: %s (cause=%r)",
                request.method,
                request.url.path,
                exc.message,
                exc.__cause__,
            )
        else:
            logger.warning(
                "%s %s rejected with %s: %s",
                request.method,
                request.url.path,
                exc.code.value,
                exc.message,
            )

        headers = None
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return _error_response(status_code, exc.message, exc.code.value, headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(
            "Unhandled %s on %s %s",
            type(exc).__name__,
            request.method,
            request.url.path,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An internal error occurred",
            ErrorCode.INTERNAL_ERROR.value,
        )
