"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from app.domain.errors import (
    InvalidAddressError,
    MissingParameterError,
    NotificationNotFoundError,
    NotificationServiceError,
    RouteNotFoundError,
    UpstreamLookupError,
)

_BAD_REQUEST_ERRORS = (
    RouteNotFoundError,
    MissingParameterError,
    UpstreamLookupError,
    InvalidAddressError,
)


def to_http_exception(exc: NotificationServiceError) -> HTTPException:
    """Translate a domain error into the response the client should see.

    Request and lookup problems are the caller's fault (400); a missing
    notification is 404; template and persistence failures are 500.
    """

    if isinstance(exc, NotificationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, _BAD_REQUEST_ERRORS):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


__all__ = ["to_http_exception"]
