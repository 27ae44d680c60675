"""Map service error kinds to HTTP responses."""

from fastapi import HTTPException, status

from app.core.errors import ErrorKind, ServiceError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
}


def to_http_exception(exc: ServiceError) -> HTTPException:
    headers = None
    if exc.kind is ErrorKind.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=STATUS_BY_KIND[exc.kind],
        detail={"kind": exc.kind.value, "message": exc.message},
        headers=headers,
    )
