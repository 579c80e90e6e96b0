"""HTTP error taxonomy shared by the routers.

Services report expected conditions as outcome enums; routers translate
them into one of these exceptions. Each carries a fixed status code and a
plain message, never internal identifiers.
"""
from typing import Optional
from fastapi import HTTPException, status


class ValidationFailed(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class DependencyFailure(HTTPException):
    """The store or the email dispatcher failed. Retryable failures answer 503."""

    def __init__(self, detail: str = "Internal Server Error", retryable: bool = False,
                 retry_after: Optional[int] = None):
        headers = None
        if retryable:
            headers = {"Retry-After": str(retry_after or 5)}
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE if retryable else status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            headers=headers,
        )
        self.retryable = retryable
