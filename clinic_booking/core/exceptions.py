from fastapi import HTTPException, status
from typing import Dict, Iterable, Optional


class ServiceError(HTTPException):
    """Base class for errors rendered as ``{"error": title, "message": detail}``."""

    title = "Error"

    def __init__(self, status_code: int, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class DuplicateEmailError(ServiceError):
    title = "Duplicate Email"

    def __init__(self, detail: str = "Email already exists. Please choose another."):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class DuplicateUsernameError(ServiceError):
    title = "Duplicate Username"

    def __init__(self, detail: str = "Username already taken. Please choose another."):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class MissingFieldError(ServiceError):
    title = "Missing Field"

    def __init__(self, fields: Iterable[str] = ()):
        self.fields = list(fields)
        detail = "All fields are required."
        if self.fields:
            detail = f"All fields are required. Missing: {', '.join(self.fields)}"
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class NoSuchUserError(ServiceError):
    title = "No Such User"

    def __init__(self, detail: str = "No user found. Please try again."):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class InvalidCredentialsError(ServiceError):
    title = "Invalid Credentials"

    def __init__(self, detail: str = "Invalid login credentials. Please try again."):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class NotFoundError(ServiceError):
    title = "Not Found"

    def __init__(self, detail: str = "The requested resource was not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class InternalStoreError(ServiceError):
    title = "Internal Server Error"

    def __init__(self, detail: str = "An unexpected error occurred"):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
