from fastapi import HTTPException, status


class ConflictError(Exception):
    """Raised by repositories when a unique constraint rejects a write."""

    def __init__(self, constraint: str | None = None):
        self.constraint = constraint
        super().__init__(f"Unique constraint violated: {constraint or 'unknown'}")


class ValidationFailedException(HTTPException):
    def __init__(self, fields: list[str]):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "validation_error", "fields": fields},
        )


class InvalidOrExpiredCodeException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_or_expired_code", "message": "Invalid or expired code."},
        )


class UserAlreadyExistsException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "user_already_exists", "message": "User already exists."},
        )


class InvalidPhoneNumberException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_phone_number", "message": "Invalid phone number."},
        )


class EmailOrPhoneInUseException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "email_or_phone_in_use", "message": "Email or phone already in use."},
        )


class InvalidCredentialsException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_credentials", "message": "Invalid email or password."},
            headers={"WWW-Authenticate": "Bearer"},
        )


class UnauthorizedException(HTTPException):
    """Every token or session failure renders as this same response."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Could not validate credentials."},
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenInvalidException(UnauthorizedException):
    pass


class TokenExpiredException(UnauthorizedException):
    pass


class InvalidSessionException(UnauthorizedException):
    pass


class UserNotFoundException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "user_not_found", "message": "User not found."},
        )


class OnboardingFailedException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "onboarding_failed", "message": "Unable to complete registration."},
        )


class StorageUnavailableException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "internal_error"},
        )
