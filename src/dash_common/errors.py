"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  1000: request body failed schema validation (rendered by src/main.py)
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid credentials", 401)


class InvalidSecretError(AppError):
    """Secret or stored credential rejected before any key derivation.

    The message never echoes the rejected value.
    """

    def __init__(self, detail: str = "Password must be a non-empty string") -> None:
        super().__init__(1006, detail, 422)


# --- 9xxx: System ---

class SeedDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Not found", 404)


class UserLookupError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Failed to fetch user", 503)


class CredentialConfigError(AppError):
    """Password hashing parameters are unusable. Raised at startup, never per request."""

    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Invalid credential configuration: {detail}", 500)
