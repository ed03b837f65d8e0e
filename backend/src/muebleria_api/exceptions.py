"""Domain-specific exceptions for the muebleria API.

These exceptions keep service-layer errors separate from HTTP responses.
Each class carries the status code and the error category that the
exception handler renders as ``{"error": <category>, "message": <text>}``.
"""

from typing import Any


class MuebleriaAPIError(Exception):
    """Base exception for all muebleria API errors."""

    status_code: int = 500
    category: str = "Internal server error"

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(MuebleriaAPIError):
    """Base class for resource not found errors."""

    status_code = 404
    category = "Resource not found"


class AccountNotFoundError(NotFoundError):
    """Raised when an account cannot be found."""

    def __init__(self, account_id: Any = None) -> None:
        details = {"account_id": str(account_id)} if account_id is not None else {}
        super().__init__("Account not found", details)


class AccessRuleNotFoundError(NotFoundError):
    """Raised when an access rule cannot be found."""

    def __init__(self, rule_id: Any = None) -> None:
        details = {"rule_id": str(rule_id)} if rule_id is not None else {}
        super().__init__("Access rule not found", details)


class BranchNotFoundError(NotFoundError):
    """Raised when a branch cannot be found."""

    def __init__(self, branch_id: Any = None) -> None:
        details = {"branch_id": str(branch_id)} if branch_id is not None else {}
        super().__init__("Branch not found", details)


class CategoryNotFoundError(NotFoundError):
    """Raised when a category cannot be found."""

    def __init__(self, category_id: Any = None) -> None:
        details = {"category_id": str(category_id)} if category_id is not None else {}
        super().__init__("Category not found", details)


class DriverDetailsNotFoundError(NotFoundError):
    """Raised when a DRIVER account has no driver details on record."""

    def __init__(self, account_id: Any = None) -> None:
        details = {"account_id": str(account_id)} if account_id is not None else {}
        super().__init__("Driver details not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(MuebleriaAPIError):
    """Base class for resource conflict errors."""

    status_code = 409
    category = "Conflict"


class UsernameTakenError(ConflictError):
    """Raised when trying to create an account whose username already exists."""

    def __init__(self, username: str | None = None) -> None:
        details = {"username": username} if username else {}
        super().__init__("Username already exists", details)


class AccessRuleConflictError(ConflictError):
    """Raised when an account already has a rule for the given day."""

    def __init__(self, account_id: Any = None, day_of_week: str | None = None) -> None:
        details: dict[str, Any] = {}
        if account_id is not None:
            details["account_id"] = str(account_id)
        if day_of_week:
            details["day_of_week"] = day_of_week
        super().__init__("Account already has an access rule for this day", details)


class BranchConflictError(ConflictError):
    """Raised when a branch name or order prefix is already in use."""

    def __init__(self, field: str, value: str) -> None:
        label = "name" if field == "name" else "order prefix"
        super().__init__(f"A branch with this {label} already exists", {field: value})


class CategoryNameTakenError(ConflictError):
    """Raised when a category name is already in use."""

    def __init__(self, name: str | None = None) -> None:
        details = {"name": name} if name else {}
        super().__init__("A category with this name already exists", details)


class LicenseNumberTakenError(ConflictError):
    """Raised when a driver license number is registered to another account."""

    def __init__(self) -> None:
        super().__init__("License number already registered")


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(MuebleriaAPIError):
    """Base class for validation errors."""

    status_code = 400
    category = "Invalid request"


# =============================================================================
# Authorization Errors (403)
# =============================================================================


class AuthorizationDeniedError(MuebleriaAPIError):
    """Raised when the role hierarchy does not allow an action."""

    status_code = 403
    category = "Access denied"

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class AccessWindowDeniedError(MuebleriaAPIError):
    """Raised by the request gate when the current moment is outside every access window."""

    status_code = 403
    category = "Access denied"

    def __init__(self, message: str = "Access outside of allowed hours") -> None:
        super().__init__(message)


class AccountLockedError(MuebleriaAPIError):
    """Raised at login when the account's schedule does not admit access now.

    Kept distinct from bad credentials so the caller can show the reason.
    """

    status_code = 403
    category = "Access denied"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AccountDisabledError(MuebleriaAPIError):
    """Raised at login when the account is inactive."""

    status_code = 403
    category = "Access denied"

    def __init__(self) -> None:
        super().__init__("Account is disabled")


# =============================================================================
# Authentication Errors (401)
# =============================================================================


class AuthenticationError(MuebleriaAPIError):
    """Base class for authentication failures."""

    status_code = 401
    category = "Authentication required"


class InvalidCredentialsError(AuthenticationError):
    """Raised when username or password is wrong."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class StaleCredentialError(AuthenticationError):
    """Raised when a token was issued before the account's last password change."""

    def __init__(self) -> None:
        super().__init__("Session is no longer valid, please log in again")
