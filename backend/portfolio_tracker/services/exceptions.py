# backend/portfolio_tracker/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
main.py maps them to HTTP responses with the shared ErrorDetail envelope.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   └── InvalidGroupingError
    ├── NotFoundError
    │   ├── PortfolioNotFoundError
    │   ├── PortfolioItemNotFoundError
    │   ├── ProfitLogNotFoundError
    │   ├── AssetNotFoundError
    │   └── UserNotFoundError
    ├── ConflictError
    │   ├── UserExistsError
    │   ├── AssetExistsError
    │   └── ProfitLogExistsError
    ├── AuthenticationError
    │   ├── InvalidCredentialsError
    │   └── TokenExpiredError
    └── AuthorizationError
        └── PermissionDeniedError

The valuation calculators never raise: degenerate inputs flow through
arithmetically. These exceptions belong to the orchestration and CRUD layers.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when a service receives parameters it cannot act on.

    Request-shape validation is Pydantic's job; this covers rules that
    need data (e.g. an item referencing a portfolio of another user).

    Attributes:
        field: The offending field (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidGroupingError(ValidationError):
    """Raised when a profit trend is requested with an unknown group_by."""

    VALID_OPTIONS = ("day", "week", "month")

    def __init__(self, group_by: str) -> None:
        self.group_by = group_by
        super().__init__(
            f"Invalid group_by: '{group_by}'. Valid options: {', '.join(self.VALID_OPTIONS)}",
            field="group_by",
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for missing (or soft-deleted) resources.

    Attributes:
        resource_type: Type of resource (e.g. "Portfolio", "Asset")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class PortfolioNotFoundError(NotFoundError):
    def __init__(self, portfolio_id: int) -> None:
        self.portfolio_id = portfolio_id
        super().__init__(
            f"Portfolio {portfolio_id} not found",
            resource_type="Portfolio",
            resource_id=portfolio_id,
        )


class PortfolioItemNotFoundError(NotFoundError):
    def __init__(self, item_id: int) -> None:
        super().__init__(
            f"Portfolio item {item_id} not found",
            resource_type="PortfolioItem",
            resource_id=item_id,
        )


class ProfitLogNotFoundError(NotFoundError):
    def __init__(self, log_id: int) -> None:
        super().__init__(
            f"Profit log {log_id} not found",
            resource_type="ProfitLog",
            resource_id=log_id,
        )


class AssetNotFoundError(NotFoundError):
    """
    Raised when an asset is looked up by id or code and does not exist.

    Attributes:
        asset_code: Code used in the lookup, when known
    """

    def __init__(self, asset_id: int | None = None, asset_code: str | None = None) -> None:
        self.asset_code = asset_code
        identifier = asset_code if asset_code is not None else asset_id
        label = f"'{identifier}'" if asset_code is not None else f"{identifier}"
        super().__init__(
            f"Asset {label} not found",
            resource_type="Asset",
            resource_id=identifier,
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__(
            f"User {user_id} not found",
            resource_type="User",
            resource_id=user_id,
        )


# =============================================================================
# CONFLICT ERRORS
# =============================================================================


class ConflictError(ServiceError):
    """Raised when a write would violate a uniqueness rule."""
    pass


class UserExistsError(ConflictError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already registered")


class AssetExistsError(ConflictError):
    def __init__(self, asset_code: str) -> None:
        self.asset_code = asset_code
        super().__init__(f"Asset code '{asset_code}' already exists")


class ProfitLogExistsError(ConflictError):
    """A profit log is unique per (item, date)."""

    def __init__(self, item_id: int, log_date) -> None:
        self.item_id = item_id
        self.log_date = log_date
        super().__init__(f"Profit log for item {item_id} on {log_date} already exists")


# =============================================================================
# AUTHENTICATION / AUTHORIZATION ERRORS
# =============================================================================


class AuthenticationError(ServiceError):
    """Base class for failures to establish who the caller is (401)."""
    pass


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    def __init__(self, token_type: str = "access") -> None:
        self.token_type = token_type
        super().__init__(f"The {token_type} token has expired")


class AuthorizationError(ServiceError):
    """Base class for authenticated callers lacking rights (403)."""
    pass


class PermissionDeniedError(AuthorizationError):
    """
    Raised when a user acts on a resource they do not own, or on an
    admin-only resource without the admin role.
    """

    def __init__(
            self,
            resource_type: str,
            resource_id: int | str | None = None,
            message: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message or f"Permission denied for {resource_type} {resource_id}")


__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidGroupingError",
    "NotFoundError",
    "PortfolioNotFoundError",
    "PortfolioItemNotFoundError",
    "ProfitLogNotFoundError",
    "AssetNotFoundError",
    "UserNotFoundError",
    "ConflictError",
    "UserExistsError",
    "AssetExistsError",
    "ProfitLogExistsError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "AuthorizationError",
    "PermissionDeniedError",
]
