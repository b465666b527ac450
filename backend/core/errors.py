"""Error taxonomy for the bonus workflow.

Every error carries a short machine-readable ``reason`` so that the HTTP layer
(and any other caller) can render the precise cause without parsing messages.
"""
from __future__ import annotations


class WeldTrackError(Exception):
    """Base class for all domain errors."""

    reason: str = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__doc__ or self.reason)

    @property
    def message(self) -> str:
        return str(self)


# ----------------------------------------------------------------------
# validation failures
# ----------------------------------------------------------------------
class ClaimValidationError(WeldTrackError):
    """Claim rejected before any write."""

    reason = "invalid-claim"


class NoLineItemsError(ClaimValidationError):
    """No welds are listed on the claim."""

    reason = "no-line-items"


class WelderBudgetExceededError(ClaimValidationError):
    """Welder allocations exceed the welder budget ceiling."""

    reason = "welder-over"


class ForemanBudgetExceededError(ClaimValidationError):
    """Foreman allocations exceed the foreman budget ceiling."""

    reason = "foreman-over"


class TotalBudgetExceededError(ClaimValidationError):
    """Total allocations exceed the component bonus."""

    reason = "grand-total-over"


class EmptyRejectionCommentError(ClaimValidationError):
    """A rejection reason must be entered in the comment field."""

    reason = "empty-rejection-comment"


class ClaimItemChangedError(ClaimValidationError):
    """The catalog item of a submitted claim cannot be changed."""

    reason = "item-changed"


# ----------------------------------------------------------------------
# lookups
# ----------------------------------------------------------------------
class NotFoundError(WeldTrackError):
    reason = "not-found"


class ClaimNotFoundError(NotFoundError):
    """Claim not found."""

    reason = "claim-not-found"


class CatalogItemNotFoundError(NotFoundError):
    """Catalog item not found."""

    reason = "item-not-found"


class UserNotFoundError(NotFoundError):
    """Account not found."""

    reason = "user-not-found"


# ----------------------------------------------------------------------
# accounts
# ----------------------------------------------------------------------
class AuthenticationError(WeldTrackError):
    reason = "authentication-failed"


class InvalidCredentialsError(AuthenticationError):
    """Invalid username or password."""

    reason = "invalid-credentials"


class AccountPendingError(AuthenticationError):
    """Account is pending approval."""

    reason = "account-pending"


class UserAlreadyExistsError(WeldTrackError):
    """Username already exists."""

    reason = "duplicate-user"


class PermissionDeniedError(WeldTrackError):
    """Not allowed for this account."""

    reason = "forbidden"


# ----------------------------------------------------------------------
# workflow
# ----------------------------------------------------------------------
class ClaimLockedError(WeldTrackError):
    """Claim is no longer pending and cannot be edited."""

    reason = "claim-locked"


class InvalidTransitionError(WeldTrackError):
    """Status change not allowed; reset the claim to pending first."""

    reason = "invalid-transition"


# ----------------------------------------------------------------------
# storage
# ----------------------------------------------------------------------
class StoreError(WeldTrackError):
    """The storage backend is unreachable or misconfigured."""

    reason = "store-unavailable"
