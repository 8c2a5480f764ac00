"""Token endpoint payload and token lifecycle state.

Contains the decoded token endpoint response and the immutable state record
the token manager swaps on every grant, refresh and invalidation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AccessTokenResponse(BaseModel):
    """Successful token endpoint response (RFC 6749 Section 5.1)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 0  # Seconds until access token expiry
    refresh_expires_in: int = 0  # Seconds until refresh token expiry
    refresh_token: str | None = None
    id_token: str | None = None
    not_before_policy: int | None = Field(default=None, alias="not-before-policy")
    session_state: str | None = None
    scope: str | None = None


class TokenLifecycle(str, Enum):
    """Observable states of the managed credential."""

    EMPTY = "empty"
    VALID = "valid"
    NEAR_EXPIRY = "near_expiry"
    INVALIDATED = "invalidated"


@dataclass(frozen=True)
class TokenState:
    """Immutable token state.

    Expiry values are epoch seconds. A new instance replaces the previous one
    on every grant, refresh or invalidation; fields are never updated in place.
    """

    response: AccessTokenResponse
    expires_at: int
    refresh_expires_at: int
    invalidated: bool = False

    @classmethod
    def from_grant(cls, response: AccessTokenResponse, requested_at: int) -> TokenState:
        """Build state for a fresh grant issued at ``requested_at``."""
        return cls(
            response=response,
            expires_at=requested_at + response.expires_in,
            refresh_expires_at=requested_at + response.refresh_expires_in,
        )

    def refreshed(self, response: AccessTokenResponse, requested_at: int) -> TokenState:
        """Build state for a refresh; the refresh token expiry is carried over."""
        return TokenState(
            response=response,
            expires_at=requested_at + response.expires_in,
            refresh_expires_at=self.refresh_expires_at,
        )

    def expired_now(self) -> TokenState:
        """Return a copy that is expired regardless of the clock."""
        return replace(self, expires_at=-1, invalidated=True)

    @property
    def access_token(self) -> str:
        return self.response.access_token

    @property
    def refresh_token(self) -> str | None:
        return self.response.refresh_token

    def is_expired(self, now: int, min_validity: int) -> bool:
        """Check if the access token is expired or within ``min_validity`` of it."""
        return now + min_validity >= self.expires_at

    def is_refresh_expired(self, now: int, min_validity: int) -> bool:
        """Check if the refresh token is expired or within ``min_validity`` of it."""
        return now + min_validity >= self.refresh_expires_at

    def can_refresh(self, now: int, min_validity: int) -> bool:
        """Check if a refresh token exists and is still usable."""
        return bool(self.refresh_token) and not self.is_refresh_expired(
            now, min_validity
        )
