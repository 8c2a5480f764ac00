"""Access token lifecycle management.

Owns the single credential of an admin client: grants it on first use,
refreshes it shortly before it expires, forgets it on explicit invalidation
and revokes it on logout.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

import httpx

from kcadmin.auth.token_service import TokenService
from kcadmin.models.config import PASSWORD, REFRESH_TOKEN, CredentialConfig
from kcadmin.models.errors import AuthExchangeError
from kcadmin.models.tokens import AccessTokenResponse, TokenLifecycle, TokenState

logger = logging.getLogger(__name__)

DEFAULT_MIN_VALIDITY = 30


class TokenManager:
    """Single-flight manager for one access token.

    Every read and write of the token state happens under one reentrant lock,
    and grants and refreshes run while holding it. Concurrent callers block
    until an in-flight exchange finishes and then observe its result.

    A token counts as expired once ``now + min_token_validity >= expiry`` so
    it is never sent when it would lapse in flight.
    """

    def __init__(
        self,
        config: CredentialConfig,
        http_client: httpx.Client,
        clock: Callable[[], float] = time.time,
        token_service: TokenService | None = None,
    ):
        """Initialize token manager.

        Args:
            config: Identity and server the tokens are obtained for
            http_client: Client used by the default token service
            clock: Source of epoch seconds, injectable for tests
            token_service: Optional pre-built token endpoint transport
        """
        self.config = config
        self._token_service = token_service or TokenService(config, http_client)
        self._clock = clock
        self._lock = threading.RLock()
        self._state: TokenState | None = None
        self._min_token_validity = DEFAULT_MIN_VALIDITY

    @property
    def min_token_validity(self) -> int:
        with self._lock:
            return self._min_token_validity

    @min_token_validity.setter
    def min_token_validity(self, seconds: int) -> None:
        with self._lock:
            self._min_token_validity = seconds

    @property
    def state(self) -> TokenLifecycle:
        """Current lifecycle state of the managed token."""
        with self._lock:
            if self._state is None:
                return TokenLifecycle.EMPTY
            if self._state.invalidated:
                return TokenLifecycle.INVALIDATED
            if self._state.is_expired(self._now(), self._min_token_validity):
                return TokenLifecycle.NEAR_EXPIRY
            return TokenLifecycle.VALID

    def get_access_token(self) -> AccessTokenResponse:
        """Return a currently valid token, granting or refreshing as needed."""
        with self._lock:
            if self._state is None:
                return self.grant_token()
            if self._state.is_expired(self._now(), self._min_token_validity):
                return self.refresh_token()
            return self._state.response

    def get_access_token_string(self) -> str:
        return self.get_access_token().access_token

    def grant_token(self) -> AccessTokenResponse:
        """Obtain a brand new token pair with the configured grant.

        Raises:
            AuthExchangeError: If the token endpoint rejects the grant
            TransportError: If the HTTP exchange fails
        """
        form: dict[str, str | None] = {"grant_type": self.config.grant_type}
        if self.config.grant_type == PASSWORD:
            form["username"] = self.config.username
            form["password"] = self.config.password
        if self.config.scope is not None:
            form["scope"] = self.config.scope
        if self.config.public_client:
            form["client_id"] = self.config.client_id

        with self._lock:
            requested_at = self._now()
            response = self._token_service.grant_token(form)
            self._state = TokenState.from_grant(response, requested_at)
            logger.info(
                f"Granted access token for {self.config.client_id} "
                f"(expires in {response.expires_in}s)"
            )
            return response

    def refresh_token(self) -> AccessTokenResponse:
        """Refresh the access token, falling back to a full grant.

        The grant fallback is used when there is no token, no refresh token,
        the refresh token has expired, or the token endpoint rejects the
        refresh.
        """
        with self._lock:
            state = self._state
            if state is None or not state.can_refresh(
                self._now(), self._min_token_validity
            ):
                return self.grant_token()

            form: dict[str, str | None] = {
                "grant_type": REFRESH_TOKEN,
                "refresh_token": state.refresh_token,
            }
            if self.config.public_client:
                form["client_id"] = self.config.client_id

            try:
                requested_at = self._now()
                response = self._token_service.refresh_token(form)
            except AuthExchangeError as e:
                logger.warning(f"Token refresh rejected ({e}), requesting a new grant")
                return self.grant_token()

            self._state = state.refreshed(response, requested_at)
            logger.info(f"Refreshed access token for {self.config.client_id}")
            return response

    def invalidate(self, token: str) -> None:
        """Force expiry of ``token`` if it is still the current access token.

        Signals for a token that has since been replaced are ignored.
        """
        with self._lock:
            if self._state is None or self._state.access_token != token:
                return
            self._state = self._state.expired_now()
            logger.debug("Access token invalidated")

    def logout(self) -> None:
        """Revoke the session and forget the token.

        Does nothing without a usable refresh token. The state is cleared even
        when the logout call fails; the failure itself is still raised.
        """
        with self._lock:
            state = self._state
            if state is None or not state.can_refresh(
                self._now(), self._min_token_validity
            ):
                return

            form: dict[str, str | None] = {"refresh_token": state.refresh_token}
            if self.config.public_client:
                form["client_id"] = self.config.client_id

            try:
                self._token_service.logout(form)
            finally:
                self._state = None

    def _now(self) -> int:
        return int(self._clock())
