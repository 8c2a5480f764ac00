"""Token endpoint exchanges for the admin client.

Performs the password / client credentials grant, the refresh grant and the
logout call against the realm's OpenID Connect endpoints. Forms are sent as
application/x-www-form-urlencoded as required by RFC 6749.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from kcadmin.models.config import CredentialConfig
from kcadmin.models.errors import AuthExchangeError, DecodeError, TransportError
from kcadmin.models.tokens import AccessTokenResponse

logger = logging.getLogger(__name__)


class TokenService:
    """Thin transport for the token and logout endpoints.

    Confidential clients authenticate every call with HTTP Basic credentials
    built from the client id and secret. Public clients are expected to carry
    their ``client_id`` in the form itself.
    """

    def __init__(self, config: CredentialConfig, http_client: httpx.Client):
        """Initialize token service.

        Args:
            config: Credential configuration the endpoints are derived from
            http_client: Synchronous HTTP client used for every exchange
        """
        self.config = config
        self._http_client = http_client

    def grant_token(self, form: Mapping[str, str | None]) -> AccessTokenResponse:
        """Exchange credentials for a token pair."""
        logger.debug(
            f"Requesting token grant_type={form.get('grant_type')} "
            f"realm={self.config.realm}"
        )
        return self._token_request(form, "token grant")

    def refresh_token(self, form: Mapping[str, str | None]) -> AccessTokenResponse:
        """Exchange a refresh token for a new access token."""
        logger.debug(f"Refreshing access token for realm={self.config.realm}")
        return self._token_request(form, "token refresh")

    def logout(self, form: Mapping[str, str | None]) -> None:
        """Revoke the session bound to the refresh token in ``form``.

        Raises:
            AuthExchangeError: If the endpoint answers with status >= 400
            TransportError: If the HTTP exchange fails
        """
        response = self._post(self.config.logout_url, form, "logout")
        self._raise_for_status(response)
        logger.info(f"Logged out of realm {self.config.realm}")

    def _token_request(
        self, form: Mapping[str, str | None], action: str
    ) -> AccessTokenResponse:
        response = self._post(self.config.token_url, form, action)
        self._raise_for_status(response)
        try:
            return AccessTokenResponse.model_validate_json(response.text)
        except ValidationError as e:
            raise DecodeError(f"Invalid token response format: {e}") from e

    def _post(
        self, url: str, form: Mapping[str, str | None], action: str
    ) -> httpx.Response:
        data = {key: value for key, value in form.items() if value is not None}
        try:
            # Non-streaming send reads the body and releases the connection.
            return self._http_client.post(
                url,
                data=data,
                headers={"Accept": "application/json"},
                auth=self._basic_auth(),
            )
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error during {action}: {e}") from e

    def _basic_auth(self) -> httpx.BasicAuth | None:
        if self.config.public_client:
            return None
        return httpx.BasicAuth(self.config.client_id, self.config.client_secret or "")

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code >= 400:
            logger.warning(f"Token endpoint answered {response.status_code}")
            raise AuthExchangeError(response.status_code, response.text)
