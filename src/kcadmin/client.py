"""Admin client entry point.

Wires a credential configuration, the token manager and the HTTP client into
resource proxies for the admin REST API.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType

import httpx

from kcadmin.auth.token_manager import TokenManager
from kcadmin.dispatch.engine import ResourceProxy
from kcadmin.models.config import ENV_PREFIX, PASSWORD, CredentialConfig
from kcadmin.models.errors import ConfigurationError
from kcadmin.resources.admin import REALMS, SERVER_INFO
from kcadmin.routes import Resource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class AdminClient:
    """Authenticated client for one admin identity.

    Either manages its own token through a ``TokenManager`` built from the
    grant parameters, or sends a fixed ``authorization`` bearer token that is
    never refreshed.

    Example:
        with AdminClient(
            "https://sso.example.com",
            realm="master",
            client_id="admin-cli",
            username="admin",
            password="admin",
        ) as admin:
            realms = admin.realms().find_all()
    """

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str | None = None,
        username: str | None = None,
        password: str | None = None,
        client_secret: str | None = None,
        grant_type: str | None = None,
        scope: str | None = None,
        public_client: bool | None = None,
        http_client: httpx.Client | None = None,
        authorization: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize admin client.

        Args:
            server_url: Root URL of the server, e.g. ``https://sso.example.com``
            realm: Realm the admin identity authenticates against
            client_id: Client the tokens are issued to
            username: Username for the password grant
            password: Password for the password grant
            client_secret: Secret of a confidential client
            grant_type: ``password`` (default) or ``client_credentials``
            scope: Optional scope requested with every grant
            public_client: Whether the client is public; derived from
                ``client_secret`` when omitted
            http_client: Client to use; it is not closed by ``close()``
            authorization: Fixed bearer token; disables token management
            timeout: Timeout for the internally created HTTP client

        Raises:
            ConfigurationError: If required settings are missing
        """
        if not server_url:
            raise ConfigurationError("server_url required")
        if not realm:
            raise ConfigurationError("realm required")

        self._authorization = authorization
        self._config: CredentialConfig | None = None
        if authorization is None:
            self._config = CredentialConfig(
                server_url=server_url,
                realm=realm,
                client_id=client_id or "",
                username=username,
                password=password,
                client_secret=client_secret,
                grant_type=grant_type or PASSWORD,
                scope=scope,
                public_client=public_client,
            )

        self._server_url = server_url.rstrip("/")
        self._realm = realm
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._token_manager = (
            TokenManager(self._config, self._http_client) if self._config else None
        )
        self._closed = False

    @classmethod
    def from_config(
        cls, config: CredentialConfig, http_client: httpx.Client | None = None
    ) -> AdminClient:
        return cls(
            config.server_url,
            config.realm,
            client_id=config.client_id,
            username=config.username,
            password=config.password,
            client_secret=config.client_secret,
            grant_type=config.grant_type,
            scope=config.scope,
            public_client=config.public_client,
            http_client=http_client,
        )

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> AdminClient:
        """Build a client from ``KCADMIN_*`` environment variables."""
        return cls.from_config(CredentialConfig.from_env(prefix, environ), http_client)

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def realm_name(self) -> str:
        return self._realm

    @property
    def token_manager(self) -> TokenManager | None:
        """Token manager, or ``None`` when a fixed authorization token is used."""
        return self._token_manager

    @property
    def closed(self) -> bool:
        return self._closed

    def realms(self) -> ResourceProxy:
        return self.proxy(REALMS, self._server_url)

    def realm(self, realm_name: str) -> ResourceProxy:
        return self.realms().realm(realm_name)

    def server_info(self) -> ResourceProxy:
        return self.proxy(SERVER_INFO, self._server_url)

    def proxy(self, resource: Resource, absolute_url: str) -> ResourceProxy:
        """Bind any route table to ``absolute_url`` with this client's credentials."""
        return ResourceProxy(
            resource,
            absolute_url,
            self._http_client,
            self._resolve_access_token,
            self._invalidate_token,
        )

    def close(self) -> None:
        """Log out and release the HTTP client.

        Both steps are best effort: failures are logged and never raised, so
        this must not be relied on for transactional cleanup. An HTTP client
        passed in by the caller is left open.
        """
        if self._closed:
            return
        self._closed = True

        if self._token_manager is not None:
            try:
                self._token_manager.logout()
            except Exception as e:
                logger.debug(f"Ignoring logout failure during close: {e}")

        if self._owns_http_client:
            try:
                self._http_client.close()
            except Exception as e:
                logger.debug(f"Ignoring HTTP client close failure: {e}")

    def __enter__(self) -> AdminClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _resolve_access_token(self) -> str | None:
        if self._authorization is not None:
            return self._authorization
        if self._token_manager is None:
            raise ConfigurationError("No token manager and no authorization token")
        return self._token_manager.get_access_token_string()

    def _invalidate_token(self, token: str) -> None:
        if self._token_manager is not None:
            self._token_manager.invalidate(token)
