"""Credential configuration for the admin client.

Immutable record of where to authenticate and with which identity.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from kcadmin.models.errors import ConfigurationError

PASSWORD = "password"
CLIENT_CREDENTIALS = "client_credentials"
REFRESH_TOKEN = "refresh_token"

SUPPORTED_GRANT_TYPES = frozenset({PASSWORD, CLIENT_CREDENTIALS})

ENV_PREFIX = "KCADMIN_"


@dataclass(frozen=True)
class CredentialConfig:
    """Server location plus the grant parameters of one client identity.

    A client without a secret is public and must send its ``client_id`` in
    token, refresh and logout forms. A confidential client authenticates
    with HTTP Basic credentials instead.
    """

    # Required fields first
    server_url: str
    realm: str
    client_id: str

    # Optional fields with defaults last
    username: str | None = None
    password: str | None = None
    client_secret: str | None = None
    grant_type: str = PASSWORD
    scope: str | None = None
    public_client: bool | None = None  # None means "public when no secret"

    def __post_init__(self) -> None:
        if not self.server_url:
            raise ConfigurationError("server_url required")
        if not self.realm:
            raise ConfigurationError("realm required")
        if not self.client_id:
            raise ConfigurationError("client_id required")
        if self.grant_type not in SUPPORTED_GRANT_TYPES:
            raise ConfigurationError(
                f"Unsupported grant_type '{self.grant_type}', expected one of "
                f"{sorted(SUPPORTED_GRANT_TYPES)}"
            )
        if self.grant_type == PASSWORD:
            if self.username is None:
                raise ConfigurationError("username required")
            if self.password is None:
                raise ConfigurationError("password required")

        if self.public_client is None:
            object.__setattr__(self, "public_client", self.client_secret is None)
        elif not self.public_client and self.client_secret is None:
            raise ConfigurationError("client_secret required for confidential clients")

        if self.server_url.endswith("/"):
            object.__setattr__(self, "server_url", self.server_url[:-1])

    @classmethod
    def from_env(
        cls, prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None
    ) -> CredentialConfig:
        """Build a config from ``<prefix>SERVER_URL``, ``<prefix>REALM`` and friends.

        Recognized suffixes: SERVER_URL, REALM, CLIENT_ID, CLIENT_SECRET,
        USERNAME, PASSWORD, GRANT_TYPE, SCOPE.

        Raises:
            ConfigurationError: If a required variable is missing
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            value = env.get(f"{prefix}{name}")
            return value if value else None

        return cls(
            server_url=read("SERVER_URL") or "",
            realm=read("REALM") or "",
            client_id=read("CLIENT_ID") or "",
            username=read("USERNAME"),
            password=read("PASSWORD"),
            client_secret=read("CLIENT_SECRET"),
            grant_type=read("GRANT_TYPE") or PASSWORD,
            scope=read("SCOPE"),
        )

    @property
    def realm_url(self) -> str:
        return f"{self.server_url}/realms/{self.realm}"

    @property
    def token_url(self) -> str:
        return f"{self.realm_url}/protocol/openid-connect/token"

    @property
    def logout_url(self) -> str:
        return f"{self.realm_url}/protocol/openid-connect/logout"
