"""Admin API representations.

Only the commonly used fields are declared; any other field the server sends
is kept as an extra attribute and sent back unchanged on update.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Representation(BaseModel):
    """Base for camelCase admin API payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class RealmRepresentation(Representation):
    id: str | None = None
    realm: str | None = None
    display_name: str | None = None
    enabled: bool | None = None
    registration_allowed: bool | None = None
    access_token_lifespan: int | None = None


class CredentialRepresentation(Representation):
    type: str | None = None
    value: str | None = None
    temporary: bool | None = None


class UserRepresentation(Representation):
    id: str | None = None
    username: str | None = None
    enabled: bool | None = None
    email: str | None = None
    email_verified: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    attributes: dict[str, list[str]] | None = None
    required_actions: list[str] | None = None
    credentials: list[CredentialRepresentation] | None = None
    groups: list[str] | None = None
    created_timestamp: int | None = None


class GroupRepresentation(Representation):
    id: str | None = None
    name: str | None = None
    path: str | None = None
    attributes: dict[str, list[str]] | None = None
    sub_groups: list[GroupRepresentation] | None = None


class ClientRepresentation(Representation):
    id: str | None = None
    client_id: str | None = None
    name: str | None = None
    enabled: bool | None = None
    public_client: bool | None = None
    secret: str | None = None
    redirect_uris: list[str] | None = None
    service_accounts_enabled: bool | None = None


class RoleRepresentation(Representation):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    composite: bool | None = None
    client_role: bool | None = None
    container_id: str | None = None


class ServerInfoRepresentation(Representation):
    system_info: dict[str, Any] | None = None
    memory_info: dict[str, Any] | None = None
    themes: dict[str, Any] | None = None
