"""Route tables for the admin REST API.

Nested resources are reached through locators, so
``realms -> realm -> users -> user`` composes
``/admin/realms/{realm}/users/{id}``.
"""

from __future__ import annotations

from typing import Any

from kcadmin.models.response import Response
from kcadmin.resources.representations import (
    ClientRepresentation,
    CredentialRepresentation,
    GroupRepresentation,
    RealmRepresentation,
    RoleRepresentation,
    ServerInfoRepresentation,
    UserRepresentation,
)
from kcadmin.routes import Locator, Operation, Param, Resource

_PAGE = (Param.query("first"), Param.query("max"))

# ================================
# Users
# ================================

USER = Resource(
    "user",
    operations={
        "to_representation": Operation("GET", returns=UserRepresentation),
        "update": Operation("PUT", params=(Param.body("user"),)),
        "remove": Operation("DELETE"),
        "reset_password": Operation(
            "PUT", "reset-password", params=(Param.body("credential"),)
        ),
        "logout": Operation("POST", "logout"),
        "groups": Operation(
            "GET",
            "groups",
            params=(
                Param.query("search"),
                *_PAGE,
                Param.query("brief_representation", key="briefRepresentation"),
            ),
            returns=list[GroupRepresentation],
        ),
        "join_group": Operation(
            "PUT", "groups/{groupId}", params=(Param.path("group_id", key="groupId"),)
        ),
        "leave_group": Operation(
            "DELETE", "groups/{groupId}", params=(Param.path("group_id", key="groupId"),)
        ),
        "execute_actions_email": Operation(
            "PUT",
            "execute-actions-email",
            params=(
                Param.body("actions"),
                Param.query("lifespan"),
                Param.query("client_id", key="client_id"),
                Param.query("redirect_uri", key="redirect_uri"),
            ),
        ),
        "credentials": Operation(
            "GET", "credentials", returns=list[CredentialRepresentation]
        ),
    },
)

USERS = Resource(
    "users",
    operations={
        "list": Operation("GET", params=_PAGE, returns=list[UserRepresentation]),
        "search": Operation(
            "GET",
            params=(
                Param.query("search"),
                Param.query("username"),
                Param.query("email"),
                Param.query("first_name", key="firstName"),
                Param.query("last_name", key="lastName"),
                *_PAGE,
                Param.query("exact"),
                Param.query("brief_representation", key="briefRepresentation"),
            ),
            returns=list[UserRepresentation],
        ),
        "count": Operation(
            "GET", "count", params=(Param.query("search"),), returns=int
        ),
        "create": Operation("POST", params=(Param.body("user"),), returns=Response),
        "get": Locator(USER, "{id}", params=(Param.path("id"),)),
        "delete": Operation(
            "DELETE", "{id}", params=(Param.path("id"),), returns=Response
        ),
    },
)

# ================================
# Groups
# ================================

GROUP = Resource(
    "group",
    operations={
        "to_representation": Operation("GET", returns=GroupRepresentation),
        "update": Operation("PUT", params=(Param.body("group"),)),
        "remove": Operation("DELETE"),
        "members": Operation(
            "GET", "members", params=_PAGE, returns=list[UserRepresentation]
        ),
        "subgroup": Operation(
            "POST", "children", params=(Param.body("group"),), returns=Response
        ),
    },
)

GROUPS = Resource(
    "groups",
    operations={
        "groups": Operation(
            "GET",
            params=(Param.query("search"), *_PAGE),
            returns=list[GroupRepresentation],
        ),
        "count": Operation(
            "GET", "count", params=(Param.query("search"),), returns=dict[str, int]
        ),
        "add": Operation("POST", params=(Param.body("group"),), returns=Response),
        "group": Locator(GROUP, "{id}", params=(Param.path("id"),)),
    },
)

# ================================
# Clients and roles
# ================================

ROLE = Resource(
    "role",
    operations={
        "to_representation": Operation("GET", returns=RoleRepresentation),
        "update": Operation("PUT", params=(Param.body("role"),)),
        "remove": Operation("DELETE"),
    },
)

ROLES = Resource(
    "roles",
    operations={
        "list": Operation(
            "GET",
            params=(Param.query("search"), *_PAGE),
            returns=list[RoleRepresentation],
        ),
        "create": Operation("POST", params=(Param.body("role"),)),
        "get": Locator(ROLE, "{role-name}", params=(Param.path("role_name", key="role-name"),)),
        "delete_role": Operation(
            "DELETE",
            "{role-name}",
            params=(Param.path("role_name", key="role-name"),),
        ),
    },
)

CLIENT = Resource(
    "client",
    operations={
        "to_representation": Operation("GET", returns=ClientRepresentation),
        "update": Operation("PUT", params=(Param.body("client"),)),
        "remove": Operation("DELETE"),
        "get_secret": Operation(
            "GET", "client-secret", returns=CredentialRepresentation
        ),
        "generate_new_secret": Operation(
            "POST", "client-secret", returns=CredentialRepresentation
        ),
        "roles": Locator(ROLES, "roles"),
    },
)

CLIENTS = Resource(
    "clients",
    operations={
        "find_all": Operation(
            "GET", params=(Param.query("viewable_only", key="viewableOnly"),),
            returns=list[ClientRepresentation],
        ),
        "find_by_client_id": Operation(
            "GET",
            params=(Param.query("client_id", key="clientId"),),
            returns=list[ClientRepresentation],
        ),
        "create": Operation("POST", params=(Param.body("client"),), returns=Response),
        "get": Locator(CLIENT, "{id}", params=(Param.path("id"),)),
    },
)

# ================================
# Realms
# ================================

REALM = Resource(
    "realm",
    operations={
        "to_representation": Operation("GET", returns=RealmRepresentation),
        "update": Operation("PUT", params=(Param.body("realm"),)),
        "remove": Operation("DELETE"),
        "logout_all": Operation("POST", "logout-all", returns=dict[str, Any]),
        "users": Locator(USERS, "users"),
        "groups": Locator(GROUPS, "groups"),
        "clients": Locator(CLIENTS, "clients"),
        "roles": Locator(ROLES, "roles"),
    },
)

REALMS = Resource(
    "realms",
    path="/admin/realms",
    operations={
        "find_all": Operation(
            "GET",
            params=(Param.query("brief_representation", key="briefRepresentation"),),
            returns=list[RealmRepresentation],
        ),
        "create": Operation("POST", params=(Param.body("realm"),)),
        "realm": Locator(REALM, "{realm}", params=(Param.path("realm"),)),
    },
)

SERVER_INFO = Resource(
    "server_info",
    path="/admin/serverinfo",
    operations={
        "get_info": Operation("GET", returns=ServerInfoRepresentation),
    },
)
