"""Shared test helpers."""

SERVER_URL = "https://sso.example.com"
TOKEN_URL = f"{SERVER_URL}/realms/master/protocol/openid-connect/token"
LOGOUT_URL = f"{SERVER_URL}/realms/master/protocol/openid-connect/logout"


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def token_payload(
    access_token: str = "access-1",
    refresh_token: str | None = "refresh-1",
    expires_in: int = 300,
    refresh_expires_in: int = 1800,
) -> dict:
    """Build a token endpoint JSON payload."""
    payload = {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": expires_in,
        "refresh_expires_in": refresh_expires_in,
        "not-before-policy": 0,
        "session_state": "session-abc",
        "scope": "profile email",
    }
    if refresh_token is not None:
        payload["refresh_token"] = refresh_token
    return payload
