import httpx
import pytest
from helpers import SERVER_URL, FakeClock

from kcadmin.models.config import CredentialConfig


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def public_config() -> CredentialConfig:
    return CredentialConfig(
        server_url=SERVER_URL,
        realm="master",
        client_id="admin-cli",
        username="admin",
        password="admin",
    )


@pytest.fixture
def confidential_config() -> CredentialConfig:
    return CredentialConfig(
        server_url=SERVER_URL,
        realm="master",
        client_id="automation",
        client_secret="s3cret",
        grant_type="client_credentials",
    )


@pytest.fixture
def http_client():
    with httpx.Client() as client:
        yield client
