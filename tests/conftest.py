from typing import Any, Dict, Iterable, List, Tuple

import pytest
import requests

from oauth2_grants import OAuth2Client, RequestsTransport


class FakeTransport:
    """A Transport that records each call and replies with a canned response."""

    def __init__(self, status_code: int = 200, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.calls: List[Tuple[str, str, str, List[Tuple[str, str]]]] = []

    def post(self, url: str, body: str, headers: Iterable[Tuple[str, str]]) -> Tuple[int, str]:
        self.calls.append(("POST", url, body, list(headers)))
        return self.status_code, self.body

    def get(self, url: str, headers: Iterable[Tuple[str, str]]) -> Tuple[int, str]:
        self.calls.append(("GET", url, "", list(headers)))
        return self.status_code, self.body


@pytest.fixture(scope="session")
def session() -> requests.Session:
    return requests.Session()


@pytest.fixture(scope="session")
def token_endpoint() -> str:
    return "https://as.local/token"


@pytest.fixture(scope="session")
def authorization_endpoint() -> str:
    return "https://as.local/authorize"


@pytest.fixture(scope="session")
def client_id() -> str:
    return "client_id"


@pytest.fixture(scope="session")
def client_secret() -> str:
    return "client_secret"


@pytest.fixture(scope="session")
def redirect_url() -> str:
    return "https://myapp.local/callback"


@pytest.fixture(scope="session")
def access_token() -> str:
    return "access_token"


@pytest.fixture(scope="session")
def refresh_token() -> str:
    return "refresh_token"


@pytest.fixture(scope="session")
def token_response(access_token: str, refresh_token: str) -> Dict[str, Any]:
    return {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": 3600,
        "refresh_token": refresh_token,
        "scope": "openid email",
    }


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def transport(session: requests.Session) -> RequestsTransport:
    return RequestsTransport(session)


@pytest.fixture()
def oauth2client(
    token_endpoint: str, client_id: str, client_secret: str, transport: RequestsTransport
) -> OAuth2Client:
    return OAuth2Client(token_endpoint, client_id, client_secret, transport=transport)
