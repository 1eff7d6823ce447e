import base64
from typing import Any, Dict
from urllib.parse import parse_qsl

import pytest
import requests
from requests_mock import Mocker as RequestsMocker

from oauth2_grants import (
    AccessToken,
    ClientAuthMethods,
    ClientCredentialsRequest,
    CodeVerifier,
    InvalidClient,
    InvalidTokenResponse,
    InvalidUri,
    MissingRefreshToken,
    OAuth2Client,
    RequestsTransport,
)


def test_client_credentials(
    requests_mock: RequestsMocker,
    oauth2client: OAuth2Client,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    token_response: Dict[str, Any],
) -> None:
    requests_mock.post(token_endpoint, json=token_response)
    token = oauth2client.client_credentials(scope="openid email", audience="my_api")

    assert isinstance(token, AccessToken)
    assert token.access_token == token_response["access_token"]
    assert token.is_valid()

    assert requests_mock.called_once
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "client_credentials"),
        ("client_id", client_id),
        ("client_secret", client_secret),
        ("scope", "openid email"),
        ("audience", "my_api"),
    ]
    assert requests_mock.last_request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert requests_mock.last_request.headers["Accept"] == "application/json"
    assert requests_mock.last_request.timeout == 10


def test_client_secret_basic(
    requests_mock: RequestsMocker,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    token_response: Dict[str, Any],
) -> None:
    client = OAuth2Client(
        token_endpoint, client_id, client_secret, client_auth=ClientAuthMethods.CLIENT_SECRET_BASIC
    )
    requests_mock.post(token_endpoint, json=token_response)
    client.client_credentials()

    assert parse_qsl(requests_mock.last_request.text) == [("grant_type", "client_credentials")]
    encoded = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
    assert requests_mock.last_request.headers["Authorization"] == f"Basic {encoded}"


def test_authorization_code_flow(
    requests_mock: RequestsMocker,
    oauth2client: OAuth2Client,
    authorization_endpoint: str,
    token_endpoint: str,
    redirect_url: str,
    client_id: str,
    client_secret: str,
    token_response: Dict[str, Any],
) -> None:
    verifier = CodeVerifier()
    azr = oauth2client.authorization_request(
        authorization_endpoint, redirect_url=redirect_url, scope="openid email", state="xyz", code_verifier=verifier
    )
    assert ("code_challenge", verifier.get_code_challenge()) in azr.params()

    code = azr.validate_callback(f"{redirect_url}?code=my_code&state=xyz")

    requests_mock.post(token_endpoint, json=token_response)
    token = oauth2client.authorization_code(code, redirect_url, code_verifier=verifier)
    assert token.refresh_token == token_response["refresh_token"]
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "authorization_code"),
        ("redirect_uri", redirect_url),
        ("client_id", client_id),
        ("client_secret", client_secret),
        ("code_verifier", verifier.value),
        ("code", "my_code"),
    ]


def test_password(
    requests_mock: RequestsMocker,
    oauth2client: OAuth2Client,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    token_response: Dict[str, Any],
) -> None:
    requests_mock.post(token_endpoint, json=token_response)
    oauth2client.password("user", "pass", scope=["read"])
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "password"),
        ("client_id", client_id),
        ("client_secret", client_secret),
        ("scope", "read"),
        ("username", "user"),
        ("password", "pass"),
    ]


def test_refresh_token(
    requests_mock: RequestsMocker,
    oauth2client: OAuth2Client,
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    refresh_token: str,
    token_response: Dict[str, Any],
) -> None:
    requests_mock.post(token_endpoint, json=token_response)
    token = AccessToken("foo", "Bearer", refresh_token=refresh_token)
    new_token = oauth2client.refresh_token(token)
    assert new_token.access_token == token_response["access_token"]
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "refresh_token"),
        ("client_id", client_id),
        ("client_secret", client_secret),
        ("refresh_token", refresh_token),
    ]

    oauth2client.refresh_token("other_refresh_token", scope="read")
    assert ("refresh_token", "other_refresh_token") in parse_qsl(requests_mock.last_request.text)
    assert ("scope", "read") in parse_qsl(requests_mock.last_request.text)

    with pytest.raises(MissingRefreshToken):
        oauth2client.refresh_token(AccessToken("foo", "Bearer"))
    assert requests_mock.call_count == 2


def test_token_endpoint_error(
    requests_mock: RequestsMocker, oauth2client: OAuth2Client, token_endpoint: str
) -> None:
    requests_mock.post(
        token_endpoint, status_code=401, json={"error": "invalid_client", "error_description": "unknown client"}
    )
    with pytest.raises(InvalidClient) as exc:
        oauth2client.client_credentials()
    assert exc.value.status_code == 401
    assert exc.value.description == "unknown client"


def test_token_endpoint_invalid_response(
    requests_mock: RequestsMocker, oauth2client: OAuth2Client, token_endpoint: str
) -> None:
    requests_mock.post(token_endpoint, json={"token_type": "Bearer"})
    with pytest.raises(InvalidTokenResponse):
        oauth2client.client_credentials()

    requests_mock.post(token_endpoint, status_code=503, text="Service Unavailable")
    with pytest.raises(InvalidTokenResponse) as exc:
        oauth2client.client_credentials()
    assert exc.value.status_code == 503


def test_network_errors_are_not_handled(
    requests_mock: RequestsMocker, oauth2client: OAuth2Client, token_endpoint: str
) -> None:
    requests_mock.post(token_endpoint, exc=requests.exceptions.ConnectTimeout)
    with pytest.raises(requests.exceptions.ConnectTimeout):
        oauth2client.client_credentials()


def test_invalid_client_configuration(client_id: str) -> None:
    with pytest.raises(InvalidUri):
        OAuth2Client("http://localhost/token", client_id)

    client = OAuth2Client("http://localhost/token", client_id, testing=True)
    assert client.token_endpoint == "http://localhost/token"
    assert client.client_auth == ClientAuthMethods.CLIENT_SECRET_POST
    assert isinstance(client.transport, RequestsTransport)

    with pytest.raises(ValueError):
        OAuth2Client("https://as.local/token", client_id, client_auth="private_key_jwt")


def test_client_secret_not_in_repr(oauth2client: OAuth2Client, client_secret: str) -> None:
    assert client_secret not in repr(oauth2client)


def test_requests_transport_get(requests_mock: RequestsMocker, transport: RequestsTransport) -> None:
    url = "https://as.local/.well-known/oauth-authorization-server"
    requests_mock.get(url, text="{}")
    assert transport.get(url, [("Accept", "application/json")]) == (200, "{}")
    assert requests_mock.last_request.headers["Accept"] == "application/json"


def test_request_reused_across_clients(requests_mock: RequestsMocker, token_response: Dict[str, Any]) -> None:
    client_a = OAuth2Client("https://a.local/token", "client_a", "secret_a")
    client_b = OAuth2Client("https://b.local/token", "client_b", "secret_b")
    client_c = OAuth2Client(
        "https://c.local/token", "client_c", "secret_c", client_auth=ClientAuthMethods.CLIENT_SECRET_BASIC
    )
    requests_mock.post("https://a.local/token", json=token_response)
    requests_mock.post("https://b.local/token", json=token_response)
    requests_mock.post("https://c.local/token", json=token_response)

    request = ClientCredentialsRequest(scope="read")
    client_a.token_request(request)
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "client_credentials"),
        ("client_id", "client_a"),
        ("client_secret", "secret_a"),
        ("scope", "read"),
    ]
    assert request.client_id is None
    assert request.client_secret is None

    client_b.token_request(request)
    assert requests_mock.last_request.url == "https://b.local/token"
    assert parse_qsl(requests_mock.last_request.text) == [
        ("grant_type", "client_credentials"),
        ("client_id", "client_b"),
        ("client_secret", "secret_b"),
        ("scope", "read"),
    ]

    client_c.token_request(request)
    assert parse_qsl(requests_mock.last_request.text) == [("grant_type", "client_credentials"), ("scope", "read")]
    assert requests_mock.last_request.headers["Authorization"].startswith("Basic ")
