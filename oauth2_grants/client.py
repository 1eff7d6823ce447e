"""This module contains the `OAuth2Client` class."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from attrs import evolve, field, frozen

from .authorization_request import AuthorizationCodeRequest
from .enums import ClientAuthMethods, CodeChallengeMethods
from .token_requests import (
    AuthorizationCodeTokenRequest,
    ClientCredentialsRequest,
    OwnerPasswordRequest,
    RefreshTokenRequest,
    TokenRequest,
)
from .tokens import AccessToken, Token
from .transport import RequestsTransport
from .utils import basic_auth_header, validate_endpoint_uri

if TYPE_CHECKING:
    from .pkce import CodeVerifier
    from .transport import Transport

logger = logging.getLogger(__name__)


class MissingRefreshToken(ValueError):
    """Raised when a refresh token is required but is not present."""

    def __init__(self, token: Token) -> None:
        super().__init__("A refresh_token is required but is not present in this Access Token.")
        self.token = token


@frozen(init=False)
class OAuth2Client:
    """An OAuth 2.0 client, that obtains tokens from a Token Endpoint.

    This is a thin layer over the request classes: each grant method builds the matching request,
    adds the client credentials, and sends it with the configured transport.

    Args:
        token_endpoint: the Token Endpoint uri. It must be an https uri, unless `testing` is `True`.
        client_id: the client_id
        client_secret: the client_secret, for confidential clients
        client_auth: how to send the client credentials: `client_secret_post` includes them in
            the request body, `client_secret_basic` sends them in an `Authorization` header.
        transport: the transport to use. Defaults to a `RequestsTransport`.
        token_class: the class to build tokens with
        testing: if `True`, do not validate the Token Endpoint uri

    Raises:
        InvalidUri: if the Token Endpoint uri is not suitable
        ValueError: if `client_auth` is not a supported method

    Example:
        ```python
        from oauth2_grants import OAuth2Client

        client = OAuth2Client("https://url.to.the/token_endpoint", "client_id", "client_secret")
        token = client.client_credentials(scope="my_scope")
        ```

    """

    token_endpoint: str
    client_id: str
    client_secret: str | None = field(default=None, repr=False)
    client_auth: ClientAuthMethods = ClientAuthMethods.CLIENT_SECRET_POST
    transport: Transport = field(factory=RequestsTransport)
    token_class: type[Token] = AccessToken

    def __init__(  # noqa: PLR0913
        self,
        token_endpoint: str,
        client_id: str,
        client_secret: str | None = None,
        *,
        client_auth: str = ClientAuthMethods.CLIENT_SECRET_POST,
        transport: Transport | None = None,
        token_class: type[Token] = AccessToken,
        testing: bool = False,
    ) -> None:
        if not testing:
            validate_endpoint_uri(token_endpoint)
        self.__attrs_init__(
            token_endpoint=token_endpoint,
            client_id=client_id,
            client_secret=client_secret,
            client_auth=ClientAuthMethods(client_auth),
            transport=transport if transport is not None else RequestsTransport(),
            token_class=token_class,
        )

    def token_request(self, request: TokenRequest) -> Token:
        """Send a request to the Token Endpoint, authenticated with this client credentials.

        `request` is left untouched: the credentials of this client are added to a copy of it.

        Args:
            request: the token request. Its `client_id` and `client_secret`, when unset, are taken
                from this client.

        Returns:
            a token, as a `token_class` instance

        """
        headers: list[tuple[str, str]] = []
        if self.client_auth == ClientAuthMethods.CLIENT_SECRET_BASIC and self.client_secret is not None:
            headers.append(basic_auth_header(self.client_id, self.client_secret))
        else:
            request = evolve(
                request,
                client_id=request.client_id if request.client_id is not None else self.client_id,
                client_secret=request.client_secret if request.client_secret is not None else self.client_secret,
            )
        logger.debug("Requesting a token for client '%s' with %s", self.client_id, self.client_auth.value)
        return request.get_token(self.transport, self.token_endpoint, headers, self.token_class)

    def client_credentials(self, scope: str | Iterable[str] | None = None, **extras: str) -> Token:
        """Send a request to the token endpoint using the `client_credentials` grant.

        Args:
            scope: the scope to send with the request. Can be a str, or an iterable of str.
            **extras: additional parameters for the token endpoint, like `audience` or `resource`.

        """
        return self.token_request(ClientCredentialsRequest(scope=scope, extras=list(extras.items()) or None))

    def authorization_code(
        self, code: str, redirect_url: str, code_verifier: CodeVerifier | str | None = None, **extras: str
    ) -> Token:
        """Send a request to the token endpoint with the `authorization_code` grant.

        Args:
            code: the authorization code to exchange for tokens
            redirect_url: the redirect_uri that was used in the Authorization Request
            code_verifier: the PKCE code verifier, if a code challenge was used
            **extras: additional parameters for the token endpoint

        """
        request = AuthorizationCodeTokenRequest(
            code, redirect_url, self.client_id, extras=list(extras.items()) or None
        )
        if code_verifier is not None:
            request.set_code_verifier(code_verifier)
        return self.token_request(request)

    def password(
        self, username: str, password: str, scope: str | Iterable[str] | None = None, **extras: str
    ) -> Token:
        """Send a request to the token endpoint using the Resource Owner Password grant.

        Args:
            username: the resource owner username
            password: the resource owner password
            scope: the scope to send with the request. Can be a str, or an iterable of str.
            **extras: additional parameters for the token endpoint

        """
        return self.token_request(
            OwnerPasswordRequest(username, password, scope=scope, extras=list(extras.items()) or None)
        )

    def refresh_token(
        self, refresh_token: str | Token, scope: str | Iterable[str] | None = None, **extras: str
    ) -> Token:
        """Send a request to the token endpoint with the `refresh_token` grant.

        Args:
            refresh_token: a refresh_token, as a string, or as a `Token`.
                That `Token` must have a `refresh_token`.
            scope: a scope to narrow the granted scope, if any
            **extras: additional parameters for the token endpoint

        Raises:
            MissingRefreshToken: if `refresh_token` is a `Token` without a `refresh_token`

        """
        if isinstance(refresh_token, Token):
            value = getattr(refresh_token, "refresh_token", None)
            if not isinstance(value, str):
                raise MissingRefreshToken(refresh_token)
            refresh_token = value
        return self.token_request(
            RefreshTokenRequest(refresh_token, scope=scope, extras=list(extras.items()) or None)
        )

    def authorization_request(
        self,
        authorization_endpoint: str,
        redirect_url: str | None = None,
        scope: str | Iterable[str] | None = None,
        state: str | None = None,
        code_verifier: CodeVerifier | None = None,
        code_challenge_method: str = CodeChallengeMethods.S256,
    ) -> AuthorizationCodeRequest:
        """Build an Authorization Request for this client.

        Args:
            authorization_endpoint: the Authorization Endpoint uri
            redirect_url: the redirect_uri to include in the request
            scope: the scope to include in the request
            state: the state to include in the request
            code_verifier: a PKCE code verifier. If present, the matching `code_challenge` is
                included in the request.
            code_challenge_method: the method to derive the `code_challenge` with

        """
        request = AuthorizationCodeRequest(
            authorization_endpoint, self.client_id, redirect_url=redirect_url, state=state, scope=scope
        )
        if code_verifier is not None:
            request.set_code_challenge(code_verifier, code_challenge_method)
        return request
