"""Token Requests, one class per grant type.

Each request class carries only the parameters that its grant needs. They all share
[render_params()][oauth2_grants.params.render_params] for serialization, and
[get_token()][oauth2_grants.token_requests.TokenRequest.get_token] to send themselves to a Token
Endpoint through a [Transport][oauth2_grants.transport.Transport].

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from attrs import define, field
from binapy import BinaPy
from typing_extensions import Self

from .enums import GrantTypes
from .exceptions import InvalidTokenResponse, TokenEndpointError
from .params import OAuthRequest, encode_params, render_params
from .pkce import CodeVerifier
from .tokens import AccessToken, Token

if TYPE_CHECKING:
    from .transport import Transport

logger = logging.getLogger(__name__)

ACCEPT_JSON = ("Accept", "application/json")


def parse_token_response(status_code: int, body: str | bytes, token_class: type[Token] = AccessToken) -> Token:
    """Parse a response returned by the Token Endpoint.

    A 2xx response must contain a token. Any other status must contain a standard error.

    Args:
        status_code: the HTTP status code of the response
        body: the raw response body
        token_class: the class to build the token with

    Returns:
        a `token_class` instance

    Raises:
        TokenEndpointError: a subclass matching the `error` returned by the Token Endpoint
        InvalidTokenResponse: if the body is neither a valid token, nor a standard error

    """
    if not 200 <= status_code < 300:  # noqa: PLR2004
        try:
            error = TokenEndpointError.from_response(status_code, body)
        except InvalidTokenResponse as exc:
            logger.warning("Token Endpoint returned HTTP %d with a non-standard body: %s", status_code, exc.message)
            raise
        logger.warning("Token Endpoint returned error '%s' with HTTP %d", error.error, status_code)
        raise error

    try:
        data = BinaPy(body).parse_from("json")
    except ValueError as exc:
        logger.warning("Token Endpoint returned a response that is not JSON")
        msg = "token response is not valid JSON"
        raise InvalidTokenResponse(msg, status_code, body) from exc
    try:
        token = token_class.from_dict(data)
    except InvalidTokenResponse as exc:
        logger.warning("Token Endpoint returned an invalid token response: %s", exc.message)
        raise InvalidTokenResponse(exc.message, status_code, body) from exc
    logger.debug("Token Endpoint returned a '%s' token", token.token_type)
    return token


@define
class TokenRequest(OAuthRequest):
    """Base class for requests sent to the Token Endpoint.

    Client credentials are optional, and are included in the request body when present. When
    using HTTP Basic authentication instead, leave them unset and pass the `Authorization` header
    as an additional header to `get_token()`.

    """

    client_id: str | None = field(default=None, kw_only=True)
    client_secret: str | None = field(default=None, kw_only=True, repr=False)

    def get_client_id(self) -> str | None:
        return self.client_id

    def get_client_secret(self) -> str | None:
        return self.client_secret

    def set_client_secret(self, client_secret: str) -> Self:
        self.client_secret = client_secret
        return self

    def body(self) -> str:
        """Return the form-encoded request body.

        Raises:
            EncodingError: if a parameter value cannot be url-encoded

        """
        return encode_params(render_params(self))

    def get_token(
        self,
        transport: Transport,
        token_url: str,
        additional_headers: Iterable[tuple[str, str]] | None = None,
        token_class: type[Token] = AccessToken,
    ) -> Token:
        """Send this request to a Token Endpoint, and return the obtained token.

        Exactly one POST request is sent. Nothing is retried.

        Args:
            transport: the transport to send the request with
            token_url: the Token Endpoint uri
            additional_headers: headers to send on top of `get_headers()`, like an `Authorization`
                header for client authentication
            token_class: the class to build the token with

        Returns:
            a `token_class` instance

        Raises:
            TokenEndpointError: if the Token Endpoint returns an error
            InvalidTokenResponse: if the Token Endpoint returns a non-standard response

        """
        headers = [*self.get_headers(), ACCEPT_JSON, *(additional_headers or ())]
        logger.debug("Sending a '%s' token request to %s", self.get_grant_type(), token_url)
        status_code, body = transport.post(token_url, self.body(), headers)
        return parse_token_response(status_code, body, token_class)


@define
class AuthorizationCodeTokenRequest(TokenRequest):
    """A Token Request using the `authorization_code` grant.

    Args:
        code: the authorization code returned on the redirect uri
        redirect_url: the same `redirect_uri` as in the Authorization Request
        client_id: the client_id
        client_secret: the client_secret, for confidential clients
        scope: a scope, as a space-separated `str` or an iterable of `str`
        extras: extra parameters, as `(key, value)` tuples

    """

    code: str
    redirect_url: str
    client_id: str

    def get_grant_type(self) -> str | None:
        return GrantTypes.AUTHORIZATION_CODE.value

    def get_redirect_url(self) -> str | None:
        return self.redirect_url

    def get_code(self) -> str | None:
        return self.code

    def set_code_verifier(self, code_verifier: CodeVerifier | str) -> Self:
        """Include the PKCE `code_verifier` matching the Authorization Request `code_challenge`."""
        return self.add_extra_param("code_verifier", str(code_verifier))


@define
class ClientCredentialsRequest(TokenRequest):
    """A Token Request using the `client_credentials` grant.

    Args:
        client_id: the client_id, if sent in the request body
        client_secret: the client_secret, if sent in the request body
        scope: a scope, as a space-separated `str` or an iterable of `str`
        extras: extra parameters, as `(key, value)` tuples

    """

    def get_grant_type(self) -> str | None:
        return GrantTypes.CLIENT_CREDENTIALS.value


@define
class OwnerPasswordRequest(TokenRequest):
    """A Token Request using the Resource Owner Password Credentials grant.

    Args:
        username: the resource owner username
        password: the resource owner password
        scope: a scope, as a space-separated `str` or an iterable of `str`
        extras: extra parameters, as `(key, value)` tuples

    """

    username: str
    password: str = field(repr=False)

    def get_grant_type(self) -> str | None:
        return GrantTypes.RESOURCE_OWNER_PASSWORD.value

    def get_username(self) -> str | None:
        return self.username

    def get_password(self) -> str | None:
        return self.password


@define
class RefreshTokenRequest(TokenRequest):
    """A Token Request using the `refresh_token` grant.

    Args:
        refresh_token: the refresh token
        scope: a scope, as a space-separated `str` or an iterable of `str`. If present, it must
            not include any scope not originally granted.
        extras: extra parameters, as `(key, value)` tuples

    """

    refresh_token: str = field(repr=False)

    def get_grant_type(self) -> str | None:
        return GrantTypes.REFRESH_TOKEN.value

    def get_refresh_token(self) -> str | None:
        return self.refresh_token
