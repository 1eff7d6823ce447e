"""Contains enumerations of standardised OAuth-related parameters and values.

Most are taken from https://www.iana.org/assignments/oauth-parameters/oauth-parameters.xhtml .

"""

from __future__ import annotations

from enum import Enum


class GrantTypes(str, Enum):
    """An enum of standardized `grant_type` values."""

    AUTHORIZATION_CODE = "authorization_code"
    CLIENT_CREDENTIALS = "client_credentials"
    RESOURCE_OWNER_PASSWORD = "password"
    REFRESH_TOKEN = "refresh_token"


class ResponseTypes(str, Enum):
    """All standardised `response_type` values.

    Note that you should always use `code`. The implicit `token` flow is deprecated.

    """

    CODE = "code"
    TOKEN = "token"


class CodeChallengeMethods(str, Enum):
    """All standardised `code_challenge_method` values.

    You should always use `S256`.

    """

    S256 = "S256"
    plain = "plain"


class AuthorizationErrorKind(str, Enum):
    """Error codes returned by the Authorization Endpoint.

    See [RFC6749 $4.1.2.1](https://datatracker.ietf.org/doc/html/rfc6749#section-4.1.2.1).

    """

    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED_CLIENT = "unauthorized_client"
    ACCESS_DENIED = "access_denied"
    UNSUPPORTED_RESPONSE_TYPE = "unsupported_response_type"
    INVALID_SCOPE = "invalid_scope"
    SERVER_ERROR = "server_error"
    TEMPORARILY_UNAVAILABLE = "temporarily_unavailable"


class TokenErrorKind(str, Enum):
    """Error codes returned by the Token Endpoint.

    See [RFC6749 $5.2](https://datatracker.ietf.org/doc/html/rfc6749#section-5.2).

    """

    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    INVALID_GRANT = "invalid_grant"
    UNAUTHORIZED_CLIENT = "unauthorized_client"
    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    INVALID_SCOPE = "invalid_scope"


class ClientAuthMethods(str, Enum):
    """Supported ways of sending client credentials to the Token Endpoint."""

    CLIENT_SECRET_POST = "client_secret_post"
    CLIENT_SECRET_BASIC = "client_secret_basic"
