"""Main module for `oauth2_grants`.

You can import any class from any submodule directly from this main module.
"""

from .authorization_request import AuthorizationCodeRequest
from .client import MissingRefreshToken, OAuth2Client
from .enums import (
    AuthorizationErrorKind,
    ClientAuthMethods,
    CodeChallengeMethods,
    GrantTypes,
    ResponseTypes,
    TokenErrorKind,
)
from .exceptions import (
    AuthorizationResponseError,
    EndpointError,
    InvalidAuthorizationResponse,
    InvalidClient,
    InvalidGrant,
    InvalidRequest,
    InvalidScope,
    InvalidTokenResponse,
    MismatchingState,
    MissingAuthCode,
    OAuth2Error,
    TokenEndpointError,
    UnauthorizedClient,
    UnsupportedGrantType,
)
from .params import (
    EncodingError,
    OAuthParams,
    OAuthRequest,
    UnsupportedParam,
    add_extra_param,
    add_scope,
    add_scopes,
    encode_params,
    render_params,
)
from .pkce import CodeVerifier, InvalidCodeVerifier, UnsupportedCodeChallengeMethod
from .token_requests import (
    AuthorizationCodeTokenRequest,
    ClientCredentialsRequest,
    OwnerPasswordRequest,
    RefreshTokenRequest,
    TokenRequest,
    parse_token_response,
)
from .tokens import AccessToken, Token
from .transport import RequestsTransport, Transport
from .utils import InvalidUri, validate_endpoint_uri

__all__ = [
    "AccessToken",
    "AuthorizationCodeRequest",
    "AuthorizationCodeTokenRequest",
    "AuthorizationErrorKind",
    "AuthorizationResponseError",
    "ClientAuthMethods",
    "ClientCredentialsRequest",
    "CodeChallengeMethods",
    "CodeVerifier",
    "EncodingError",
    "EndpointError",
    "GrantTypes",
    "InvalidAuthorizationResponse",
    "InvalidClient",
    "InvalidCodeVerifier",
    "InvalidGrant",
    "InvalidRequest",
    "InvalidScope",
    "InvalidTokenResponse",
    "InvalidUri",
    "MismatchingState",
    "MissingAuthCode",
    "MissingRefreshToken",
    "OAuth2Client",
    "OAuth2Error",
    "OAuthParams",
    "OAuthRequest",
    "OwnerPasswordRequest",
    "RefreshTokenRequest",
    "RequestsTransport",
    "ResponseTypes",
    "Token",
    "TokenEndpointError",
    "TokenErrorKind",
    "TokenRequest",
    "Transport",
    "UnauthorizedClient",
    "UnsupportedCodeChallengeMethod",
    "UnsupportedGrantType",
    "UnsupportedParam",
    "add_extra_param",
    "add_scope",
    "add_scopes",
    "encode_params",
    "parse_token_response",
    "render_params",
    "validate_endpoint_uri",
]
