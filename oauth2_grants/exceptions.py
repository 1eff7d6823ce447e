"""This module contains the exception classes raised when an endpoint returns an error or an invalid response."""

from __future__ import annotations

from typing import Any, ClassVar, Iterator, Mapping

from binapy import BinaPy
from furl import furl  # type: ignore[import-untyped]

from .enums import AuthorizationErrorKind, TokenErrorKind


class OAuth2Error(Exception):
    """Base class for Exceptions raised when an OAuth 2.0 endpoint returns an error."""


class InvalidTokenResponse(OAuth2Error):
    """Raised when the Token Endpoint returns a response that cannot be decoded.

    This covers bodies that are not JSON, are not JSON objects, or do not match the token or
    the error response schema.

    Args:
        message: what is wrong with the response
        status_code: the HTTP status code of the response, if known
        body: the raw response body

    """

    def __init__(self, message: str, status_code: int | None = None, body: str | bytes | None = None) -> None:
        super().__init__(f"The Token Endpoint returned an invalid response: {message}")
        self.message = message
        self.status_code = status_code
        self.body = body


class EndpointError(OAuth2Error):
    """Base class for errors returned in the OAuth 2.0 standardised way.

    This contains the error code, description and uri that are returned by the AS.

    Args:
        error: the `error` identifier as returned by the AS.
        description: the `error_description` as returned by the AS.
        uri: the `error_uri` as returned by the AS.

    """

    def __init__(self, error: str, description: str | None = None, uri: str | None = None) -> None:
        super().__init__(error, description, uri)
        self.error = error
        self.description = description
        self.uri = uri

    def details(self) -> Iterator[tuple[str, str]]:
        """Iterate over the optional members that are present, in wire order."""
        if self.description is not None:
            yield "error_description", self.description
        if self.uri is not None:
            yield "error_uri", self.uri

    def __str__(self) -> str:
        """Render the error code followed by each present optional member.

        This is meant for logs and debugging. It is not parsed back.

        """
        return ", ".join([self.error, *(f"{name}={value}" for name, value in self.details())])


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    msg = f"`{key}` must be a string"
    raise TypeError(msg)


class TokenEndpointError(EndpointError):
    """Base class for errors returned by the Token Endpoint.

    Instances are built from an error response with
    [from_response()][oauth2_grants.exceptions.TokenEndpointError.from_response], which picks
    the subclass matching the returned `error` code.

    Args:
        kind: the error code
        description: the `error_description` as returned by the AS
        uri: the `error_uri` as returned by the AS
        status_code: the HTTP status code of the error response

    """

    exception_classes: ClassVar[dict[TokenErrorKind, type[TokenEndpointError]]] = {}

    def __init__(
        self,
        kind: TokenErrorKind,
        description: str | None = None,
        uri: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(kind.value, description, uri)
        self.kind = kind
        self.status_code = status_code

    @classmethod
    def from_response(cls, status_code: int, body: str | bytes) -> TokenEndpointError:
        """Decode an error response body returned by the Token Endpoint.

        Args:
            status_code: the HTTP status code
            body: the raw response body, which should be a JSON object

        Returns:
            a `TokenEndpointError` subclass matching the `error` code

        Raises:
            InvalidTokenResponse: if the body is not a standard error response

        """
        try:
            data = BinaPy(body).parse_from("json")
        except ValueError as exc:
            msg = "error response is not valid JSON"
            raise InvalidTokenResponse(msg, status_code, body) from exc
        return cls.from_dict(data, status_code=status_code, body=body)

    @classmethod
    def from_dict(
        cls, data: object, *, status_code: int | None = None, body: str | bytes | None = None
    ) -> TokenEndpointError:
        """Build the appropriate error from an already parsed error response."""
        if not isinstance(data, Mapping):
            msg = "error response is not a JSON object"
            raise InvalidTokenResponse(msg, status_code, body)
        try:
            kind = TokenErrorKind(data["error"])
            description = _optional_str(data, "error_description")
            uri = _optional_str(data, "error_uri")
        except (KeyError, ValueError, TypeError) as exc:
            msg = f"not a standard error response ({exc})"
            raise InvalidTokenResponse(msg, status_code, body) from exc
        exception_class = cls.exception_classes.get(kind, TokenEndpointError)
        return exception_class(kind, description, uri, status_code=status_code)


class InvalidRequest(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_request`."""


class InvalidClient(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_client`."""


class InvalidGrant(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_grant`."""


class UnauthorizedClient(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = unauthorized_client`."""


class UnsupportedGrantType(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = unsupported_grant_type`."""


class InvalidScope(TokenEndpointError):
    """Raised when the Token Endpoint returns `error = invalid_scope`."""


TokenEndpointError.exception_classes.update(
    {
        TokenErrorKind.INVALID_REQUEST: InvalidRequest,
        TokenErrorKind.INVALID_CLIENT: InvalidClient,
        TokenErrorKind.INVALID_GRANT: InvalidGrant,
        TokenErrorKind.UNAUTHORIZED_CLIENT: UnauthorizedClient,
        TokenErrorKind.UNSUPPORTED_GRANT_TYPE: UnsupportedGrantType,
        TokenErrorKind.INVALID_SCOPE: InvalidScope,
    }
)


class InvalidAuthorizationResponse(ValueError):
    """Raised when the Authorization Endpoint returns an invalid response."""

    def __init__(self, message: str, response: object) -> None:
        super().__init__(f"The Authorization Response is invalid: {message}")
        self.response = response


class MissingAuthCode(InvalidAuthorizationResponse):
    """Raised when the Authorization Endpoint does not return the mandatory `code`.

    This happens when the Authorization Endpoint does not return an error, but does not return an
    authorization `code` either.

    """

    def __init__(self, response: str) -> None:
        super().__init__("missing `code` query parameter in response", response)


class MismatchingState(InvalidAuthorizationResponse):
    """Raised on mismatching `state` value.

    This happens when the Authorization Endpoints returns a 'state' parameter that doesn't match the
    value passed in the Authorization Request.

    """

    def __init__(self, received: str | None, expected: str, response: str) -> None:
        super().__init__(f"mismatching `state` (received '{received}', expected '{expected}')", response)
        self.received = received
        self.expected = expected


class AuthorizationResponseError(EndpointError):
    """Represent an error returned by the Authorization Endpoint.

    Args:
        kind: the error code
        description: the `error_description` as returned by the AS
        uri: the `error_uri` as returned by the AS
        state: the `state` as returned by the AS

    """

    def __init__(
        self,
        kind: AuthorizationErrorKind,
        description: str | None = None,
        uri: str | None = None,
        state: str | None = None,
    ) -> None:
        super().__init__(kind.value, description, uri)
        self.kind = kind
        self.state = state

    def details(self) -> Iterator[tuple[str, str]]:
        """Iterate over the optional members that are present, in wire order."""
        yield from super().details()
        if self.state is not None:
            yield "state", self.state

    @classmethod
    def from_dict(cls, data: object) -> AuthorizationResponseError:
        """Build an `AuthorizationResponseError` from parsed response parameters.

        Raises:
            InvalidAuthorizationResponse: if `data` is not a standard error response

        """
        if not isinstance(data, Mapping):
            msg = "error response is not an object"
            raise InvalidAuthorizationResponse(msg, data)
        try:
            kind = AuthorizationErrorKind(data["error"])
            description = _optional_str(data, "error_description")
            uri = _optional_str(data, "error_uri")
            state = _optional_str(data, "state")
        except (KeyError, ValueError, TypeError) as exc:
            msg = f"not a standard error response ({exc})"
            raise InvalidAuthorizationResponse(msg, data) from exc
        return cls(kind, description, uri, state)

    @classmethod
    def from_json(cls, body: str | bytes) -> AuthorizationResponseError:
        """Decode an error returned as a JSON object."""
        try:
            data = BinaPy(body).parse_from("json")
        except ValueError as exc:
            msg = "error response is not valid JSON"
            raise InvalidAuthorizationResponse(msg, body) from exc
        return cls.from_dict(data)

    @classmethod
    def from_uri(cls, uri: str) -> AuthorizationResponseError:
        """Decode an error returned as query parameters on the redirect uri.

        Args:
            uri: the full redirect uri, as received on the redirection endpoint

        """
        return cls.from_dict(dict(furl(uri).args))
