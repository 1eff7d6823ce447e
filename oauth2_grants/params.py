"""Shared parameter model for all OAuth 2.0 requests.

Every request class in this package derives from [OAuthParams][oauth2_grants.params.OAuthParams],
and overrides only the accessors that are meaningful for its grant. All other accessors return
`None`, meaning "absent". A single function,
[render_params()][oauth2_grants.params.render_params], then turns any of those requests into
the ordered list of parameters to send.

"""

from __future__ import annotations

from typing import Iterable

from attrs import define, field
from furl import Query, furl  # type: ignore[import-untyped]
from typing_extensions import Self

from .utils import join_scope, normalize_scope

FORM_CONTENT_TYPE = ("Content-Type", "application/x-www-form-urlencoded")


class UnsupportedParam(AttributeError):
    """Raised when trying to set a parameter that a request does not carry."""

    def __init__(self, param: str, request: OAuthParams) -> None:
        super().__init__(f"{type(request).__name__} does not support the '{param}' parameter.")
        self.param = param
        self.request = request


class EncodingError(ValueError):
    """Raised when request parameters cannot be percent-encoded."""

    def __init__(self, key: object, value: object) -> None:
        super().__init__(f"Parameter {key!r} cannot be url-encoded.")
        self.key = key
        self.value = value


class OAuthParams:
    """Base class for everything that can be rendered as OAuth 2.0 request parameters.

    Each accessor returns the parameter value, or `None` when the parameter is absent.
    Subclasses override the accessors for the parameters they carry.

    """

    def get_grant_type(self) -> str | None:
        return None

    def get_response_type(self) -> str | None:
        return None

    def get_redirect_url(self) -> str | None:
        return None

    def get_client_id(self) -> str | None:
        return None

    def get_client_secret(self) -> str | None:
        return None

    def get_scopes(self) -> list[str] | None:
        return None

    def set_scopes(self, scopes: list[str]) -> None:
        raise UnsupportedParam("scope", self)

    def get_state(self) -> str | None:
        return None

    def get_extra_params(self) -> list[tuple[str, str]] | None:
        return None

    def set_extra_params(self, extras: list[tuple[str, str]]) -> None:
        raise UnsupportedParam("extras", self)

    def get_username(self) -> str | None:
        return None

    def get_password(self) -> str | None:
        return None

    def get_code(self) -> str | None:
        return None

    def get_refresh_token(self) -> str | None:
        return None

    def add_scope(self, scope: str) -> Self:
        """Append a scope value to this request, and return the request."""
        add_scope(self, scope)
        return self

    def add_scopes(self, scopes: str | Iterable[str]) -> Self:
        """Append several scope values to this request, and return the request."""
        add_scopes(self, scopes)
        return self

    def add_extra_param(self, key: str, value: str) -> Self:
        """Append an extra parameter to this request, and return the request."""
        add_extra_param(self, key, value)
        return self

    def params(self) -> list[tuple[str, str]]:
        """Return the parameters of this request, as rendered by `render_params()`."""
        return render_params(self)


@define
class OAuthRequest(OAuthParams):
    """Base for OAuth 2.0 requests.

    Those carry a `scope` and arbitrary extra parameters, both keyword-only and absent by default,
    and are sent as form-encoded parameters. `scope` may be given as a space-separated `str`
    or as an iterable of `str`.

    """

    scope: list[str] | None = field(default=None, converter=normalize_scope, kw_only=True)
    extras: list[tuple[str, str]] | None = field(default=None, kw_only=True)

    def get_scopes(self) -> list[str] | None:
        return self.scope

    def set_scopes(self, scopes: list[str]) -> None:
        self.scope = scopes

    def get_extra_params(self) -> list[tuple[str, str]] | None:
        return self.extras

    def set_extra_params(self, extras: list[tuple[str, str]]) -> None:
        self.extras = extras

    def get_headers(self) -> list[tuple[str, str]]:
        """Return the headers to send along with the request parameters."""
        return [FORM_CONTENT_TYPE]


def render_params(request: OAuthParams) -> list[tuple[str, str]]:
    """Render a request into the ordered list of parameters to send.

    Parameters are rendered in this fixed order: `grant_type`, `response_type`, `redirect_uri`,
    `client_id`, `client_secret`, `scope`, `state`, the extra parameters in insertion order,
    `username`, `password`, `code`, `refresh_token`.

    Absent parameters are skipped entirely. `scope` is joined with single spaces, and is skipped
    when empty.

    Args:
        request: any `OAuthParams` instance

    Returns:
        a list of `(key, value)` tuples

    """
    params: list[tuple[str, str]] = []

    def push(key: str, value: str | None) -> None:
        if value is not None:
            params.append((key, value))

    push("grant_type", request.get_grant_type())
    push("response_type", request.get_response_type())
    push("redirect_uri", request.get_redirect_url())
    push("client_id", request.get_client_id())
    push("client_secret", request.get_client_secret())
    scopes = request.get_scopes()
    if scopes:
        params.append(("scope", join_scope(scopes)))
    push("state", request.get_state())
    params.extend(request.get_extra_params() or ())
    push("username", request.get_username())
    push("password", request.get_password())
    push("code", request.get_code())
    push("refresh_token", request.get_refresh_token())
    return params


def add_scope(request: OAuthParams, scope: str) -> None:
    """Append one scope value to `request`, initializing its scope list if absent.

    Duplicates are kept.

    Raises:
        UnsupportedParam: if `request` does not store a scope

    """
    scopes = request.get_scopes()
    if scopes is None:
        request.set_scopes([])
        scopes = request.get_scopes()
        if scopes is None:
            raise UnsupportedParam("scope", request)
    scopes.append(scope)


def add_scopes(request: OAuthParams, scopes: str | Iterable[str]) -> None:
    """Append several scope values to `request`, preserving their order.

    A single `str` is considered as one scope value.

    """
    if isinstance(scopes, str):
        scopes = [scopes]
    for scope in scopes:
        add_scope(request, scope)


def add_extra_param(request: OAuthParams, key: str, value: str) -> None:
    """Append a `(key, value)` pair to the extra parameters of `request`.

    Keys are not deduplicated: adding an existing key sends that parameter once more.

    Raises:
        UnsupportedParam: if `request` does not store extra parameters

    """
    extras = request.get_extra_params()
    if extras is None:
        request.set_extra_params([])
        extras = request.get_extra_params()
        if extras is None:
            raise UnsupportedParam("extras", request)
    extras.append((key, value))


def check_encodable(params: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Check that all keys and values can be percent-encoded.

    Raises:
        EncodingError: if a key or value is not a str, or is not encodable as UTF-8

    """
    checked = list(params)
    for key, value in checked:
        for item in (key, value):
            if not isinstance(item, str):
                raise EncodingError(key, value)
            try:
                item.encode()
            except UnicodeEncodeError as exc:
                raise EncodingError(key, value) from exc
    return checked


def encode_params(params: Iterable[tuple[str, str]]) -> str:
    """Encode parameters as `application/x-www-form-urlencoded`.

    Raises:
        EncodingError: if the parameters cannot be encoded

    """
    return str(Query(check_encodable(params)).encode())


def append_query(url: str, params: Iterable[tuple[str, str]]) -> str:
    """Append parameters to the query string of `url`, keeping the parameters already there.

    Raises:
        EncodingError: if the parameters cannot be encoded

    """
    return str(furl(url).add(args=check_encodable(params)).url)
