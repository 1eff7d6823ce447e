"""Helpers shared by the requests, tokens and client modules."""

from __future__ import annotations

from typing import Iterable, Iterator

from binapy import BinaPy
from furl import furl  # type: ignore[import-untyped]


class InvalidUri(ValueError):
    """Raised when an endpoint URI fails one or more checks of `validate_endpoint_uri()`.

    Each attribute tells whether the matching check failed.

    """

    def __init__(self, url: str, *, https: bool, no_credentials: bool, no_fragment: bool, path: bool) -> None:
        super().__init__("Invalid endpoint uri.")
        self.url = url
        self.https = https
        self.no_credentials = no_credentials
        self.no_fragment = no_fragment
        self.path = path

    def errors(self) -> Iterator[str]:
        """Iterate over the failed checks, as human readable messages."""
        failed = (
            (self.https, "must use https"),
            (self.no_credentials, "must not contain basic credentials"),
            (self.no_fragment, "must not contain a uri fragment"),
            (self.path, "must include a path other than /"),
        )
        for has_failed, message in failed:
            if has_failed:
                yield message

    def __str__(self) -> str:
        return "Invalid URI: " + ", ".join(self.errors())


def validate_endpoint_uri(
    uri: str,
    *,
    https: bool = True,
    no_credentials: bool = True,
    no_fragment: bool = True,
    path: bool = True,
) -> str:
    """Check that `uri` is usable as an OAuth 2.0 endpoint.

    By default, the uri must use `https`, must not embed a username or password, must not have
    a fragment, and must have a path other than `/`. Each check can be turned off with its
    keyword argument.

    Args:
        uri: the uri to check
        https: check the scheme
        no_credentials: check for embedded credentials
        no_fragment: check for a fragment
        path: check for a path

    Returns:
        `uri`, unchanged

    Raises:
        InvalidUri: if at least one enabled check fails

    """
    parsed = furl(uri)
    failures = {
        "https": https and parsed.scheme != "https",
        "no_credentials": no_credentials and bool(parsed.username or parsed.password),
        "no_fragment": no_fragment and bool(str(parsed.fragment)),
        "path": path and str(parsed.path) in ("", "/"),
    }
    if any(failures.values()):
        raise InvalidUri(uri, **failures)
    return uri


def join_scope(scopes: Iterable[str]) -> str:
    """Join scope values into the space-delimited form used on the wire."""
    return " ".join(scopes)


def split_scope(scope: str) -> list[str]:
    """Split a space-delimited scope string into its values.

    Repeated or surrounding whitespace does not produce empty values.

    """
    return scope.split()


def basic_auth_header(client_id: str, client_secret: str) -> tuple[str, str]:
    """Return the `Authorization` header pair for `client_secret_basic` authentication."""
    b64encoded_credentials = BinaPy(f"{client_id}:{client_secret}").to("b64").ascii()
    return "Authorization", f"Basic {b64encoded_credentials}"


def normalize_scope(scope: str | Iterable[str] | None) -> list[str] | None:
    """Normalize a `scope` given either as a space-delimited `str` or as an iterable of `str`.

    Args:
        scope: the scope, in any of the supported shapes, or `None`

    Returns:
        the scope values as a list, preserving order, or `None` if `scope` is `None`

    Raises:
        TypeError: if `scope` is neither a str nor an iterable of str

    """
    if scope is None:
        return None
    if isinstance(scope, str):
        return split_scope(scope)
    if isinstance(scope, (bytes, dict)) or not isinstance(scope, Iterable):
        msg = f"scope must be a str or an iterable of str, not {type(scope).__name__}"
        raise TypeError(msg)
    scopes = list(scope)
    for value in scopes:
        if not isinstance(value, str):
            msg = f"scope values must be str, not {type(value).__name__}"
            raise TypeError(msg)
    return scopes
