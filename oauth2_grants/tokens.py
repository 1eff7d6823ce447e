"""This module contains classes that represent Tokens returned by a Token Endpoint."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Iterable, Mapping

from attrs import define, field, setters
from attrs.validators import and_, ge, instance_of, optional
from binapy import BinaPy
from typing_extensions import Self

from .exceptions import InvalidTokenResponse
from .utils import join_scope, normalize_scope

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Return the current time, as a timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def convert_expires_in(expires_in: int | str | None) -> int | None:
    """Accept `expires_in` as an int, or as a str containing an int."""
    if isinstance(expires_in, bool):
        msg = "expires_in must be an integer"
        raise TypeError(msg)
    if isinstance(expires_in, str):
        return int(expires_in)
    return expires_in


class Token(ABC):
    """Base class for tokens returned by a Token Endpoint.

    This defines what callers can rely on, whatever the concrete token class: mutators that
    attach a refresh token, a lifetime or a scope right after construction, a way to build a token
    from a decoded response, and an expiration check.

    """

    access_token: str
    token_type: str

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a token from a decoded Token Endpoint response."""

    @abstractmethod
    def set_refresh_token(self, refresh_token: str) -> Self:
        """Attach a refresh token."""

    @abstractmethod
    def set_expires_in(self, expires_in: int) -> Self:
        """Attach a lifetime, in seconds since issuance."""

    @abstractmethod
    def set_scope(self, scope: str | Iterable[str]) -> Self:
        """Attach a scope, as a space-separated str or as an iterable of str."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Tell whether the token may still be used."""


@define(init=False)
class AccessToken(Token):
    """Represents an Access Token as returned by a Token Endpoint.

    The `scope` can be passed either as a space-separated `str`, or as a list of `str`, since
    Authorization Servers return both shapes. It is always stored as a list.

    The time of issuance is captured when the token is created. It is not part of the token
    identity: two tokens with the same attributes are equal, whenever they were issued.

    `access_token`, `token_type`, `kwargs` and `issued_at` are read-only. The refresh token, the
    lifetime and the scope are changed with their `set_*()` methods.

    Args:
        access_token: an `access_token`, as returned by the AS.
        token_type: a `token_type`, as returned by the AS.
        refresh_token: a `refresh_token`, as returned by the AS, if any.
        expires_in: the token lifetime in seconds, as returned by the AS, if any.
        scope: a `scope`, as returned by the AS, if any.
        **kwargs: additional parameters as returned by the AS, if any.

    """

    MEMBERS: ClassVar[tuple[str, ...]] = ("access_token", "token_type", "refresh_token", "expires_in", "scope")

    access_token: str = field(validator=instance_of(str), on_setattr=setters.frozen)
    token_type: str = field(validator=instance_of(str), on_setattr=setters.frozen)
    refresh_token: str | None = field(default=None, validator=optional(instance_of(str)))
    expires_in: int | None = field(
        default=None, converter=convert_expires_in, validator=optional(and_(instance_of(int), ge(0)))
    )
    scope: list[str] | None = field(default=None, converter=normalize_scope)
    kwargs: dict[str, Any] = field(factory=dict, eq=False, on_setattr=setters.frozen)
    issued_at: datetime = field(init=False, factory=utcnow, eq=False, on_setattr=setters.frozen)

    def __init__(
        self,
        access_token: str,
        token_type: str,
        *,
        refresh_token: str | None = None,
        expires_in: int | str | None = None,
        scope: str | Iterable[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.__attrs_init__(
            access_token=access_token,
            token_type=token_type,
            refresh_token=refresh_token,
            expires_in=expires_in,
            scope=scope,
            kwargs=kwargs,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build an `AccessToken` from a decoded Token Endpoint response.

        Args:
            data: the response, as a dict

        Raises:
            InvalidTokenResponse: if a required member is missing, or a member has an invalid value

        """
        if not isinstance(data, Mapping):
            msg = "token response is not a JSON object"
            raise InvalidTokenResponse(msg)
        args = dict(data)
        for required in ("access_token", "token_type"):
            if required not in args:
                msg = f"missing `{required}`"
                raise InvalidTokenResponse(msg)
        members = {name: args.pop(name) for name in cls.MEMBERS if name in args}
        token = cls.__new__(cls)
        try:
            token.__attrs_init__(**members, kwargs=args)
        except (TypeError, ValueError) as exc:
            reason = exc.args[0] if exc.args and isinstance(exc.args[0], str) else str(exc)
            msg = f"invalid token attribute ({reason})"
            raise InvalidTokenResponse(msg) from exc
        return token

    @classmethod
    def from_json(cls, body: str | bytes) -> Self:
        """Build an `AccessToken` from a raw JSON Token Endpoint response.

        Raises:
            InvalidTokenResponse: if the body is not JSON, or not a valid token response

        """
        try:
            data = BinaPy(body).parse_from("json")
        except ValueError as exc:
            msg = "token response is not valid JSON"
            raise InvalidTokenResponse(msg, body=body) from exc
        return cls.from_dict(data)

    def set_refresh_token(self, refresh_token: str) -> Self:
        self.refresh_token = refresh_token
        return self

    def set_expires_in(self, expires_in: int) -> Self:
        self.expires_in = expires_in
        return self

    def set_scope(self, scope: str | Iterable[str]) -> Self:
        self.scope = scope  # type: ignore[assignment]
        return self

    @property
    def expires_at(self) -> datetime | None:
        """The expiration date, computed from the issuance date and `expires_in`.

        A lifetime that goes beyond the largest representable date gives that date.

        """
        if self.expires_in is None:
            return None
        try:
            return self.issued_at + timedelta(seconds=self.expires_in)
        except OverflowError:
            return datetime.max.replace(tzinfo=timezone.utc)

    def is_valid(self) -> bool:
        """Check if the access token is still within its lifetime.

        Returns:
            `True` if no `expires_in` was returned by the AS, since the token can only be tried
            against the protected resource. `True` as well if the clock went backwards since
            issuance. Otherwise, `True` if and only if the number of whole seconds elapsed since
            issuance is less than `expires_in`.

        """
        if self.expires_in is None:
            return True
        elapsed = utcnow() - self.issued_at
        if elapsed < timedelta(0):
            logger.debug("Clock went backwards since the token was issued, considering it valid.")
            return True
        return elapsed // timedelta(seconds=1) < self.expires_in

    def authorization_header(self) -> str:
        """Return the appropriate Authorization Header value for this token.

        Returns:
            the value to use in an HTTP Authorization Header

        """
        return f"{self.token_type} {self.access_token}"

    def as_dict(self) -> dict[str, Any]:
        """Return a dict of parameters, as they would be returned by the Token Endpoint."""
        d: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
        }
        if self.refresh_token is not None:
            d["refresh_token"] = self.refresh_token
        if self.expires_in is not None:
            d["expires_in"] = self.expires_in
        if self.scope is not None:
            d["scope"] = join_scope(self.scope)
        d.update(self.kwargs)
        return d

    def __str__(self) -> str:
        """Return the access token value, as a string."""
        return self.access_token
