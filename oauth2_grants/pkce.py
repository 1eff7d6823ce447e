"""Proof Key for Code Exchange (PKCE) support.

See [RFC7636](https://tools.ietf.org/html/rfc7636).

"""

from __future__ import annotations

import re
import secrets
import string

from attrs import frozen
from binapy import BinaPy

from .enums import CodeChallengeMethods

UNRESERVED = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-._~"
"""The unreserved URI characters allowed in a `code_verifier`."""


class UnsupportedCodeChallengeMethod(ValueError):
    """Raised when an unsupported code_challenge_method is provided."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported code_challenge_method: {method}")
        self.method = method


class InvalidCodeVerifier(ValueError):
    """Raised when an invalid code_verifier is supplied."""

    def __init__(self, code_verifier: str) -> None:
        super().__init__("""\
Invalid 'code_verifier'. It must be a 43 to 128 characters long string, with:
- lowercase letters
- uppercase letters
- digits
- underscore, dash, tilde, or dot (_-~.)
""")
        self.code_verifier = code_verifier


def unreserved_octets(length: int) -> bytes:
    """Draw `length` random octets, each mapped into the unreserved alphabet."""
    return "".join(UNRESERVED[octet % len(UNRESERVED)] for octet in secrets.token_bytes(length)).encode()


@frozen(init=False)
class CodeVerifier:
    """A PKCE `code_verifier`, and the `code_challenge` derived from it.

    When no value is given, a fresh verifier is generated: 32 random octets are mapped into the
    66 unreserved characters, and the resulting sequence is base64url-encoded into a 43 characters
    string.

    Args:
        value: an existing code verifier to wrap, or `None` to generate a new one

    Raises:
        InvalidCodeVerifier: if `value` is not a valid code verifier

    Example:
        ```python
        from oauth2_grants import CodeVerifier

        verifier = CodeVerifier()
        challenge = verifier.get_code_challenge("S256")
        ```

    """

    code_verifier_pattern = re.compile(r"^[a-zA-Z0-9_\-~.]{43,128}$")

    value: str

    def __init__(self, value: str | None = None) -> None:
        if value is None:
            value = BinaPy(unreserved_octets(32)).to("b64u").ascii()
        elif not self.code_verifier_pattern.match(value):
            raise InvalidCodeVerifier(value)
        self.__attrs_init__(value=value)

    def get_code_verifier(self) -> str:
        """Return the verifier, to send as `code_verifier` in the token request."""
        return self.value

    def get_code_challenge(self, method: str = CodeChallengeMethods.S256) -> str:
        """Derive the `code_challenge` from this verifier.

        Args:
            method: the method to use for deriving the challenge. Accepts 'S256' or 'plain'.

        Returns:
            a `code_challenge` derived from this verifier

        Raises:
            UnsupportedCodeChallengeMethod: if the method is not supported

        """
        if method == CodeChallengeMethods.S256:
            return BinaPy(self.value).to("sha256").to("b64u").ascii()
        if method == CodeChallengeMethods.plain:
            return self.value

        raise UnsupportedCodeChallengeMethod(method)

    def verify(self, challenge: str, method: str = CodeChallengeMethods.S256) -> bool:
        """Check that a `code_challenge` was derived from this verifier."""
        return self.get_code_challenge(method) == challenge

    def __str__(self) -> str:
        return self.value
