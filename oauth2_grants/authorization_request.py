"""Classes and utilities related to Authorization Requests and Responses."""

from __future__ import annotations

from attrs import define
from furl import furl  # type: ignore[import-untyped]
from typing_extensions import Self

from .enums import CodeChallengeMethods, ResponseTypes
from .exceptions import AuthorizationResponseError, MismatchingState, MissingAuthCode
from .params import OAuthRequest, append_query, render_params
from .pkce import CodeVerifier


@define
class AuthorizationCodeRequest(OAuthRequest):
    """Represent an Authorization Request, for the Authorization Code grant.

    This makes it easy to generate a valid Authorization Request URI, possibly including a state,
    PKCE and custom args, and to validate the Authorization Response received on the redirect uri.

    Args:
        authorization_endpoint: the uri for the authorization endpoint.
        client_id: the client_id to include in the request.
        response_type: the response type to include in the request.
        redirect_url: the redirect_uri to include in the request, if any.
        state: the state to include in the request, if any.
        scope: the scope to include in the request, as an iterable of `str`, or a single
            space-separated `str`.
        extras: extra parameters to include in the request, as `(key, value)` tuples.

    Example:
        ```python
        from oauth2_grants import AuthorizationCodeRequest

        azr = (
            AuthorizationCodeRequest("https://url.to.the/authorization_endpoint", "my_client_id")
            .set_redirect_url("http://localhost/callback")
            .set_state("my_state")
            .add_scopes(["openid", "email"])
        )
        print(azr.get_prepared_url())
        ```

    """

    authorization_endpoint: str
    client_id: str
    response_type: str = ResponseTypes.CODE.value
    redirect_url: str | None = None
    state: str | None = None

    def get_response_type(self) -> str | None:
        return self.response_type

    def get_redirect_url(self) -> str | None:
        return self.redirect_url

    def get_client_id(self) -> str | None:
        return self.client_id

    def get_state(self) -> str | None:
        return self.state

    def set_redirect_url(self, redirect_url: str) -> Self:
        self.redirect_url = redirect_url
        return self

    def set_state(self, state: str) -> Self:
        self.state = state
        return self

    def set_code_challenge(self, code_verifier: CodeVerifier, method: str = CodeChallengeMethods.S256) -> Self:
        """Include a PKCE `code_challenge` derived from `code_verifier` in this request.

        The same `code_verifier` must then be sent in the token request.

        """
        challenge = code_verifier.get_code_challenge(method)
        self.add_extra_param("code_challenge", challenge)
        self.add_extra_param("code_challenge_method", CodeChallengeMethods(method).value)
        return self

    def get_prepared_url(self) -> str:
        """Return the Authorization Request URI, with all parameters in the query string.

        Query parameters already present in the authorization endpoint are kept.

        Raises:
            EncodingError: if a parameter value cannot be url-encoded

        """
        return append_query(self.authorization_endpoint, render_params(self))

    def validate_callback(self, response: str) -> str:
        """Validate an Authorization Response against this Request, and return the `code`.

        Args:
            response: the full Authorization Response URI, as received on the redirect uri.

        Returns:
            the authorization code

        Raises:
            AuthorizationResponseError: if the response contains an error.
            InvalidAuthorizationResponse: if the response contains a non-standard error.
            MismatchingState: if the response `state` does not match the expected value.
            MissingAuthCode: if the response does not contain a `code`.

        """
        response_url = furl(response)
        if response_url.args.get("error"):
            raise AuthorizationResponseError.from_uri(response)

        requested_state = self.state
        if requested_state:
            received_state = response_url.args.get("state")
            if requested_state != received_state:
                raise MismatchingState(received_state, requested_state, response)

        code: str | None = response_url.args.get("code")
        if code is None:
            raise MissingAuthCode(response)
        return code
