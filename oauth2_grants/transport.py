"""HTTP transports used to send requests to the Token Endpoint.

Requests and tokens in this package do not depend on any HTTP library. They talk to a
[Transport][oauth2_grants.transport.Transport], which can be anything that implements `post()`
and `get()`. [RequestsTransport][oauth2_grants.transport.RequestsTransport] is an implementation
based on `requests`.

"""

from __future__ import annotations

from typing import Iterable, Protocol

import requests
from attrs import field, frozen


class Transport(Protocol):
    """Sends HTTP requests on behalf of the OAuth 2.0 requests.

    Implementations return the status code and the body of the response. Network failures are
    raised as exceptions, and are not handled or retried by this package.

    """

    def post(self, url: str, body: str, headers: Iterable[tuple[str, str]]) -> tuple[int, str]:
        """Send a POST request with a form-encoded `body`."""
        ...

    def get(self, url: str, headers: Iterable[tuple[str, str]]) -> tuple[int, str]:
        """Send a GET request."""
        ...


@frozen
class RequestsTransport:
    """A `Transport` based on a `requests.Session`.

    Args:
        session: the session to use. A new `requests.Session` is created by default.
        timeout: the timeout to apply to each request, in seconds.

    Example:
        ```python
        from oauth2_grants import ClientCredentialsRequest, RequestsTransport

        token = ClientCredentialsRequest(scope="read").get_token(
            RequestsTransport(timeout=10), "https://url.to.the/token_endpoint"
        )
        ```

    """

    session: requests.Session = field(factory=requests.Session)
    timeout: float | None = 10

    def post(self, url: str, body: str, headers: Iterable[tuple[str, str]]) -> tuple[int, str]:
        response = self.session.post(url, data=body, headers=dict(headers), timeout=self.timeout)
        return response.status_code, response.text

    def get(self, url: str, headers: Iterable[tuple[str, str]]) -> tuple[int, str]:
        response = self.session.get(url, headers=dict(headers), timeout=self.timeout)
        return response.status_code, response.text
