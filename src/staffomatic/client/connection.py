"""Synchronous HTTP connection to the Staffomatic API.

:class:`Connection` wraps :class:`httpx.Client` and layers on:

- **Auth injection** -- headers and query params from the strategy chosen by
  :class:`~staffomatic.auth.manager.AuthManager` are merged into every
  request, under any caller-supplied values.
- **Response decoding** -- every verb returns the decoded JSON body (or the
  raw text for non-JSON bodies, ``None`` for empty ones).
- **Error mapping** -- 4xx/5xx statuses raise the typed errors from
  :mod:`staffomatic.exceptions`; transport failures raise
  :class:`~staffomatic.exceptions.ConnectionError_`. Nothing is retried.
- **Pagination** -- :meth:`Connection.paginate` follows ``Link: rel="next"``
  headers lazily.

Requests are logged through :func:`staffomatic.output.debug`.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from staffomatic.auth import AuthManager, AuthResult, AuthStrategy, create_default_manager
from staffomatic.exceptions import ConnectionError_, InvalidUsageError, error_for_status
from staffomatic.models import ClientConfig
from staffomatic.output import debug


def decode_response(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Returns the decoded JSON (``dict``, ``list``, ...), the raw text when the
    body is not JSON, or ``None`` for an empty body.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class PaginatedResource:
    """A lazy, restartable view over every page of a collection.

    Nothing is requested until iteration starts. Each call to ``iter()``
    starts again from the first page, so the object can be walked more than
    once. Pages are fetched one at a time, only when the previous page has
    been consumed.

    Example::

        users = client.paginate("users", params={"since": 100})
        first_ten = list(itertools.islice(users, 10))
    """

    def __init__(
        self,
        connection: Connection,
        path: str,
        params: Optional[dict[str, Any]] = None,
    ) -> None:
        self._connection = connection
        self._path = path
        self._params = dict(params or {})

    def pages(self) -> Iterator[Any]:
        """Yield each decoded page, following ``rel="next"`` links until none remain."""
        url: Optional[str] = self._path
        params: Optional[dict[str, Any]] = self._params
        while url is not None:
            response = self._connection.send("GET", url, params=params)
            yield decode_response(response)
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string.
            params = None
            if url is not None:
                debug(f"Following next page: {url}")

    def __iter__(self) -> Iterator[Any]:
        for page in self.pages():
            if page is None:
                continue
            if isinstance(page, list):
                yield from page
            else:
                yield page


class Connection:
    """HTTP connection and auth context shared by the API mixins.

    The underlying :class:`httpx.Client` is created on first use and released
    by :meth:`close` or by leaving a ``with`` block.

    Args:
        config: Endpoints, credentials and request settings. When ``None``,
            a :class:`~staffomatic.models.ClientConfig` is built from
            *overrides*.
        auth_manager: Chooses the auth strategy. Defaults to
            :func:`~staffomatic.auth.create_default_manager`.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.
        **overrides: :class:`~staffomatic.models.ClientConfig` fields that
            take precedence over *config*.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        auth_manager: Optional[AuthManager] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **overrides: Any,
    ) -> None:
        try:
            if config is None:
                config = ClientConfig(**overrides)
            elif overrides:
                config = ClientConfig.model_validate({**config.model_dump(), **overrides})
        except ValidationError as exc:
            raise InvalidUsageError(f"Invalid client settings: {exc}") from exc
        self._config = config
        self._auth_manager = auth_manager or create_default_manager()
        self._auth_strategy: Optional[AuthStrategy] = self._auth_manager.select(config)
        self._auth_result = (
            self._auth_strategy.authenticate(config) if self._auth_strategy else AuthResult()
        )
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self.last_response: Optional[httpx.Response] = None

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._config.api_endpoint,
                timeout=self._config.request.timeout,
                verify=self._config.request.verify_ssl,
                follow_redirects=True,
                headers={
                    "Accept": "application/json",
                    "User-Agent": self._config.user_agent,
                },
                transport=self._transport,
            )
        return self._client

    # ------------------------------------------------------------------ #
    # Auth context
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def login(self) -> Optional[str]:
        """The configured identity of the authenticated user (``login``, else ``email``)."""
        return self._config.login or self._config.email

    @property
    def client_id(self) -> Optional[str]:
        return self._config.client_id

    @property
    def client_secret(self) -> Optional[str]:
        return self._config.client_secret

    @property
    def api_endpoint(self) -> str:
        return self._config.api_endpoint

    @property
    def web_endpoint(self) -> str:
        return self._config.web_endpoint

    @property
    def auth_type(self) -> Optional[str]:
        """Type of the active auth strategy, ``None`` when anonymous."""
        return self._auth_strategy.auth_type if self._auth_strategy else None

    @property
    def basic_authenticated(self) -> bool:
        return self.auth_type == "basic"

    @property
    def token_authenticated(self) -> bool:
        return self.auth_type == "token"

    @property
    def user_authenticated(self) -> bool:
        """Whether requests are made as a user (basic or token auth)."""
        return self._auth_strategy is not None and self._auth_strategy.user_auth

    @property
    def application_authenticated(self) -> bool:
        return bool(self._config.client_id and self._config.client_secret)

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        """Send a request and return the raw response after error mapping.

        Relative paths resolve against ``api_endpoint``; absolute URLs are
        used as is. With *authenticate* false no auth headers or params are
        added, for requests that carry their own credentials.

        Raises:
            Unauthorized, Forbidden, NotFound, UnprocessableEntity, ClientError:
                On 4xx responses.
            ServerError: On 5xx responses.
            ConnectionError_: On network or timeout errors.
        """
        auth = self._auth_result if authenticate else AuthResult()
        merged_headers = {**auth.headers, **(headers or {})}
        merged_params = {**auth.params, **(params or {})}

        debug(f"{method} {path}" + (f" params={params}" if params else ""))
        try:
            response = self.http.request(
                method,
                path,
                params=merged_params or None,
                json=json_body,
                headers=merged_headers,
            )
        except httpx.TransportError as exc:
            raise ConnectionError_(f"{method} {path} failed: {exc}") from exc

        self.last_response = response
        debug(f"HTTP {response.status_code} {method} {self._redact(response.request.url)}")
        self._raise_for_status(response)
        return response

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded response body.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: Path relative to ``api_endpoint``, or an absolute URL.
            **kwargs: ``params``, ``json_body``, ``headers`` and
                ``authenticate``, forwarded to :meth:`send`.
        """
        return decode_response(self.send(method, path, **kwargs))

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> Any:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def paginate(
        self, path: str, params: Optional[dict[str, Any]] = None
    ) -> PaginatedResource:
        """Return a lazy iterable over every record of a paginated collection.

        The configured ``per_page`` is sent on the first request unless
        *params* already sets it.
        """
        merged: dict[str, Any] = dict(params or {})
        if self._config.per_page is not None:
            merged.setdefault("per_page", self._config.per_page)
        return PaginatedResource(self, path, merged)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _spawn(self, config: ClientConfig) -> Connection:
        """Build an independent client of the same class for *config*."""
        return type(self)(config, auth_manager=self._auth_manager, transport=self._transport)

    def _redact(self, url: httpx.URL) -> httpx.URL:
        """Drop auth query params, such as the client secret, from *url* for logging."""
        for key in self._auth_result.params:
            url = url.copy_remove_param(key)
        return url

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        if response.status_code < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        exc = error_for_status(
            response.status_code,
            str(msg),
            method=response.request.method,
            url=str(response.request.url),
        )
        if exc is not None:
            raise exc
