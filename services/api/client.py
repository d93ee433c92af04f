from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from core.config import settings
from services.api.errors import ApplicationError, AuthenticationError, TransportError
from services.auth.token_store import FileTokenStore
from services.observability.metrics import timing_metric

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin wrapper over httpx for the loan backend.

    Two pipeline stages run on every call:
      request  -> attach `Authorization: Bearer <token>` if a token is persisted
      response -> on 401 clear the persisted token and fire `on_unauthorized`
    Everything else is turned into an ApiError subclass for the caller. No retries.
    """

    def __init__(
        self,
        token_store: FileTokenStore,
        base_url: str | None = None,
        timeout: float | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token_store = token_store
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.on_unauthorized = on_unauthorized
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_S,
            headers={"Content-Type": "application/json"},
            event_hooks={"request": [self._attach_token], "response": [self._handle_unauthorized]},
            transport=transport,
        )

    # --- pipeline stages ---

    def _attach_token(self, request: httpx.Request) -> None:
        token = self.token_store.get_token()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def _handle_unauthorized(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        logger.warning("401 from %s %s; clearing session", response.request.method, response.request.url.path)
        self.token_store.clear()
        if self.on_unauthorized:
            self.on_unauthorized()

    # --- calls ---

    def request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        """Send one request and return the decoded `{success, ...}` body."""
        try:
            with timing_metric(f"{method} {path}"):
                r = self._http.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.error("transport failure on %s %s: %s", method, path, e)
            raise TransportError() from e

        try:
            body = r.json()
        except ValueError:
            body = None

        if r.status_code == 401:
            message = body.get("message") if isinstance(body, dict) else None
            raise AuthenticationError(message)

        if not r.is_success:
            raise ApplicationError.from_body(
                body, r.status_code, fallback=f"Request failed with status {r.status_code}"
            )
        if not isinstance(body, dict) or not body.get("success"):
            raise ApplicationError.from_body(body, r.status_code, fallback="Request was not successful")
        return body

    def get(self, path: str) -> dict[str, Any]:
        return self.request("GET", path)

    def post(self, path: str, json: Any = None) -> dict[str, Any]:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> dict[str, Any]:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> dict[str, Any]:
        return self.request("DELETE", path)

    def download(self, path: str) -> tuple[bytes, str]:
        """Raw GET for binary payloads (loan documents)."""
        try:
            r = self._http.get(path)
        except httpx.TransportError as e:
            raise TransportError() from e
        if r.status_code == 401:
            raise AuthenticationError()
        if not r.is_success:
            try:
                body = r.json()
            except ValueError:
                body = None
            raise ApplicationError.from_body(body, r.status_code, fallback="Document not available")
        return r.content, r.headers.get("content-type", "application/octet-stream")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def close(self) -> None:
        self._http.close()
