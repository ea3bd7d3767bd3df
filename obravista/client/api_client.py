"""HTTP client for the ObraVista API.

Every response carries the ``{success, data?, message?}`` envelope; this
client unwraps ``data`` and turns transport errors and ``success=false``
replies into :class:`ApiFailure`. There are no retries.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from obravista.core.config import get_config
from obravista.core.exceptions import ApiFailure

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        prefix: str | None = None,
        timeout: float | None = None,
        token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        config = get_config()
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.prefix = prefix if prefix is not None else config.API_PREFIX
        self.timeout = timeout or config.API_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.token = token

    def url(self, path: str) -> str:
        return f"{self.base_url}{self.prefix}/{path.lstrip('/')}"

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self.post("/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return data

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self.session.request(
                method,
                self.url(path),
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            logger.warning(
                "client.request_failed",
                extra={"event": "client.request_failed", "method": method, "path": path, "error": str(exc)},
            )
            raise ApiFailure(f"Could not reach the server: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ApiFailure(f"Unexpected response ({response.status_code}).", response.status_code) from exc

        if not isinstance(body, dict) or not body.get("success", False):
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiFailure(message or f"Request failed ({response.status_code}).", response.status_code)
        return body.get("data")

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
