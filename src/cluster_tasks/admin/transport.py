# src/cluster_tasks/admin/transport.py

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from ..errors import TransportError

logger = logging.getLogger(__name__)


def _make_timeout_obj(total_s: float) -> httpx.Timeout:
    """Connect is capped separately so a dead host fails fast."""
    return httpx.Timeout(total_s, connect=min(5.0, total_s))


class HttpAdminTransport:
    """
    AdminTransport over HTTP (httpx).

    - POST <base_url>/admin with a JSON body -> raw response bytes
    - GET  <base_url>/health?all -> one JSON-encoded entry per alpha

    Any httpx error or non-2xx status becomes TransportError. Nothing is retried here:
    the waiter decides what is retryable.
    """

    def __init__(
            self,
            base_url: str,
            *,
            timeout: float = 30.0,
            headers: Mapping[str, str] | None = None,
            client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=_make_timeout_obj(timeout))
        self._headers = dict(headers or {})

    def __enter__(self) -> "HttpAdminTransport":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            resp = self._client.request(method, url, headers=headers, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"error while running admin query: HTTP {e.response.status_code} from {url}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"error while running admin query: {e.__class__.__name__}: {e}") from e
        return resp

    def post_admin(self, body: bytes) -> bytes:
        logger.debug("POST %s/admin (%d bytes)", self.base_url, len(body))
        resp = self._request(
            "POST",
            "/admin",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        return resp.content

    def alphas_health(self) -> list[str]:
        resp = self._request("GET", "/health", params={"all": ""})
        try:
            payload = resp.json()
        except ValueError:
            # Older alphas answer with a bare "OK"; treat the body as a single entry.
            return [resp.text]
        if isinstance(payload, list):
            return [_health_entry(entry) for entry in payload]
        return [_health_entry(payload)]


def _health_entry(entry: Any) -> str:
    return entry if isinstance(entry, str) else json.dumps(entry, sort_keys=True)
