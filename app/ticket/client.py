# app/ticket/client.py
import logging
import os
from typing import Any

import httpx

DEFAULT_BASE_URL = "http://localhost:8000/api"

logger = logging.getLogger(__name__)


class TicketsClientError(Exception):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TicketsClient:
    """Client for the tickets HTTP API.

    Args:
        base_url: API root, e.g. ``http://localhost:8000/api``. If ``None`` uses
            ``TICKETS_API_URL``.
        timeout: Request timeout in seconds.
        http: Existing ``httpx.Client`` to send requests through. Paths are
            then resolved against ``base_url`` if one is given, otherwise
            against the client's own base URL.
    """

    def __init__(self, base_url: str | None = None, *, timeout: float = 10.0,
                 http: httpx.Client | None = None):
        if http is not None:
            self.base_url = (base_url or "/api").rstrip("/")
            self._http = http
            self._owns_http = False
        else:
            self.base_url = (base_url or os.getenv("TICKETS_API_URL", DEFAULT_BASE_URL)).rstrip("/")
            self._http = httpx.Client(timeout=timeout)
            self._owns_http = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        if self._owns_http:
            self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.info("%s %s", method.upper(), url)
        response = self._http.request(method.upper(), url, **kwargs)
        logger.info("Status %s for %s", response.status_code, url)
        if response.is_error:
            raise TicketsClientError(response.status_code, response.text)
        return response

    def fetch_tickets(self, page_number: int = 1, page_size: int = 10) -> dict[str, Any]:
        """Fetch one page: ``{"data": [...], "pagination": {...}}``."""
        params = {"pageNumber": page_number, "pageSize": page_size}
        return self._request("get", "tickets", params=params).json()

    def get_ticket(self, ticket_id: int) -> dict[str, Any]:
        return self._request("get", f"tickets/{ticket_id}").json()

    def add_ticket(self, description: str, status: str = "Open") -> dict[str, Any]:
        payload = {"description": description, "status": status}
        return self._request("post", "tickets", json=payload).json()

    def update_ticket(self, ticket: dict[str, Any]) -> str:
        """Send the whole ticket back; only description and status change."""
        return self._request("put", f"tickets/{ticket['id']}", json=ticket).text

    def delete_ticket(self, ticket_id: int) -> str:
        return self._request("delete", f"tickets/{ticket_id}").text
