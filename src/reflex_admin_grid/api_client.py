"""Thin async JSON client for the batch API.

Every backend call is a ``POST`` with a JSON body.  Transport failures,
HTTP error statuses and undecodable bodies all surface as
:class:`~reflex_admin_grid.errors.ApiError`.
"""

import logging
from typing import Any

import httpx

from reflex_admin_grid.errors import ApiError

logger = logging.getLogger(__name__)


async def _log_request(request: httpx.Request) -> None:
    logger.debug("[api][request] %s %s", request.method, request.url)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug("[api][response] %s %s -> %d", request.method, request.url, response.status_code)


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class ApiClient:
    """POST-only JSON client.

    Args:
        base_url: Prefix for every request path.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).

    Usage::

        async with ApiClient("http://localhost:8080/api") as client:
            body = await client.post("/job/enquiry", {"page": 1, "pageSize": 10})
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 100.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
            transport=transport,
        )

    async def post(self, path: str, data: dict[str, Any] | None = None) -> Any:
        """POST *data* as JSON to *path* and return the decoded body."""
        try:
            response = await self._client.post(path, json=data or {})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("[api][error] %s -> HTTP %d", exc.request.url, status)
            raise ApiError(
                f"HTTP {status} from {path}",
                url=str(exc.request.url),
                status_code=status,
                payload=_error_payload(exc.response),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("[api][error] %s: %s", path, exc)
            raise ApiError(f"Request to {path} failed: {exc}", url=f"{self.base_url}{path}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"Response from {path} is not valid JSON",
                url=str(response.request.url),
                status_code=response.status_code,
            ) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
