"""
Transport Adapter - JSON over HTTP against one REST scope.

Non-2xx responses are returned, not raised: the caller decides (directly or
through the scope resolver) whether a status is a failure. Network failures
and undecodable success bodies raise TransportError.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from climatesync.shared.domain.exceptions import TransportError
from climatesync.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"
JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


@dataclass
class TransportResponse:
    """Status and decoded body of a completed HTTP exchange."""

    status_code: int
    reason: str = ""
    body: Any = None
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self) -> "TransportResponse":
        if not self.is_success:
            raise TransportError(
                f"{self.status_code} {self.reason}".strip(),
                name="HTTPStatusError",
                status_code=self.status_code,
                response_body=self.body,
                context={"url": self.url},
            )
        return self


def create_http_client(
    access_token: str,
    api_version: str = "6.0",
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the shared AsyncClient: bearer auth, api-version parameter, timeout.

    One client (one connection pool) serves every scope.
    """
    return httpx.AsyncClient(
        headers={
            "Authorization": f"Bearer {access_token}",
            "Accept": JSON_CONTENT_TYPE,
        },
        params={"api-version": api_version},
        timeout=timeout,
        transport=transport,
    )


class HttpTransport:
    """Issues requests relative to a single base URL."""

    def __init__(self, client: httpx.AsyncClient, base_url: str):
        self._client = client
        self.base_url = base_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> TransportResponse:
        url = self.url_for(path)
        headers = {"Content-Type": content_type} if json is not None else None

        try:
            response = await self._client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(
                str(e) or type(e).__name__,
                name=type(e).__name__,
                context={"method": method, "url": url},
            ) from e

        logger.debug("http_request", method=method, url=url, status_code=response.status_code)

        return TransportResponse(
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=self._decode(response),
            url=url,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            if response.is_success:
                raise TransportError(
                    f"Response body is not valid JSON: {e}",
                    name="SerializationError",
                    status_code=response.status_code,
                    response_body=response.text,
                ) from e
            return response.text

    async def get(self, path: str) -> TransportResponse:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any) -> TransportResponse:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Any, content_type: str = JSON_PATCH_CONTENT_TYPE) -> TransportResponse:
        return await self.request("PATCH", path, json=json, content_type=content_type)
