from __future__ import annotations

import os
from typing import Any, Protocol

import httpx

from tableside.application.dto.requests import PatchOrderRequestsRequest
from tableside.application.dto.responses import (
    AnnouncementResponse,
    AnnouncementsResponse,
    BatchPayloadResponse,
    OrderDetailResponse,
    OrderPageResponse,
)
from tableside.application.endpoints import (
    announcements_endpoint,
    order_endpoint,
    order_page_endpoint,
    order_requests_endpoint,
)
from tableside.application.errors import ApiError, NotFoundError, ValidationError

DEFAULT_API_URL = "http://localhost:8000"
NETWORK_ERROR_MESSAGE = "Could not reach the server. Please check your connection"


class OrderGateway(Protocol):
    async def load_order_page(self, encoded_order_id: str) -> OrderPageResponse: ...

    async def fetch_order(self, order_id: str) -> OrderDetailResponse: ...

    async def fetch_announcements(self, order_id: str) -> list[AnnouncementResponse]: ...

    async def clear_rejected_flags(self, order_id: str, order_request_ids: list[str]) -> int: ...


def _raise_for_error(response: httpx.Response) -> None:
    if response.status_code < 400:
        return

    message = f"request failed with status {response.status_code}"
    details: dict[str, Any] = {}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message") or message
        details = body["error"].get("details") or {}

    if response.status_code == 404:
        raise NotFoundError(message, details=details)
    if response.status_code == 400:
        raise ValidationError(message, details=details)
    raise ApiError(message, details=details)


class HttpOrderGateway(OrderGateway):
    """Talks to the ordering API over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url or os.getenv("TABLESIDE_API_URL", DEFAULT_API_URL),
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(NETWORK_ERROR_MESSAGE) from exc
        _raise_for_error(response)
        return response.json()

    async def load_order_page(self, encoded_order_id: str) -> OrderPageResponse:
        payload = await self._request("GET", order_page_endpoint(encoded_order_id))
        return OrderPageResponse.model_validate(payload)

    async def fetch_order(self, order_id: str) -> OrderDetailResponse:
        payload = await self._request("GET", order_endpoint(order_id))
        return OrderDetailResponse.model_validate(payload)

    async def fetch_announcements(self, order_id: str) -> list[AnnouncementResponse]:
        payload = await self._request("GET", announcements_endpoint(order_id))
        return AnnouncementsResponse.model_validate(payload).announcements

    async def clear_rejected_flags(self, order_id: str, order_request_ids: list[str]) -> int:
        body = PatchOrderRequestsRequest(
            rejected_flag=False,
            order_request_ids=order_request_ids,
        ).model_dump(by_alias=True)
        payload = await self._request("PATCH", order_requests_endpoint(order_id), json=body)
        return BatchPayloadResponse.model_validate(payload).count
