from __future__ import annotations

from fastapi import APIRouter

from tableside.api import dependencies
from tableside.application.dto.requests import (
    PatchOrderRequestsRequest,
    RejectOrderRequestRequest,
)
from tableside.application.dto.responses import (
    AnnouncementsResponse,
    BatchPayloadResponse,
    OrderRequestResponse,
)
from tableside.application.use_cases.order_requests import (
    ClearRejectedFlags,
    GetAnnouncements,
    RejectOrderRequest,
)
from tableside.domain.common.ids import OrderId, OrderRequestId

router = APIRouter()


@router.get("/v1/orders/{order_id}/announcements", response_model=AnnouncementsResponse)
def list_announcements(order_id: str) -> AnnouncementsResponse:
    return GetAnnouncements(
        order_request_repository=dependencies.order_request_repository()
    ).execute(order_id=OrderId(order_id))


@router.patch("/v1/orders/{order_id}/requests", response_model=BatchPayloadResponse)
def patch_order_requests(
    order_id: str,
    request_dto: PatchOrderRequestsRequest,
) -> BatchPayloadResponse:
    return ClearRejectedFlags(
        order_request_repository=dependencies.order_request_repository()
    ).execute(
        order_id=OrderId(order_id),
        rejected_flag=request_dto.rejected_flag,
        order_request_ids=request_dto.order_request_ids,
    )


@router.post(
    "/v1/order-requests/{order_request_id}/reject",
    response_model=OrderRequestResponse,
)
def reject_order_request(
    order_request_id: str,
    request_dto: RejectOrderRequestRequest,
) -> OrderRequestResponse:
    return RejectOrderRequest(
        order_repository=dependencies.order_repository(),
        order_request_repository=dependencies.order_request_repository(),
        publisher=dependencies.event_publisher(),
    ).execute(
        order_request_id=OrderRequestId(order_request_id),
        reason=request_dto.reason,
        trace_ctx=dependencies.trace_context(),
    )
