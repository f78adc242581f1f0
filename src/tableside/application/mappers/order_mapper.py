from __future__ import annotations

from tableside.application.dto.responses import (
    AnnouncementResponse,
    OrderDetailResponse,
    OrderRequestResponse,
    OrderResponse,
)
from tableside.application.mappers.table_mapper import to_table_response
from tableside.domain.order.entities import Order, OrderDetail
from tableside.domain.order.requests import Announcement, OrderRequest


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        status=order.status.value,
        customerName=order.customer_name,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def to_order_detail_response(detail: OrderDetail) -> OrderDetailResponse:
    order = detail.order
    return OrderDetailResponse(
        orderId=str(order.order_id),
        tableId=str(order.table_id),
        status=order.status.value,
        customerName=order.customer_name,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        table=to_table_response(detail.table, detail.restaurant),
    )


def to_announcement_response(announcement: Announcement) -> AnnouncementResponse:
    return AnnouncementResponse(
        orderRequestId=str(announcement.order_request_id),
        orderId=str(announcement.order_id),
        orderRequestNumber=announcement.order_request_number,
        createdAt=announcement.created_at,
        rejectedReason=announcement.rejected_reason,
        orderItems=list(announcement.item_names),
    )


def to_order_request_response(order_request: OrderRequest) -> OrderRequestResponse:
    return OrderRequestResponse(
        orderRequestId=str(order_request.order_request_id),
        orderId=str(order_request.order_id),
        requestNumber=order_request.request_number,
        status=order_request.status.value,
        rejectedReason=order_request.rejected_reason,
        rejectedFlag=order_request.rejected_flag,
        createdAt=order_request.created_at,
    )
