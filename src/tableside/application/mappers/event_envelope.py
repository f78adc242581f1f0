from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from tableside.application.use_cases.context import TraceContext
from tableside.domain.order.entities import Order

EVENT_SCHEMA_VERSION = 1


def _envelope(
    *,
    event_type: str,
    occurred_at: datetime,
    restaurant_id: str,
    payload: dict[str, Any],
    trace_ctx: TraceContext,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "schema_version": EVENT_SCHEMA_VERSION,
        "occurred_at": occurred_at.isoformat(),
        "restaurant_id": restaurant_id,
        "trace_id": trace_ctx.trace_id,
        "request_id": trace_ctx.request_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _order_payload(order: Order) -> dict[str, Any]:
    return {
        "orderId": str(order.order_id),
        "tableId": str(order.table_id),
        "status": order.status.value,
        "customerName": order.customer_name,
        "createdAt": order.created_at.isoformat(),
        "updatedAt": order.updated_at.isoformat() if order.updated_at else None,
    }


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    restaurant_id: str,
    order: Order,
    trace_ctx: TraceContext,
) -> str:
    return _envelope(
        event_type=event_type,
        occurred_at=occurred_at,
        restaurant_id=restaurant_id,
        payload=_order_payload(order),
        trace_ctx=trace_ctx,
    )


def serialize_order_request_rejected_event(
    *,
    occurred_at: datetime,
    restaurant_id: str,
    order_id: str,
    order_request_id: str,
    reason: str,
    trace_ctx: TraceContext,
) -> str:
    return _envelope(
        event_type="order_request.rejected",
        occurred_at=occurred_at,
        restaurant_id=restaurant_id,
        payload={
            "orderId": order_id,
            "orderRequestId": order_request_id,
            "rejectedReason": reason,
        },
        trace_ctx=trace_ctx,
    )
