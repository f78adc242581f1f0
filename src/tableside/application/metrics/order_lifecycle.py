from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

from tableside.domain.order.entities import Order, OrderStatus

ORDERS_CREATED_TOTAL = Counter(
    "tableside_orders_created_total",
    "Total number of orders created by initial status.",
    ["status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "tableside_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_TIME_TO_CONFIRM_SECONDS = Histogram(
    "tableside_order_time_to_confirm_seconds",
    "Time between order creation and staff confirmation.",
)

ORDER_REQUESTS_REJECTED_TOTAL = Counter(
    "tableside_order_requests_rejected_total",
    "Total number of order requests rejected by staff.",
    ["restaurant_id"],
)

REJECTION_FLAGS_CLEARED_TOTAL = Counter(
    "tableside_rejection_flags_cleared_total",
    "Total number of order request rejection flags cleared after notification.",
)


def record_order_created(order: Order) -> None:
    ORDERS_CREATED_TOTAL.labels(status=order.status.value).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_time_to_confirm(order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    ORDER_TIME_TO_CONFIRM_SECONDS.observe(max((current - order.created_at).total_seconds(), 0.0))


def record_order_request_rejected(restaurant_id: str) -> None:
    ORDER_REQUESTS_REJECTED_TOTAL.labels(restaurant_id=restaurant_id).inc()


def record_rejection_flags_cleared(count: int) -> None:
    if count > 0:
        REJECTION_FLAGS_CLEARED_TOTAL.inc(count)
