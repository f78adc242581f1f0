from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tableside.domain.common.ids import OrderId, OrderRequestId, RestaurantId, TableId
from tableside.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderCreated:
    order_id: OrderId
    restaurant_id: RestaurantId
    table_id: TableId
    status: OrderStatus
    created_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    restaurant_id: RestaurantId
    table_id: TableId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime


@dataclass(frozen=True)
class OrderRequestRejected:
    order_request_id: OrderRequestId
    order_id: OrderId
    restaurant_id: RestaurantId
    reason: str
    occurred_at: datetime
