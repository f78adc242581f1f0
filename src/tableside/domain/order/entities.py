from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.table.entities import Restaurant, Table


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    ORDERED = "ORDERED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


ACTIVE_ORDER_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.ORDERED})
TERMINAL_ORDER_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ORDERED, OrderStatus.CANCELLED}),
    OrderStatus.ORDERED: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    table_id: TableId
    status: OrderStatus
    customer_name: str
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_ORDER_STATUSES

    def transition_to(self, new_status: OrderStatus, now: datetime) -> Order:
        if not can_transition(self.status, new_status):
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={new_status.value}"
            )
        return replace(self, status=new_status, updated_at=now)

    def confirm(self, now: datetime) -> Order:
        return self.transition_to(OrderStatus.ORDERED, now)

    def complete(self, now: datetime) -> Order:
        return self.transition_to(OrderStatus.COMPLETED, now)

    def cancel(self, now: datetime) -> Order:
        return self.transition_to(OrderStatus.CANCELLED, now)


@dataclass(frozen=True)
class OrderDetail:
    """An order together with the table and restaurant it belongs to."""

    order: Order
    table: Table
    restaurant: Restaurant


def create_order(
    order_id: OrderId,
    table_id: TableId,
    customer_name: str | None,
    now: datetime,
) -> Order:
    """Start a table session.

    A named customer has to be confirmed by staff first, so the order begins
    as PENDING; anonymous sessions go straight to ORDERED. Any non-empty
    name counts, even one that is only whitespace; the stored name is trimmed.
    """
    status = OrderStatus.PENDING if customer_name else OrderStatus.ORDERED
    return Order(
        order_id=order_id,
        table_id=table_id,
        status=status,
        customer_name=(customer_name or "").strip(),
        created_at=now,
    )


class OrderTransitionError(Exception):
    pass
