from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, time, timezone
from pathlib import Path
from typing import Any

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tableside.domain.common.ids import (
    MenuItemId,
    OrderId,
    OrderRequestId,
    RestaurantId,
    TableId,
)
from tableside.domain.order.entities import Order, OrderDetail, OrderStatus
from tableside.domain.order.requests import (
    OrderRequest,
    OrderRequestItem,
    OrderRequestStatus,
)
from tableside.domain.table.entities import Restaurant, Table, TableStatus

CREATED_AT = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeTableRepository:
    def __init__(self, tables: list[Table], restaurants: list[Restaurant]) -> None:
        self.tables = {str(table.table_id): table for table in tables}
        self.restaurants = {str(item.restaurant_id): item for item in restaurants}

    def get(self, table_id: TableId) -> Table | None:
        return self.tables.get(str(table_id))

    def get_restaurant(self, table: Table) -> Restaurant | None:
        return self.restaurants.get(str(table.restaurant_id))


class FakeOrderRepository:
    def __init__(self, table_repository: FakeTableRepository) -> None:
        self._table_repository = table_repository
        self.orders: dict[str, Order] = {}

    def add(self, order: Order) -> None:
        self.orders[str(order.order_id)] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self.orders.get(str(order_id))

    def get_detail(self, order_id: OrderId) -> OrderDetail | None:
        order = self.get(order_id)
        if order is None:
            return None
        return self._detail(order)

    def find_latest(
        self,
        *,
        order_id: OrderId | None = None,
        table_id: TableId | None = None,
        statuses: frozenset[OrderStatus] | None = None,
    ) -> OrderDetail | None:
        candidates = [
            order
            for order in self.orders.values()
            if (order_id is None or order.order_id == order_id)
            and (table_id is None or order.table_id == table_id)
            and (statuses is None or order.status in statuses)
        ]
        if not candidates:
            return None
        latest = max(candidates, key=lambda order: (order.created_at, str(order.order_id)))
        return self._detail(latest)

    def list_for_table(
        self,
        table_id: TableId,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        orders = [
            order
            for order in self.orders.values()
            if order.table_id == table_id and (status is None or order.status == status)
        ]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    def update_fields(self, order_id: OrderId, fields: dict[str, Any]) -> Order | None:
        order = self.get(order_id)
        if order is None:
            return None
        updated = replace(order, **fields)
        self.orders[str(order_id)] = updated
        return updated

    def _detail(self, order: Order) -> OrderDetail | None:
        table = self._table_repository.get(order.table_id)
        if table is None:
            return None
        restaurant = self._table_repository.get_restaurant(table)
        if restaurant is None:
            return None
        return OrderDetail(order=order, table=table, restaurant=restaurant)


class FakeOrderRequestRepository:
    def __init__(self, order_requests: list[OrderRequest] | None = None) -> None:
        self.order_requests = {
            str(item.order_request_id): item for item in (order_requests or [])
        }
        self.clear_calls: list[tuple[str, bool]] = []

    def get(self, order_request_id: OrderRequestId) -> OrderRequest | None:
        return self.order_requests.get(str(order_request_id))

    def update(self, order_request: OrderRequest) -> None:
        self.order_requests[str(order_request.order_request_id)] = order_request

    def list_flagged(self, order_id: OrderId) -> list[OrderRequest]:
        flagged = [
            item
            for item in self.order_requests.values()
            if item.order_id == order_id and item.rejected_flag
        ]
        return sorted(flagged, key=lambda item: item.request_number)

    def set_rejected_flag(
        self,
        order_id: OrderId,
        rejected_flag: bool,
        order_request_ids: list[OrderRequestId] | None = None,
    ) -> int:
        self.clear_calls.append((str(order_id), rejected_flag))
        wanted = None if order_request_ids is None else {str(value) for value in order_request_ids}
        count = 0
        for key, item in list(self.order_requests.items()):
            if wanted is not None and key not in wanted:
                continue
            if item.order_id == order_id and item.rejected_flag != rejected_flag:
                self.order_requests[key] = replace(item, rejected_flag=rejected_flag)
                count += 1
        return count


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))


def make_restaurant(
    start_time: time | None = time(0, 0),
    end_time: time | None = time(0, 0),
    last_order: time | None = None,
) -> Restaurant:
    return Restaurant(
        restaurant_id=RestaurantId("rst_001"),
        name="Test Kitchen",
        start_time=start_time,
        end_time=end_time,
        last_order=last_order,
    )


def make_table(
    table_id: str = "tbl_001",
    status: TableStatus = TableStatus.OCCUPIED,
    number: int = 1,
) -> Table:
    return Table(
        table_id=TableId(table_id),
        restaurant_id=RestaurantId("rst_001"),
        number=number,
        table_type="TABLE",
        status=status,
    )


def make_order(
    order_id: str = "order123",
    table_id: str = "tbl_001",
    status: OrderStatus = OrderStatus.ORDERED,
    created_at: datetime = CREATED_AT,
) -> Order:
    return Order(
        order_id=OrderId(order_id),
        table_id=TableId(table_id),
        status=status,
        customer_name="",
        created_at=created_at,
    )


def make_order_request(
    order_request_id: str,
    request_number: int,
    order_id: str = "order123",
    rejected_reason: str | None = None,
    rejected_flag: bool = False,
    item_names: tuple[str, ...] = ("Margherita Pizza",),
) -> OrderRequest:
    status = OrderRequestStatus.REJECTED if rejected_flag else OrderRequestStatus.PLACED
    return OrderRequest(
        order_request_id=OrderRequestId(order_request_id),
        order_id=OrderId(order_id),
        request_number=request_number,
        status=status,
        items=[
            OrderRequestItem(menu_item_id=MenuItemId(f"itm_{index:03d}"), name=name, quantity=1)
            for index, name in enumerate(item_names, start=1)
        ],
        created_at=CREATED_AT,
        rejected_reason=rejected_reason,
        rejected_flag=rejected_flag,
    )


class FakeGateway:
    def __init__(self) -> None:
        self.page_props: Any = None
        self.orders: list[Any] = []
        self.announcements: list[Any] = []
        self.clear_error: Exception | None = None
        self.calls: list[str] = []
        self.cleared = 0
        self.cleared_ids: list[list[str]] = []

    async def load_order_page(self, encoded_order_id: str) -> Any:
        self.calls.append(f"page:{encoded_order_id}")
        if isinstance(self.page_props, Exception):
            raise self.page_props
        return self.page_props

    async def fetch_order(self, order_id: str) -> Any:
        self.calls.append(f"order:{order_id}")
        result = self.orders.pop(0) if len(self.orders) > 1 else self.orders[0]
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_announcements(self, order_id: str) -> list[Any]:
        self.calls.append(f"announcements:{order_id}")
        if isinstance(self.announcements, Exception):
            raise self.announcements
        return list(self.announcements)

    async def clear_rejected_flags(self, order_id: str, order_request_ids: list[str]) -> int:
        self.calls.append(f"clear:{order_id}")
        self.cleared_ids.append(list(order_request_ids))
        if self.clear_error is not None:
            raise self.clear_error
        remaining = [
            item for item in self.announcements if item.orderRequestId not in order_request_ids
        ]
        count = len(self.announcements) - len(remaining)
        self.announcements = remaining
        self.cleared += 1
        return count


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[tuple[Any, str, Any]] = []

    def notify(self, severity: Any, message: str, duration: Any = None) -> None:
        self.notices.append((severity, message, duration))


class RecordingNavigator:
    def __init__(self) -> None:
        self.destinations: list[str] = []

    async def navigate(self, destination: str) -> None:
        self.destinations.append(destination)
