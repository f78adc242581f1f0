from __future__ import annotations

from typing import Any, Protocol

from tableside.domain.common.ids import OrderId, OrderRequestId, TableId
from tableside.domain.order.entities import Order, OrderDetail, OrderStatus
from tableside.domain.order.requests import OrderRequest
from tableside.domain.table.entities import Restaurant, Table


class TableRepository(Protocol):
    def get(self, table_id: TableId) -> Table | None: ...

    def get_restaurant(self, table: Table) -> Restaurant | None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def get_detail(self, order_id: OrderId) -> OrderDetail | None: ...

    def find_latest(
        self,
        *,
        order_id: OrderId | None = None,
        table_id: TableId | None = None,
        statuses: frozenset[OrderStatus] | None = None,
    ) -> OrderDetail | None: ...

    def list_for_table(
        self,
        table_id: TableId,
        status: OrderStatus | None = None,
    ) -> list[Order]: ...

    def update_fields(self, order_id: OrderId, fields: dict[str, Any]) -> Order | None: ...


class OrderRequestRepository(Protocol):
    def get(self, order_request_id: OrderRequestId) -> OrderRequest | None: ...

    def update(self, order_request: OrderRequest) -> None: ...

    def list_flagged(self, order_id: OrderId) -> list[OrderRequest]: ...

    def set_rejected_flag(
        self,
        order_id: OrderId,
        rejected_flag: bool,
        order_request_ids: list[OrderRequestId] | None = None,
    ) -> int: ...
