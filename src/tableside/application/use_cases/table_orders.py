from __future__ import annotations

from tableside.application.dto.responses import OrdersResponse
from tableside.application.errors import ValidationError
from tableside.application.mappers.order_mapper import to_order_response
from tableside.application.ports.repositories import OrderRepository
from tableside.domain.common.ids import TableId
from tableside.domain.order.entities import OrderStatus


class GetOrdersByTable:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, table_id: TableId | None, status: str = "ALL") -> OrdersResponse | None:
        if not table_id:
            return None

        parsed_status = _parse_status_filter(status)
        orders = self._order_repository.list_for_table(table_id, status=parsed_status)
        return OrdersResponse(orders=[to_order_response(order) for order in orders])


class GetCompletedOrdersByTable:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, table_id: TableId | None) -> OrdersResponse | None:
        return GetOrdersByTable(self._order_repository).execute(
            table_id, status=OrderStatus.COMPLETED.value
        )


def _parse_status_filter(raw_status: str) -> OrderStatus | None:
    normalized = raw_status.strip().upper()
    if normalized == "ALL":
        return None
    try:
        return OrderStatus(normalized)
    except ValueError as exc:
        raise ValidationError(
            "status must be one of ALL, PENDING, ORDERED, COMPLETED, CANCELLED"
        ) from exc
