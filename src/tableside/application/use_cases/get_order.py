from __future__ import annotations

from tableside.application.dto.responses import OrderDetailResponse
from tableside.application.errors import NotFoundError
from tableside.application.mappers.order_mapper import to_order_detail_response
from tableside.application.ports.repositories import OrderRepository
from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.order.entities import ACTIVE_ORDER_STATUSES


class GetOrder:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, order_id: OrderId) -> OrderDetailResponse:
        detail = self._order_repository.get_detail(order_id)
        if detail is None:
            raise NotFoundError(f"order {order_id} not found")
        return to_order_detail_response(detail)


class GetActiveOrder:
    """Most recent PENDING or ORDERED order for a table and/or order id.

    A missing key is "no data", not a failure.
    """

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        table_id: TableId | None = None,
        order_id: OrderId | None = None,
    ) -> OrderDetailResponse | None:
        if not table_id and not order_id:
            return None

        detail = self._order_repository.find_latest(
            order_id=order_id or None,
            table_id=table_id or None,
            statuses=ACTIVE_ORDER_STATUSES,
        )
        if detail is None:
            return None
        return to_order_detail_response(detail)
