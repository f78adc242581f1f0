from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from tableside.application.dto.responses import OrderResponse
from tableside.application.errors import NotFoundError, ValidationError
from tableside.application.mappers.event_envelope import serialize_order_event
from tableside.application.mappers.order_mapper import to_order_response
from tableside.application.metrics.order_lifecycle import record_order_created
from tableside.application.ports.publisher import EventPublisher, publish_after_commit
from tableside.application.ports.repositories import OrderRepository, TableRepository
from tableside.application.use_cases.context import TraceContext
from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.order.entities import create_order
from tableside.domain.order.events import OrderCreated
from tableside.domain.table.entities import RestaurantClosedError, TableReservedError

logger = logging.getLogger(__name__)


class CreateOrder:
    def __init__(
        self,
        table_repository: TableRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
    ) -> None:
        self._table_repository = table_repository
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        table_id: TableId | None,
        customer_name: str | None,
        trace_ctx: TraceContext,
        now: datetime | None = None,
    ) -> OrderResponse:
        if not table_id or not str(table_id).strip():
            raise ValidationError("Failed to create order")

        table = self._table_repository.get(table_id)
        if table is None:
            raise NotFoundError(f"table {table_id} not found")
        restaurant = self._table_repository.get_restaurant(table)
        if restaurant is None:
            raise NotFoundError(f"restaurant {table.restaurant_id} not found")

        current = now or datetime.now().astimezone()
        try:
            table.ensure_not_reserved()
            restaurant.ensure_accepting_orders(current.time())
        except (TableReservedError, RestaurantClosedError) as exc:
            raise ValidationError(str(exc)) from exc

        order = create_order(
            order_id=OrderId(f"ord_{uuid4().hex[:12]}"),
            table_id=table.table_id,
            customer_name=customer_name,
            now=current.astimezone(timezone.utc),
        )
        self._order_repository.add(order)

        event = OrderCreated(
            order_id=order.order_id,
            restaurant_id=table.restaurant_id,
            table_id=order.table_id,
            status=order.status,
            created_at=order.created_at,
        )
        message = serialize_order_event(
            event_type="order.created",
            occurred_at=event.created_at,
            restaurant_id=str(event.restaurant_id),
            order=order,
            trace_ctx=trace_ctx,
        )
        record_order_created(order)
        logger.info(
            "order_created",
            extra={"order_id": str(order.order_id), "table_id": str(order.table_id)},
        )
        publish_after_commit(
            self._publisher,
            str(table.restaurant_id),
            message,
            order_id=str(order.order_id),
        )

        return to_order_response(order)
