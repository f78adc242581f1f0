from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from tableside.application.dto.responses import OrderResponse
from tableside.application.errors import (
    NotFoundError,
    OrderTransitionConflictError,
    ValidationError,
)
from tableside.application.mappers.order_mapper import to_order_response
from tableside.application.ports.publisher import EventPublisher
from tableside.application.ports.repositories import OrderRepository
from tableside.application.use_cases.change_order_status import publish_status_change
from tableside.application.use_cases.context import TraceContext
from tableside.domain.common.ids import OrderId
from tableside.domain.order.entities import OrderStatus, can_transition

UPDATE_FAILED_MESSAGE = "Failed to update order. Please try again later"

MUTABLE_FIELDS = frozenset({"status", "customer_name"})
IMMUTABLE_FIELDS = frozenset({"id", "order_id", "orderId", "table_id", "tableId"})


class UpdateOrder:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        order_id: OrderId | None,
        fields: dict[str, Any],
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        if not order_id or any(value is None for value in fields.values()):
            raise ValidationError(UPDATE_FAILED_MESSAGE)

        changes = _validated_changes(fields)

        detail = self._order_repository.get_detail(order_id)
        if detail is None:
            raise NotFoundError(f"order {order_id} not found")
        current = detail.order

        new_status = changes.get("status")
        status_changed = new_status is not None and new_status != current.status
        if status_changed and not can_transition(current.status, new_status):
            raise OrderTransitionConflictError(
                f"cannot move order from status={current.status.value} "
                f"to status={new_status.value}"
            )
        if not changes:
            return to_order_response(current)

        changes["updated_at"] = datetime.now(timezone.utc)
        updated = self._order_repository.update_fields(order_id, changes)
        if updated is None:
            raise NotFoundError(f"order {order_id} not found")

        if status_changed:
            publish_status_change(
                publisher=self._publisher,
                previous=current,
                current=updated,
                restaurant_id=str(detail.restaurant.restaurant_id),
                trace_ctx=trace_ctx,
            )
        return to_order_response(updated)


def _validated_changes(fields: dict[str, Any]) -> dict[str, Any]:
    immutable = IMMUTABLE_FIELDS.intersection(fields)
    if immutable:
        raise ValidationError(
            "order id and table reference cannot be updated",
            details={"fields": sorted(immutable)},
        )
    unknown = set(fields) - MUTABLE_FIELDS
    if unknown:
        raise ValidationError(
            "unknown order fields",
            details={"fields": sorted(unknown)},
        )

    changes: dict[str, Any] = {}
    if "status" in fields:
        try:
            changes["status"] = OrderStatus(str(fields["status"]).upper())
        except ValueError as exc:
            raise ValidationError(
                f"invalid order status {fields['status']!r}",
                details={"fields": ["status"]},
            ) from exc
    if "customer_name" in fields:
        if not isinstance(fields["customer_name"], str):
            raise ValidationError(
                "customer_name must be a string",
                details={"fields": ["customer_name"]},
            )
        changes["customer_name"] = fields["customer_name"]
    return changes
