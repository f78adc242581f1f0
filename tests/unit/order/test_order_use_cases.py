from __future__ import annotations

import json
import sys
from datetime import timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from fakes import CREATED_AT, make_order
from tableside.application.errors import (
    NotFoundError,
    OrderTransitionConflictError,
    ValidationError,
)
from tableside.application.use_cases.change_order_status import ChangeOrderStatus
from tableside.application.use_cases.get_order import GetActiveOrder, GetOrder
from tableside.application.use_cases.update_order import UPDATE_FAILED_MESSAGE, UpdateOrder
from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.order.entities import OrderStatus


def test_get_order_returns_table_and_restaurant(order_repository) -> None:
    order_repository.add(make_order())

    detail = GetOrder(order_repository=order_repository).execute(order_id=OrderId("order123"))

    assert detail.orderId == "order123"
    assert detail.table.number == 1
    assert detail.table.status == "OCCUPIED"
    assert detail.table.restaurant is not None
    assert detail.table.restaurant.restaurantId == "rst_001"


def test_get_order_missing_is_not_found(order_repository) -> None:
    with pytest.raises(NotFoundError):
        GetOrder(order_repository=order_repository).execute(order_id=OrderId("nope"))


def test_active_order_without_keys_is_none(order_repository) -> None:
    order_repository.add(make_order())

    assert GetActiveOrder(order_repository=order_repository).execute() is None


def test_active_order_prefers_most_recent(order_repository) -> None:
    order_repository.add(make_order("ord_old", created_at=CREATED_AT))
    order_repository.add(
        make_order("ord_new", status=OrderStatus.PENDING, created_at=CREATED_AT + timedelta(hours=1))
    )
    order_repository.add(
        make_order("ord_done", status=OrderStatus.COMPLETED, created_at=CREATED_AT + timedelta(hours=2))
    )

    active = GetActiveOrder(order_repository=order_repository).execute(table_id=TableId("tbl_001"))

    assert active is not None
    assert active.orderId == "ord_new"


def test_completed_order_is_no_longer_active(order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order())
    ChangeOrderStatus(order_repository=order_repository, publisher=publisher).execute(
        order_id=OrderId("order123"),
        new_status=OrderStatus.COMPLETED,
        trace_ctx=trace_ctx,
    )

    use_case = GetActiveOrder(order_repository=order_repository)
    assert use_case.execute(table_id=TableId("tbl_001")) is None
    assert use_case.execute(order_id=OrderId("order123")) is None


def test_confirm_moves_pending_to_ordered_and_publishes(
    order_repository, publisher, trace_ctx
) -> None:
    order_repository.add(make_order(status=OrderStatus.PENDING))

    confirmed = ChangeOrderStatus(order_repository=order_repository, publisher=publisher).execute(
        order_id=OrderId("order123"),
        new_status=OrderStatus.ORDERED,
        trace_ctx=trace_ctx,
    )

    assert confirmed.status == "ORDERED"
    assert confirmed.updatedAt is not None
    event_types = [json.loads(message)["event_type"] for _, message in publisher.messages]
    assert event_types == ["order.ordered"]


def test_same_status_is_a_no_op(order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order())

    unchanged = ChangeOrderStatus(order_repository=order_repository, publisher=publisher).execute(
        order_id=OrderId("order123"),
        new_status=OrderStatus.ORDERED,
        trace_ctx=trace_ctx,
    )

    assert unchanged.updatedAt is None
    assert publisher.messages == []


def test_terminal_order_cannot_be_reopened(order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order(status=OrderStatus.CANCELLED))

    with pytest.raises(OrderTransitionConflictError):
        ChangeOrderStatus(order_repository=order_repository, publisher=publisher).execute(
            order_id=OrderId("order123"),
            new_status=OrderStatus.ORDERED,
            trace_ctx=trace_ctx,
        )


def _update(order_repository, publisher, trace_ctx, order_id, fields):
    return UpdateOrder(order_repository=order_repository, publisher=publisher).execute(
        order_id=order_id,
        fields=fields,
        trace_ctx=trace_ctx,
    )


def test_update_with_null_status_is_rejected_without_writing(
    order_repository, publisher, trace_ctx
) -> None:
    order_repository.add(make_order())

    with pytest.raises(ValidationError) as exc_info:
        _update(order_repository, publisher, trace_ctx, OrderId("order123"), {"status": None})

    assert exc_info.value.message == UPDATE_FAILED_MESSAGE
    assert order_repository.get(OrderId("order123")).status == OrderStatus.ORDERED


def test_update_without_order_id_is_rejected(order_repository, publisher, trace_ctx) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _update(order_repository, publisher, trace_ctx, None, {"status": "COMPLETED"})

    assert exc_info.value.message == UPDATE_FAILED_MESSAGE


@pytest.mark.parametrize("field", ["orderId", "id", "table_id", "tableId"])
def test_update_cannot_touch_identity(field, order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order())

    with pytest.raises(ValidationError):
        _update(order_repository, publisher, trace_ctx, OrderId("order123"), {field: "other"})


def test_update_applies_status_and_name(order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order(status=OrderStatus.PENDING))

    updated = _update(
        order_repository,
        publisher,
        trace_ctx,
        OrderId("order123"),
        {"status": "ordered", "customer_name": "Bob"},
    )

    assert updated.status == "ORDERED"
    assert updated.customerName == "Bob"
    assert updated.orderId == "order123"
    assert updated.tableId == "tbl_001"
    assert len(publisher.messages) == 1


def test_update_enforces_lifecycle(order_repository, publisher, trace_ctx) -> None:
    order_repository.add(make_order(status=OrderStatus.COMPLETED))

    with pytest.raises(OrderTransitionConflictError):
        _update(order_repository, publisher, trace_ctx, OrderId("order123"), {"status": "PENDING"})


def test_update_unknown_order_is_not_found(order_repository, publisher, trace_ctx) -> None:
    with pytest.raises(NotFoundError):
        _update(order_repository, publisher, trace_ctx, OrderId("nope"), {"customer_name": "Bob"})
