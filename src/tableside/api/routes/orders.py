from __future__ import annotations

from fastapi import APIRouter, Body, Query, status

from tableside.api import dependencies
from tableside.application.dto.requests import CreateOrderRequest, UpdateOrderRequest
from tableside.application.dto.responses import OrderDetailResponse, OrderResponse
from tableside.application.use_cases.change_order_status import ChangeOrderStatus
from tableside.application.use_cases.create_order import CreateOrder
from tableside.application.use_cases.get_order import GetActiveOrder, GetOrder
from tableside.application.use_cases.update_order import UpdateOrder
from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.order.entities import OrderStatus

router = APIRouter()


def _change_status(order_id: str, new_status: OrderStatus) -> OrderDetailResponse:
    return ChangeOrderStatus(
        order_repository=dependencies.order_repository(),
        publisher=dependencies.event_publisher(),
    ).execute(
        order_id=OrderId(order_id),
        new_status=new_status,
        trace_ctx=dependencies.trace_context(),
    )


@router.post(
    "/v1/tables/{table_id}/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    table_id: str,
    request_dto: CreateOrderRequest | None = Body(default=None),
) -> OrderResponse:
    use_case = CreateOrder(
        table_repository=dependencies.table_repository(),
        order_repository=dependencies.order_repository(),
        publisher=dependencies.event_publisher(),
    )
    return use_case.execute(
        table_id=TableId(table_id),
        customer_name=request_dto.customer_name if request_dto else None,
        trace_ctx=dependencies.trace_context(),
    )


@router.get("/v1/orders/active", response_model=OrderDetailResponse | None)
def get_active_order(
    table_id: str | None = Query(default=None, alias="tableId"),
    order_id: str | None = Query(default=None, alias="orderId"),
) -> OrderDetailResponse | None:
    return GetActiveOrder(order_repository=dependencies.order_repository()).execute(
        table_id=TableId(table_id) if table_id else None,
        order_id=OrderId(order_id) if order_id else None,
    )


@router.get("/v1/orders/{order_id}", response_model=OrderDetailResponse)
def get_order(order_id: str) -> OrderDetailResponse:
    return GetOrder(order_repository=dependencies.order_repository()).execute(
        order_id=OrderId(order_id)
    )


@router.patch("/v1/orders/{order_id}", response_model=OrderResponse)
def update_order(order_id: str, request_dto: UpdateOrderRequest) -> OrderResponse:
    fields = request_dto.model_dump(exclude_unset=True)
    return UpdateOrder(
        order_repository=dependencies.order_repository(),
        publisher=dependencies.event_publisher(),
    ).execute(
        order_id=OrderId(order_id),
        fields=fields,
        trace_ctx=dependencies.trace_context(),
    )


@router.post("/v1/orders/{order_id}/confirm", response_model=OrderDetailResponse)
def confirm_order(order_id: str) -> OrderDetailResponse:
    return _change_status(order_id, OrderStatus.ORDERED)


@router.post("/v1/orders/{order_id}/complete", response_model=OrderDetailResponse)
def complete_order(order_id: str) -> OrderDetailResponse:
    return _change_status(order_id, OrderStatus.COMPLETED)


@router.post("/v1/orders/{order_id}/cancel", response_model=OrderDetailResponse)
def cancel_order(order_id: str) -> OrderDetailResponse:
    return _change_status(order_id, OrderStatus.CANCELLED)
