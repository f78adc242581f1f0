from __future__ import annotations

from fastapi import APIRouter, Query

from tableside.api import dependencies
from tableside.application.dto.responses import OrderDetailResponse, OrdersResponse
from tableside.application.use_cases.get_order import GetActiveOrder
from tableside.application.use_cases.table_orders import (
    GetCompletedOrdersByTable,
    GetOrdersByTable,
)
from tableside.domain.common.ids import TableId

router = APIRouter()


@router.get("/v1/tables/{table_id}/orders", response_model=OrdersResponse | None)
def list_table_orders(
    table_id: str,
    status: str = Query(default="ALL"),
) -> OrdersResponse | None:
    return GetOrdersByTable(order_repository=dependencies.order_repository()).execute(
        table_id=TableId(table_id),
        status=status,
    )


@router.get("/v1/tables/{table_id}/orders/completed", response_model=OrdersResponse | None)
def list_completed_table_orders(table_id: str) -> OrdersResponse | None:
    return GetCompletedOrdersByTable(order_repository=dependencies.order_repository()).execute(
        table_id=TableId(table_id)
    )


@router.get("/v1/tables/{table_id}/orders/active", response_model=OrderDetailResponse | None)
def get_table_active_order(table_id: str) -> OrderDetailResponse | None:
    return GetActiveOrder(order_repository=dependencies.order_repository()).execute(
        table_id=TableId(table_id)
    )
