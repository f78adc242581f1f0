from __future__ import annotations

from fastapi import APIRouter

from tableside.api import dependencies
from tableside.application.dto.responses import OrderPageResponse
from tableside.application.use_cases.order_page import LoadOrderPage

router = APIRouter()


@router.get("/v1/pages/orders/{encoded_order_id:path}", response_model=OrderPageResponse)
def order_page(encoded_order_id: str) -> OrderPageResponse:
    return LoadOrderPage(order_repository=dependencies.order_repository()).execute(
        encoded_order_id
    )
