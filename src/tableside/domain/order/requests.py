from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from tableside.domain.common.ids import MenuItemId, OrderId, OrderRequestId


class OrderRequestStatus(str, Enum):
    PLACED = "PLACED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class OrderRequestItem:
    menu_item_id: MenuItemId
    name: str
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")


@dataclass(frozen=True)
class OrderRequest:
    order_request_id: OrderRequestId
    order_id: OrderId
    request_number: int
    status: OrderRequestStatus
    items: list[OrderRequestItem]
    created_at: datetime
    rejected_reason: str | None = None
    rejected_flag: bool = False

    def reject(self, reason: str) -> OrderRequest:
        if not reason.strip():
            raise ValueError("rejected reason must be non-empty")
        if self.status == OrderRequestStatus.REJECTED:
            raise OrderRequestAlreadyRejectedError(
                f"order request {self.order_request_id} is already rejected"
            )
        return replace(
            self,
            status=OrderRequestStatus.REJECTED,
            rejected_reason=reason,
            rejected_flag=True,
        )

    def to_announcement(self) -> Announcement:
        return Announcement(
            order_request_id=self.order_request_id,
            order_id=self.order_id,
            order_request_number=self.request_number,
            created_at=self.created_at,
            rejected_reason=self.rejected_reason,
            item_names=[item.name for item in self.items],
        )


@dataclass(frozen=True)
class Announcement:
    order_request_id: OrderRequestId
    order_id: OrderId
    order_request_number: int
    created_at: datetime
    rejected_reason: str | None
    item_names: list[str]


class OrderRequestAlreadyRejectedError(Exception):
    pass
