from __future__ import annotations

from enum import Enum
from typing import assert_never

from tableside.domain.order.entities import OrderStatus
from tableside.domain.table.entities import TableStatus


class Disposition(str, Enum):
    LIVE = "LIVE"
    RESTRICTED = "RESTRICTED"


def _table_allows_ordering(table_status: TableStatus) -> bool:
    match table_status:
        case TableStatus.RESERVED:
            return False
        case TableStatus.AVAILABLE | TableStatus.OCCUPIED:
            return True
        case _:
            assert_never(table_status)


def _order_allows_ordering(order_status: OrderStatus) -> bool:
    match order_status:
        case OrderStatus.ORDERED:
            return True
        case OrderStatus.PENDING | OrderStatus.COMPLETED | OrderStatus.CANCELLED:
            # PENDING is still waiting for staff confirmation
            return False
        case _:
            assert_never(order_status)


def decide_disposition(table_status: TableStatus, order_status: OrderStatus) -> Disposition:
    if _table_allows_ordering(table_status) and _order_allows_ordering(order_status):
        return Disposition.LIVE
    return Disposition.RESTRICTED
