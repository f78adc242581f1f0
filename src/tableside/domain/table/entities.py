from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from enum import Enum

from tableside.domain.common.ids import RestaurantId, TableId


class TableStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    name: str
    start_time: time | None
    end_time: time | None
    last_order: time | None

    def is_open_at(self, moment: time) -> bool:
        if self.start_time is None or self.end_time is None:
            return True
        return _within(moment, self.start_time, self.end_time)

    def accepts_orders_at(self, moment: time) -> bool:
        if not self.is_open_at(moment):
            return False
        if self.last_order is None or self.start_time is None:
            return True
        return _within(moment, self.start_time, self.last_order)

    def ensure_accepting_orders(self, moment: time) -> None:
        if not self.accepts_orders_at(moment):
            raise RestaurantClosedError(
                f"restaurant {self.restaurant_id} is not accepting orders at {moment.strftime('%H:%M')}"
            )


@dataclass(frozen=True)
class Table:
    table_id: TableId
    restaurant_id: RestaurantId
    number: int
    table_type: str
    status: TableStatus

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError("number must be >= 1")

    def ensure_not_reserved(self) -> None:
        if self.status == TableStatus.RESERVED:
            raise TableReservedError(f"table {self.table_id} is reserved")


def _within(moment: time, start: time, end: time) -> bool:
    if start == end:
        return True
    # windows that cross midnight have end < start
    if start < end:
        return start <= moment < end
    return moment >= start or moment < end


class TableReservedError(Exception):
    pass


class RestaurantClosedError(Exception):
    pass
