from __future__ import annotations

from datetime import time

from tableside.application.dto.responses import RestaurantResponse, TableResponse
from tableside.domain.table.entities import Restaurant, Table


def _format_time(value: time | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%H:%M")


def to_restaurant_response(restaurant: Restaurant) -> RestaurantResponse:
    return RestaurantResponse(
        restaurantId=str(restaurant.restaurant_id),
        name=restaurant.name,
        startTime=_format_time(restaurant.start_time),
        endTime=_format_time(restaurant.end_time),
        lastOrder=_format_time(restaurant.last_order),
    )


def to_table_response(table: Table, restaurant: Restaurant | None = None) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        restaurantId=str(table.restaurant_id),
        number=table.number,
        tableType=table.table_type,
        status=table.status.value,
        restaurant=to_restaurant_response(restaurant) if restaurant is not None else None,
    )
