from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class RestaurantResponse(BaseModel):
    restaurantId: str
    name: str
    startTime: str | None = None
    endTime: str | None = None
    lastOrder: str | None = None


class TableResponse(BaseModel):
    tableId: str
    restaurantId: str
    number: int
    tableType: str
    status: str
    restaurant: RestaurantResponse | None = None


class OrderResponse(BaseModel):
    orderId: str
    tableId: str
    status: str
    customerName: str
    createdAt: datetime
    updatedAt: datetime | None = None


class OrderDetailResponse(OrderResponse):
    table: TableResponse


class OrdersResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class AnnouncementResponse(BaseModel):
    orderRequestId: str
    orderId: str
    orderRequestNumber: int
    createdAt: datetime
    rejectedReason: str | None = None
    orderItems: list[str] = Field(default_factory=list)


class AnnouncementsResponse(BaseModel):
    announcements: list[AnnouncementResponse] = Field(default_factory=list)


class BatchPayloadResponse(BaseModel):
    count: int


class OrderRequestResponse(BaseModel):
    orderRequestId: str
    orderId: str
    requestNumber: int
    status: str
    rejectedReason: str | None = None
    rejectedFlag: bool
    createdAt: datetime


class OrderPageResponse(BaseModel):
    fallback: dict[str, Any] = Field(default_factory=dict)
    orderId: str | None = None
    initErrMsg: str | None = None
    notFound: bool | None = None
