from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class CreateOrderRequest(CamelBaseModel):
    customer_name: str | None = None


class UpdateOrderRequest(CamelBaseModel):
    """Partial update; only fields present in the payload are applied."""

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        extra="allow",
    )

    status: str | None = None
    customer_name: str | None = None


class PatchOrderRequestsRequest(CamelBaseModel):
    """Batch flag update; without ids every request of the order is covered."""

    rejected_flag: bool
    order_request_ids: list[str] | None = None


class RejectOrderRequestRequest(CamelBaseModel):
    reason: str = Field(min_length=1)
