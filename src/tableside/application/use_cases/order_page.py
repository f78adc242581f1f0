from __future__ import annotations

import base64
import binascii
import logging

from tableside.application.dto.responses import OrderPageResponse
from tableside.application.endpoints import order_endpoint
from tableside.application.errors import ApiError, NotFoundError
from tableside.application.mappers.converters import convert_dates_to_iso_string
from tableside.application.mappers.order_mapper import to_order_detail_response
from tableside.application.ports.repositories import OrderRepository
from tableside.domain.common.ids import OrderId

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later"


def decode_order_id(encoded_order_id: str | None) -> OrderId:
    """Decode the base64 order id carried by a table link.

    Anything that does not decode to a non-empty utf-8 string is treated as
    an unknown order.
    """
    if not encoded_order_id or not encoded_order_id.strip():
        raise NotFoundError("Not found restaurant table")

    raw = encoded_order_id.strip()
    raw += "=" * (-len(raw) % 4)
    try:
        decoded = base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise NotFoundError("Not found restaurant table") from exc

    if not decoded.strip() or not decoded.isprintable():
        raise NotFoundError("Not found restaurant table")
    return OrderId(decoded.strip())


def encode_order_id(order_id: str) -> str:
    return base64.b64encode(order_id.encode("utf-8")).decode("ascii")


class LoadOrderPage:
    """Builds the initial snapshot the order page is rendered from.

    Never raises: a missing order yields ``notFound`` and any failure is
    reported through ``initErrMsg`` so the client can redirect.
    """

    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(self, encoded_order_id: str | None) -> OrderPageResponse:
        try:
            order_id = decode_order_id(encoded_order_id)
            detail = self._order_repository.get_detail(order_id)
            if detail is None:
                return OrderPageResponse(fallback={}, notFound=True)

            snapshot = convert_dates_to_iso_string(to_order_detail_response(detail).model_dump())
            return OrderPageResponse(
                fallback={order_endpoint(str(detail.order.order_id)): snapshot},
                orderId=str(detail.order.order_id),
            )
        except NotFoundError:
            return OrderPageResponse(fallback={}, notFound=True)
        except ApiError as exc:
            logger.exception("order_page_load_failed")
            return OrderPageResponse(fallback={}, initErrMsg=exc.message)
        except Exception:
            logger.exception("order_page_load_failed")
            return OrderPageResponse(fallback={}, initErrMsg=UNEXPECTED_ERROR_MESSAGE)
