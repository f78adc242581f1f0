from __future__ import annotations

API_PREFIX = "/v1"


def order_endpoint(order_id: str) -> str:
    return f"{API_PREFIX}/orders/{order_id}"


def order_requests_endpoint(order_id: str) -> str:
    return f"{API_PREFIX}/orders/{order_id}/requests"


def announcements_endpoint(order_id: str) -> str:
    return f"{API_PREFIX}/orders/{order_id}/announcements"


def order_page_endpoint(encoded_order_id: str) -> str:
    return f"{API_PREFIX}/pages/orders/{encoded_order_id}"
