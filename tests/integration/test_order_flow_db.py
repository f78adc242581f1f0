from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tableside.api.main import app
from tableside.application.use_cases.order_page import encode_order_id

pytestmark = pytest.mark.integration


def test_order_lifecycle_is_persisted() -> None:
    with TestClient(app) as client:
        create_response = client.post("/v1/tables/tbl_002/orders", json={"customerName": "Alice"})
        assert create_response.status_code == 201
        order_id = create_response.json()["orderId"]
        assert create_response.json()["status"] == "PENDING"

        active = client.get("/v1/orders/active", params={"tableId": "tbl_002"})
        assert active.json()["orderId"] == order_id

        confirm_response = client.post(f"/v1/orders/{order_id}/confirm")
        assert confirm_response.status_code == 200
        assert confirm_response.json()["status"] == "ORDERED"

        complete_response = client.patch(f"/v1/orders/{order_id}", json={"status": "COMPLETED"})
        assert complete_response.status_code == 200
        assert complete_response.json()["status"] == "COMPLETED"

        get_response = client.get(f"/v1/orders/{order_id}")
        assert get_response.json()["status"] == "COMPLETED"
        assert get_response.json()["table"]["restaurant"]["restaurantId"] == "rst_001"

        active_after = client.get("/v1/orders/active", params={"orderId": order_id})
        assert active_after.json() is None

        history = client.get("/v1/tables/tbl_002/orders/completed").json()["orders"]
        assert order_id in [order["orderId"] for order in history]


def test_rejected_request_is_announced_once() -> None:
    with TestClient(app) as client:
        reject_response = client.post(
            "/v1/order-requests/orq_seed_001/reject",
            json={"reason": "sold out"},
        )
        assert reject_response.status_code == 200

        announcements = client.get("/v1/orders/ord_seed_001/announcements").json()
        assert [item["orderItems"] for item in announcements["announcements"]] == [
            ["Margherita Pizza"]
        ]

        shown = [item["orderRequestId"] for item in announcements["announcements"]]
        batch = {"rejectedFlag": False, "orderRequestIds": shown}
        first = client.patch("/v1/orders/ord_seed_001/requests", json=batch)
        second = client.patch("/v1/orders/ord_seed_001/requests", json=batch)
        assert first.json() == {"count": 1}
        assert second.json() == {"count": 0}

        again = client.get("/v1/orders/ord_seed_001/announcements").json()
        assert again["announcements"] == []


def test_order_page_props_for_seeded_order() -> None:
    with TestClient(app) as client:
        props = client.get(f"/v1/pages/orders/{encode_order_id('ord_seed_001')}").json()

    assert props["orderId"] == "ord_seed_001"
    assert props["fallback"]["/v1/orders/ord_seed_001"]["table"]["number"] == 1
