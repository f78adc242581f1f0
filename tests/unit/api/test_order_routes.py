from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

import tableside.api.dependencies as dependencies
from fakes import FakeOrderRequestRepository, make_order, make_order_request
from tableside.api.main import app
from tableside.application.errors import StoreError
from tableside.application.use_cases.context import TraceContext
from tableside.domain.order.entities import OrderStatus


@pytest.fixture
def wired(monkeypatch, table_repository, order_repository, publisher):
    order_request_repository = FakeOrderRequestRepository(
        [
            make_order_request("orq_001", 1),
            make_order_request("orq_002", 2, rejected_reason="sold out", rejected_flag=True),
        ]
    )
    monkeypatch.setattr(dependencies, "table_repository", lambda: table_repository)
    monkeypatch.setattr(dependencies, "order_repository", lambda: order_repository)
    monkeypatch.setattr(dependencies, "order_request_repository", lambda: order_request_repository)
    monkeypatch.setattr(dependencies, "event_publisher", lambda: publisher)
    monkeypatch.setattr(
        dependencies,
        "trace_context",
        lambda: TraceContext(trace_id=None, request_id=None),
    )
    return order_repository, order_request_repository


@pytest.fixture
def client(wired) -> TestClient:
    return TestClient(app)


def test_create_order_for_named_customer(client: TestClient) -> None:
    response = client.post("/v1/tables/tbl_001/orders", json={"customerName": "Alice"})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["customerName"] == "Alice"


def test_create_order_without_body(client: TestClient) -> None:
    response = client.post("/v1/tables/tbl_002/orders")

    assert response.status_code == 201
    assert response.json()["status"] == "ORDERED"


def test_create_order_on_reserved_table_uses_error_envelope(client: TestClient) -> None:
    response = client.post(
        "/v1/tables/tbl_004/orders",
        json={},
        headers={"X-Request-Id": "req-abc"},
    )

    assert response.status_code == 400
    assert response.headers["X-Request-Id"] == "req-abc"
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["requestId"] == "req-abc"


def test_get_order_and_missing_order(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order())

    found = client.get("/v1/orders/order123")
    missing = client.get("/v1/orders/nope")

    assert found.status_code == 200
    assert found.json()["table"]["number"] == 1
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"


def test_active_order_lookup(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order())

    by_table = client.get("/v1/orders/active", params={"tableId": "tbl_001"})
    by_both = client.get("/v1/tables/tbl_001/orders/active")
    without_keys = client.get("/v1/orders/active")

    assert by_table.json()["orderId"] == "order123"
    assert by_both.json()["orderId"] == "order123"
    assert without_keys.status_code == 200
    assert without_keys.json() is None


def test_staff_lifecycle_endpoints(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order(status=OrderStatus.PENDING))

    confirmed = client.post("/v1/orders/order123/confirm")
    completed = client.post("/v1/orders/order123/complete")
    reopened = client.post("/v1/orders/order123/confirm")

    assert confirmed.json()["status"] == "ORDERED"
    assert completed.json()["status"] == "COMPLETED"
    assert reopened.status_code == 409
    assert reopened.json()["error"]["code"] == "INVALID_ORDER_TRANSITION"
    assert client.get("/v1/orders/active", params={"orderId": "order123"}).json() is None


def test_patch_order_rejects_null_and_identity_fields(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order())

    null_status = client.patch("/v1/orders/order123", json={"status": None})
    identity = client.patch("/v1/orders/order123", json={"tableId": "tbl_002"})
    renamed = client.patch("/v1/orders/order123", json={"customerName": "Bob"})

    assert null_status.status_code == 400
    assert null_status.json()["error"]["message"] == "Failed to update order. Please try again later"
    assert identity.status_code == 400
    assert renamed.status_code == 200
    assert renamed.json()["customerName"] == "Bob"


def test_table_order_history(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order("ord_1", status=OrderStatus.COMPLETED))

    completed = client.get("/v1/tables/tbl_001/orders/completed")
    invalid = client.get("/v1/tables/tbl_001/orders", params={"status": "LOST"})

    assert [order["orderId"] for order in completed.json()["orders"]] == ["ord_1"]
    assert invalid.status_code == 400


def test_announcements_and_batch_clear(client: TestClient) -> None:
    announcements = client.get("/v1/orders/order123/announcements").json()["announcements"]
    first = client.patch("/v1/orders/order123/requests", json={"rejectedFlag": False})
    second = client.patch("/v1/orders/order123/requests", json={"rejectedFlag": False})
    after = client.get("/v1/orders/order123/announcements").json()["announcements"]

    assert [item["orderRequestNumber"] for item in announcements] == [2]
    assert first.json() == {"count": 1}
    assert second.json() == {"count": 0}
    assert after == []


def test_batch_clear_limited_to_named_requests(client: TestClient, wired) -> None:
    _, order_request_repository = wired
    order_request_repository.update(
        make_order_request("orq_003", 3, rejected_reason="out of stock", rejected_flag=True)
    )

    response = client.patch(
        "/v1/orders/order123/requests",
        json={"rejectedFlag": False, "orderRequestIds": ["orq_002"]},
    )
    remaining = client.get("/v1/orders/order123/announcements").json()["announcements"]

    assert response.json() == {"count": 1}
    assert [item["orderRequestId"] for item in remaining] == ["orq_003"]


def test_clear_requires_a_false_flag(client: TestClient) -> None:
    missing = client.patch("/v1/orders/order123/requests", json={})
    truthy = client.patch("/v1/orders/order123/requests", json={"rejectedFlag": True})

    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "INVALID_REQUEST"
    assert truthy.status_code == 400
    assert truthy.json()["error"]["code"] == "VALIDATION_ERROR"


def test_reject_order_request(client: TestClient, wired) -> None:
    order_repository, order_request_repository = wired
    order_repository.add(make_order())

    response = client.post("/v1/order-requests/orq_001/reject", json={"reason": "sold out"})

    assert response.status_code == 200
    assert response.json()["rejectedFlag"] is True
    assert len(order_request_repository.list_flagged("order123")) == 2


def test_order_page_props(client: TestClient, wired) -> None:
    order_repository, _ = wired
    order_repository.add(make_order())

    found = client.get("/v1/pages/orders/b3JkZXIxMjM=").json()
    missing = client.get("/v1/pages/orders/bm9wZQ==").json()

    assert found["orderId"] == "order123"
    assert found["fallback"]["/v1/orders/order123"]["status"] == "ORDERED"
    assert missing["notFound"] is True


def test_store_failure_maps_to_503(monkeypatch, client: TestClient) -> None:
    class FailingRepository:
        def get_detail(self, order_id):
            raise StoreError("Failed to access the order store. Please try again later")

    monkeypatch.setattr(dependencies, "order_repository", lambda: FailingRepository())

    response = client.get("/v1/orders/order123")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "STORE_UNAVAILABLE"
