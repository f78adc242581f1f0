from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from fakes import (
    FakeOrderRepository,
    FakeOrderRequestRepository,
    FakePublisher,
    FakeTableRepository,
    make_restaurant,
    make_table,
)
from tableside.application.use_cases.context import TraceContext
from tableside.domain.table.entities import TableStatus


@pytest.fixture
def table_repository() -> FakeTableRepository:
    return FakeTableRepository(
        tables=[
            make_table("tbl_001", TableStatus.OCCUPIED, 1),
            make_table("tbl_002", TableStatus.AVAILABLE, 2),
            make_table("tbl_004", TableStatus.RESERVED, 4),
        ],
        restaurants=[make_restaurant()],
    )


@pytest.fixture
def order_repository(table_repository: FakeTableRepository) -> FakeOrderRepository:
    return FakeOrderRepository(table_repository)


@pytest.fixture
def order_request_repository() -> FakeOrderRequestRepository:
    return FakeOrderRequestRepository()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def trace_ctx() -> TraceContext:
    return TraceContext(trace_id="trace-1", request_id="req-1")
