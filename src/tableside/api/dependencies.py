from __future__ import annotations

from tableside.api.middleware.request_id import get_request_id
from tableside.application.ports.publisher import EventPublisher
from tableside.application.ports.repositories import (
    OrderRepository,
    OrderRequestRepository,
    TableRepository,
)
from tableside.application.use_cases.context import TraceContext
from tableside.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from tableside.infrastructure.db.repositories.order_request_repo import (
    SqlAlchemyOrderRequestRepository,
)
from tableside.infrastructure.db.repositories.table_repo import SqlAlchemyTableRepository
from tableside.infrastructure.messaging.redis_publisher import RedisEventPublisher
from tableside.infrastructure.observability.otel import current_trace_id


def order_repository() -> OrderRepository:
    return SqlAlchemyOrderRepository()


def order_request_repository() -> OrderRequestRepository:
    return SqlAlchemyOrderRequestRepository()


def table_repository() -> TableRepository:
    return SqlAlchemyTableRepository()


def event_publisher() -> EventPublisher:
    return RedisEventPublisher()


def trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())
