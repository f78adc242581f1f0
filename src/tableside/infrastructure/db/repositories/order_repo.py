from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy import Engine, select, update
from sqlalchemy.orm import Session, joinedload

from tableside.application.ports.repositories import OrderRepository
from tableside.domain.common.ids import OrderId, TableId
from tableside.domain.order.entities import Order, OrderDetail, OrderStatus
from tableside.infrastructure.db.models.order import OrderModel
from tableside.infrastructure.db.models.restaurant import RestaurantTableModel
from tableside.infrastructure.db.repositories.table_repo import (
    restaurant_to_domain,
    table_to_domain,
)
from tableside.infrastructure.db.session import get_engine, store_operation

_COLUMNS_BY_FIELD = {
    "status": "status",
    "customer_name": "customer_name",
    "updated_at": "updated_at",
}


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        model = OrderModel(
            id=str(order.order_id),
            table_id=str(order.table_id),
            status=order.status.value,
            customer_name=order.customer_name,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        with store_operation("createOrder"), Session(self._engine) as session:
            session.add(model)
            session.commit()

    def get(self, order_id: OrderId) -> Order | None:
        statement = select(OrderModel).where(OrderModel.id == str(order_id)).limit(1)
        with store_operation("getOrderById"), Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return _to_domain(model)

    def get_detail(self, order_id: OrderId) -> OrderDetail | None:
        statement = _detail_query().where(OrderModel.id == str(order_id)).limit(1)
        with store_operation("getOrderDetailById"), Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
            if model is None:
                return None
            return _to_detail(model)

    def find_latest(
        self,
        *,
        order_id: OrderId | None = None,
        table_id: TableId | None = None,
        statuses: frozenset[OrderStatus] | None = None,
    ) -> OrderDetail | None:
        statement = _detail_query()
        if order_id is not None:
            statement = statement.where(OrderModel.id == str(order_id))
        if table_id is not None:
            statement = statement.where(OrderModel.table_id == str(table_id))
        if statuses:
            statement = statement.where(
                OrderModel.status.in_(sorted(status.value for status in statuses))
            )
        statement = statement.order_by(OrderModel.created_at.desc(), OrderModel.id.desc()).limit(1)

        with store_operation("getActiveOrder"), Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
            if model is None:
                return None
            return _to_detail(model)

    def list_for_table(
        self,
        table_id: TableId,
        status: OrderStatus | None = None,
    ) -> list[Order]:
        statement = select(OrderModel).where(OrderModel.table_id == str(table_id))
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        statement = statement.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())

        with store_operation("getOrdersByTableId"), Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
        return [_to_domain(model) for model in models]

    def update_fields(self, order_id: OrderId, fields: dict[str, Any]) -> Order | None:
        values = {
            _COLUMNS_BY_FIELD[name]: value.value if isinstance(value, Enum) else value
            for name, value in fields.items()
        }
        statement = update(OrderModel).where(OrderModel.id == str(order_id)).values(**values)
        with store_operation("updateOrderById"), Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                return None
            session.commit()

        return self.get(order_id)


def _detail_query():
    return select(OrderModel).options(
        joinedload(OrderModel.table).joinedload(RestaurantTableModel.restaurant)
    )


def _aware(value: datetime | None) -> datetime | None:
    # sqlite drops tzinfo; postgres columns are timezone aware
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(model: OrderModel) -> Order:
    return Order(
        order_id=OrderId(model.id),
        table_id=TableId(model.table_id),
        status=OrderStatus(model.status),
        customer_name=model.customer_name or "",
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def _to_detail(model: OrderModel) -> OrderDetail:
    return OrderDetail(
        order=_to_domain(model),
        table=table_to_domain(model.table),
        restaurant=restaurant_to_domain(model.table.restaurant),
    )
