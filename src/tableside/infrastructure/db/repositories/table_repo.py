from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from tableside.application.ports.repositories import TableRepository
from tableside.domain.common.ids import RestaurantId, TableId
from tableside.domain.table.entities import Restaurant, Table, TableStatus
from tableside.infrastructure.db.models.restaurant import RestaurantModel, RestaurantTableModel
from tableside.infrastructure.db.session import get_engine, store_operation


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, table_id: TableId) -> Table | None:
        statement = select(RestaurantTableModel).where(RestaurantTableModel.id == str(table_id))
        with store_operation("getTableById"), Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return table_to_domain(model)

    def get_restaurant(self, table: Table) -> Restaurant | None:
        statement = select(RestaurantModel).where(RestaurantModel.id == str(table.restaurant_id))
        with store_operation("getRestaurantById"), Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()

        if model is None:
            return None
        return restaurant_to_domain(model)


def table_to_domain(model: RestaurantTableModel) -> Table:
    return Table(
        table_id=TableId(model.id),
        restaurant_id=RestaurantId(model.restaurant_id),
        number=model.number,
        table_type=model.table_type,
        status=TableStatus(model.status),
    )


def restaurant_to_domain(model: RestaurantModel) -> Restaurant:
    return Restaurant(
        restaurant_id=RestaurantId(model.id),
        name=model.name,
        start_time=model.start_time,
        end_time=model.end_time,
        last_order=model.last_order,
    )
