from __future__ import annotations

from datetime import datetime, time, timezone

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from tableside.infrastructure.db.models.order import (
    OrderModel,
    OrderRequestItemModel,
    OrderRequestModel,
)
from tableside.infrastructure.db.models.restaurant import RestaurantModel, RestaurantTableModel
from tableside.infrastructure.db.session import get_engine


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {
        "restaurants",
        "restaurant_tables",
        "orders",
        "order_requests",
        "order_request_items",
    }
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        restaurant = {
            "id": "rst_001",
            "name": "Tableside Test Kitchen",
            "start_time": time(0, 0),
            "end_time": time(0, 0),
            "last_order": None,
        }
        session.execute(
            insert(RestaurantModel)
            .values(**restaurant)
            .on_conflict_do_update(
                index_elements=[RestaurantModel.id],
                set_={key: value for key, value in restaurant.items() if key != "id"},
            )
        )

        tables = [
            {"id": "tbl_001", "number": 1, "table_type": "TABLE", "status": "OCCUPIED"},
            {"id": "tbl_002", "number": 2, "table_type": "TABLE", "status": "AVAILABLE"},
            {"id": "tbl_003", "number": 3, "table_type": "COUNTER", "status": "AVAILABLE"},
            {"id": "tbl_004", "number": 4, "table_type": "ROOM", "status": "RESERVED"},
        ]
        for table in tables:
            session.execute(
                insert(RestaurantTableModel)
                .values(restaurant_id="rst_001", **table)
                .on_conflict_do_update(
                    index_elements=[RestaurantTableModel.id],
                    set_={
                        "restaurant_id": "rst_001",
                        "number": table["number"],
                        "table_type": table["table_type"],
                        "status": table["status"],
                    },
                )
            )

        created_at = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        session.execute(
            insert(OrderModel)
            .values(
                id="ord_seed_001",
                table_id="tbl_001",
                status="ORDERED",
                customer_name="",
                created_at=created_at,
            )
            .on_conflict_do_update(
                index_elements=[OrderModel.id],
                set_={"status": "ORDERED", "table_id": "tbl_001"},
            )
        )
        session.execute(
            insert(OrderRequestModel)
            .values(
                id="orq_seed_001",
                order_id="ord_seed_001",
                request_number=1,
                status="PLACED",
                rejected_reason=None,
                rejected_flag=False,
                created_at=created_at,
            )
            .on_conflict_do_update(
                index_elements=[OrderRequestModel.id],
                set_={"status": "PLACED", "rejected_reason": None, "rejected_flag": False},
            )
        )
        session.execute(
            insert(OrderRequestItemModel)
            .values(
                id="ori_seed_001",
                order_request_id="orq_seed_001",
                menu_item_id="itm_001",
                name="Margherita Pizza",
                quantity=1,
            )
            .on_conflict_do_nothing(index_elements=[OrderRequestItemModel.id])
        )

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
