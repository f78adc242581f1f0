from __future__ import annotations

from datetime import timezone

from sqlalchemy import Engine, select, update
from sqlalchemy.orm import Session, selectinload

from tableside.application.ports.repositories import OrderRequestRepository
from tableside.domain.common.ids import MenuItemId, OrderId, OrderRequestId
from tableside.domain.order.requests import OrderRequest, OrderRequestItem, OrderRequestStatus
from tableside.infrastructure.db.models.order import OrderRequestModel
from tableside.infrastructure.db.session import get_engine, store_operation


class SqlAlchemyOrderRequestRepository(OrderRequestRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, order_request_id: OrderRequestId) -> OrderRequest | None:
        statement = (
            select(OrderRequestModel)
            .options(selectinload(OrderRequestModel.items))
            .where(OrderRequestModel.id == str(order_request_id))
        )
        with store_operation("getOrderRequestById"), Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            if model is None:
                return None
            return _to_domain(model)

    def update(self, order_request: OrderRequest) -> None:
        statement = (
            update(OrderRequestModel)
            .where(OrderRequestModel.id == str(order_request.order_request_id))
            .values(
                status=order_request.status.value,
                rejected_reason=order_request.rejected_reason,
                rejected_flag=order_request.rejected_flag,
            )
        )
        with store_operation("updateOrderRequestById"), Session(self._engine) as session:
            session.execute(statement)
            session.commit()

    def list_flagged(self, order_id: OrderId) -> list[OrderRequest]:
        statement = (
            select(OrderRequestModel)
            .options(selectinload(OrderRequestModel.items))
            .where(
                OrderRequestModel.order_id == str(order_id),
                OrderRequestModel.rejected_flag.is_(True),
            )
            .order_by(OrderRequestModel.request_number)
        )
        with store_operation("getAnnouncements"), Session(self._engine) as session:
            models = list(session.execute(statement).scalars().all())
            return [_to_domain(model) for model in models]

    def set_rejected_flag(
        self,
        order_id: OrderId,
        rejected_flag: bool,
        order_request_ids: list[OrderRequestId] | None = None,
    ) -> int:
        if order_request_ids is not None and not order_request_ids:
            return 0

        statement = update(OrderRequestModel).where(
            OrderRequestModel.order_id == str(order_id),
            OrderRequestModel.rejected_flag.is_not(rejected_flag),
        )
        if order_request_ids is not None:
            statement = statement.where(
                OrderRequestModel.id.in_(sorted({str(value) for value in order_request_ids}))
            )
        statement = statement.values(rejected_flag=rejected_flag)

        with store_operation("updateOrderRequestsRejectedFlag"), Session(self._engine) as session:
            result = session.execute(statement)
            count = int(result.rowcount or 0)
            session.commit()
        return count


def _to_domain(model: OrderRequestModel) -> OrderRequest:
    created_at = model.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return OrderRequest(
        order_request_id=OrderRequestId(model.id),
        order_id=OrderId(model.order_id),
        request_number=model.request_number,
        status=OrderRequestStatus(model.status),
        items=[
            OrderRequestItem(
                menu_item_id=MenuItemId(item.menu_item_id),
                name=item.name,
                quantity=item.quantity,
            )
            for item in model.items
        ],
        created_at=created_at,
        rejected_reason=model.rejected_reason,
        rejected_flag=model.rejected_flag,
    )
