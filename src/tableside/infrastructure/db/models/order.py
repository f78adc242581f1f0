from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tableside.infrastructure.db.models.restaurant import Base, RestaurantTableModel


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    table_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("restaurant_tables.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False, server_default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    table: Mapped[RestaurantTableModel] = relationship()
    requests: Mapped[list["OrderRequestModel"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderRequestModel.request_number",
    )

    __table_args__ = (
        Index("ix_orders_table_created_at_desc", "table_id", "created_at"),
        Index("ix_orders_status", "status"),
    )


class OrderRequestModel(Base):
    __tablename__ = "order_requests"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    request_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    rejected_reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    rejected_flag: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    order: Mapped[OrderModel] = relationship(back_populates="requests")
    items: Mapped[list["OrderRequestItemModel"]] = relationship(
        back_populates="order_request",
        cascade="all, delete-orphan",
        order_by="OrderRequestItemModel.id",
    )


class OrderRequestItemModel(Base):
    __tablename__ = "order_request_items"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    order_request_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("order_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    menu_item_id: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    order_request: Mapped[OrderRequestModel] = relationship(back_populates="items")
