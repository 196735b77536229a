"""SQLAlchemy ORM models for the payment ledger."""

import datetime as dt
from decimal import Decimal
from typing import Any

from sqlalchemy import ForeignKey, MetaData, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=convention)

    def to_dict(self) -> dict[str, Any]:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class Payments(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int] = mapped_column(nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    total: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    gateway: Mapped[str] = mapped_column(String(64), nullable=False, default="manual")
    name: Mapped[str | None] = mapped_column()
    note: Mapped[str | None] = mapped_column()
    address: Mapped[str | None] = mapped_column()
    email: Mapped[str | None] = mapped_column(index=True)
    phone: Mapped[str | None] = mapped_column()

    items = relationship(
        "PaymentItems",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaymentItems.id",
    )


class PaymentItems(Base):
    __tablename__ = "payment_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    payment_id: Mapped[int] = mapped_column(
        ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(nullable=False)
    price_id: Mapped[int | None] = mapped_column()

    payment = relationship("Payments", back_populates="items")
