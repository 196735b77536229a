"""Record store adapters: execute a QuerySpec and return payment records."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

import structlog
from sqlalchemy import ColumnElement, Select, and_, exists, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from db.connection import get_session
from db.enums import AmountOperator
from db.models import PaymentItems, Payments
from payexport.services.errors import StoreError
from payexport.services.query import QuerySpec

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PaymentRecord:
    id: int
    customer_id: int
    date: date
    status: str
    total: Decimal
    gateway: str
    name: str | None = None
    note: str | None = None
    address: str | None = None
    email: str | None = None
    phone: str | None = None
    product_ids: tuple[int, ...] = ()
    price_ids: tuple[int, ...] = ()


class RecordStore(Protocol):
    def fetch(self, spec: QuerySpec) -> list[PaymentRecord]:
        """Return every record matching *spec*; raise StoreError on failure."""
        ...


def record_matches(spec: QuerySpec, record: PaymentRecord) -> bool:
    """Apply *spec* to a single record in memory."""
    if spec.start is not None and record.date < spec.start:
        return False
    if spec.end is not None and record.date > spec.end:
        return False
    if spec.amount is not None and not spec.amount.matches(record.total):
        return False
    if spec.statuses and record.status not in {s.value for s in spec.statuses}:
        return False
    if spec.customer_id is not None and record.customer_id != spec.customer_id:
        return False
    if spec.customer_email is not None:
        if (record.email or "").lower() != spec.customer_email.lower():
            return False
    if spec.product_ids:
        if spec.product_ids.isdisjoint(record.product_ids + record.price_ids):
            return False
    return True


class InMemoryPaymentStore:
    """Store over a fixed list of records."""

    def __init__(self, records: Iterable[PaymentRecord] = ()) -> None:
        self.records: list[PaymentRecord] = list(records)

    def fetch(self, spec: QuerySpec) -> list[PaymentRecord]:
        matched = [r for r in self.records if record_matches(spec, r)]
        matched.sort(key=lambda r: (r.date, r.id))
        if spec.limit is not None:
            matched = matched[: spec.limit]
        return matched


class SqlPaymentStore:
    """Store backed by the ``payments`` / ``payment_items`` tables.

    Without an explicit session, one is opened only when ``fetch`` runs.
    """

    def __init__(self, session: Session | None = None) -> None:
        self.session: Session | None = session

    def _conditions(self, spec: QuerySpec) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if spec.start is not None:
            conditions.append(Payments.date >= spec.start)
        if spec.end is not None:
            conditions.append(Payments.date <= spec.end)
        if spec.amount is not None:
            if spec.amount.operator is AmountOperator.GREATER_THAN:
                conditions.append(Payments.total > spec.amount.amount)
            else:
                conditions.append(Payments.total < spec.amount.amount)
        if spec.statuses:
            conditions.append(Payments.status.in_(sorted(s.value for s in spec.statuses)))
        if spec.customer_id is not None:
            conditions.append(Payments.customer_id == spec.customer_id)
        if spec.customer_email is not None:
            conditions.append(func.lower(Payments.email) == spec.customer_email.lower())
        if spec.product_ids:
            ids: list[int] = sorted(spec.product_ids)
            conditions.append(
                exists().where(
                    and_(
                        PaymentItems.payment_id == Payments.id,
                        or_(PaymentItems.product_id.in_(ids), PaymentItems.price_id.in_(ids)),
                    )
                )
            )
        return conditions

    def fetch(self, spec: QuerySpec) -> list[PaymentRecord]:
        stmt: Select[tuple[Payments]] = (
            select(Payments)
            .options(selectinload(Payments.items))
            .order_by(Payments.date, Payments.id)
        )
        conditions = self._conditions(spec)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        if spec.limit is not None:
            stmt = stmt.limit(spec.limit)

        try:
            if self.session is not None:
                records: list[PaymentRecord] = self._load(self.session, stmt)
            else:
                with get_session() as session:
                    records = self._load(session, stmt)
        except SQLAlchemyError as exc:
            logger.error("payment_query_failed", error=str(exc))
            raise StoreError(f"Payment query failed: {exc}") from exc

        logger.debug("payments_fetched", count=len(records))
        return records

    def _load(self, session: Session, stmt: Select[tuple[Payments]]) -> list[PaymentRecord]:
        return [_to_record(row) for row in session.scalars(stmt).all()]


def _to_record(row: Payments) -> PaymentRecord:
    return PaymentRecord(
        id=row.id,
        customer_id=row.customer_id,
        date=row.date,
        status=row.status,
        total=Decimal(str(row.total)),
        gateway=row.gateway,
        name=row.name,
        note=row.note,
        address=row.address,
        email=row.email,
        phone=row.phone,
        product_ids=tuple(item.product_id for item in row.items),
        price_ids=tuple(item.price_id for item in row.items if item.price_id is not None),
    )
