"""Compose a validated FilterSet into a store-agnostic QuerySpec."""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

import structlog

from db.enums import AmountOperator, PaymentStatus
from payexport.services.filters import (
    CustomerByEmail,
    CustomerById,
    ExplicitRange,
    FilterSet,
    RelativeWindow,
)
from payexport.services.periods import resolve_named_period

logger = structlog.get_logger(__name__)

DEFAULT_MIN_DATE: date = date(1970, 1, 1)


@dataclass(frozen=True)
class AmountPredicate:
    operator: AmountOperator
    amount: Decimal

    def matches(self, total: Decimal) -> bool:
        if self.operator is AmountOperator.GREATER_THAN:
            return total > self.amount
        return total < self.amount


@dataclass(frozen=True)
class QuerySpec:
    """Fully resolved request; ``end=None`` means no upper date bound."""

    start: date | None = None
    end: date | None = None
    amount: AmountPredicate | None = None
    statuses: frozenset[PaymentStatus] | None = None
    customer_id: int | None = None
    customer_email: str | None = None
    product_ids: frozenset[int] | None = None
    limit: int | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "amount": (
                {"compare": self.amount.operator.value, "value": str(self.amount.amount)}
                if self.amount
                else None
            ),
            "statuses": sorted(s.value for s in self.statuses) if self.statuses else None,
            "customer_id": self.customer_id,
            "customer_email": self.customer_email,
            "product_ids": sorted(self.product_ids) if self.product_ids else None,
            "limit": self.limit,
        }


def _resolve_dates(
    filters: FilterSet, today: date, min_date: date
) -> tuple[date | None, date | None]:
    selector = filters.date_selector
    if selector is None:
        return None, None

    if isinstance(selector, RelativeWindow):
        if selector.days is not None:
            return today - timedelta(days=selector.days), today
        if selector.period is not None:
            return resolve_named_period(selector.period, today)
        raise ValueError("Relative window has neither days nor a period")

    if isinstance(selector, ExplicitRange):
        if selector.start is None and selector.end is not None:
            # Never leave the lower bound to the store's defaults.
            return min_date, selector.end
        return selector.start, selector.end

    raise TypeError(f"Unsupported date selector: {selector!r}")


def build_query(
    filters: FilterSet,
    today: date,
    min_date: date = DEFAULT_MIN_DATE,
) -> QuerySpec:
    start, end = _resolve_dates(filters, today, min_date)

    customer_id: int | None = None
    customer_email: str | None = None
    if isinstance(filters.customer, CustomerById):
        customer_id = filters.customer.customer_id
    elif isinstance(filters.customer, CustomerByEmail):
        customer_email = filters.customer.email

    spec = QuerySpec(
        start=start,
        end=end,
        amount=(
            AmountPredicate(filters.amount.operator, filters.amount.amount)
            if filters.amount
            else None
        ),
        statuses=frozenset(filters.statuses) if filters.statuses else None,
        customer_id=customer_id,
        customer_email=customer_email,
        product_ids=frozenset(filters.products) if filters.products else None,
        limit=None,
    )
    logger.debug("query_built", **spec.as_dict())
    return spec
