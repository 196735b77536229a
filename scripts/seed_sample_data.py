"""Seed sample payments for local testing.

Idempotent: skips seeding if payments already exist.
Run: python scripts/seed_sample_data.py
"""

import sys
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Ensure project root is on sys.path so 'config' and 'db' resolve
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import Session  # noqa: E402

from db.connection import get_engine, get_session  # noqa: E402
from db.enums import PaymentStatus  # noqa: E402
from db.models import Base, PaymentItems, Payments  # noqa: E402


def _day(days_ago: int = 0) -> date:
    return (datetime.now(UTC) - timedelta(days=days_ago)).date()


CUSTOMERS = [
    (101, "Ada Lovelace", "ada@analytical.io", "+44 20 7946 0001", "12 St James's Sq, London"),
    (102, "Grace Hopper", "grace@cobol.dev", "+1 202 555 0102", "1 Navy Yard, Arlington"),
    (103, "Alan Turing", "alan@bletchley.uk", "+44 1908 640404", "Bletchley Park, Milton Keynes"),
]
GATEWAYS = ["stripe", "paypal", "manual"]
STATUSES = [
    PaymentStatus.COMPLETE,
    PaymentStatus.COMPLETE,
    PaymentStatus.REFUNDED,
    PaymentStatus.PENDING,
    PaymentStatus.FAILED,
]
PRODUCTS = [(11, 1), (11, 2), (12, None), (13, 3)]


def seed(session: Session) -> None:
    existing = session.query(Payments).first()
    if existing:
        print("Sample data already seeded, skipping.")
        return

    for i in range(40):
        customer_id, name, email, phone, address = CUSTOMERS[i % len(CUSTOMERS)]
        product_id, price_id = PRODUCTS[i % len(PRODUCTS)]
        payment = Payments(
            id=1000 + i,
            customer_id=customer_id,
            date=_day(i * 3),
            status=STATUSES[i % len(STATUSES)].value,
            total=Decimal("9.99") * (i % 7 + 1),
            gateway=GATEWAYS[i % len(GATEWAYS)],
            name=name,
            note="Renewal" if i % 4 == 0 else None,
            address=address,
            email=email,
            phone=phone,
        )
        payment.items.append(PaymentItems(product_id=product_id, price_id=price_id))
        session.add(payment)

    session.flush()
    print("  40 payments across 3 customers")
    print("Done.")


if __name__ == "__main__":
    Base.metadata.create_all(get_engine())
    with get_session() as session:
        seed(session)
