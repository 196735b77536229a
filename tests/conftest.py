"""Shared fixtures: in-memory SQLite DB with the payment tables."""

from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal

import pytest
import structlog
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base, PaymentItems, Payments
from payexport.services.store import PaymentRecord

SeedPayment = Callable[..., Payments]


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    eng: Engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine: Engine) -> Generator[Session, None, None]:
    factory: sessionmaker[Session] = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    sess: Session = factory()
    yield sess
    sess.rollback()
    sess.close()


def add_payment(session: Session, **overrides: object) -> Payments:
    products: list[tuple[int, int | None]] = list(overrides.pop("products", []))  # type: ignore[arg-type]
    defaults: dict[str, object] = {
        "id": 1,
        "customer_id": 101,
        "date": date(2023, 11, 15),
        "status": "complete",
        "total": Decimal("49.00"),
        "gateway": "stripe",
        "name": "Ada Lovelace",
        "email": "ada@analytical.io",
    }
    defaults.update(overrides)
    payment: Payments = Payments(**defaults)
    for product_id, price_id in products:
        payment.items.append(PaymentItems(product_id=product_id, price_id=price_id))
    session.add(payment)
    session.flush()
    return payment


@pytest.fixture()
def seed_payment(session: Session) -> SeedPayment:
    def _seed(**overrides: object) -> Payments:
        return add_payment(session, **overrides)

    return _seed


def make_record(**overrides: object) -> PaymentRecord:
    defaults: dict[str, object] = {
        "id": 1,
        "customer_id": 101,
        "date": date(2023, 11, 15),
        "status": "complete",
        "total": Decimal("49.00"),
        "gateway": "stripe",
    }
    defaults.update(overrides)
    return PaymentRecord(**defaults)  # type: ignore[arg-type]
