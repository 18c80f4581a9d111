"""Seed the customers table with demo accounts."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from .core.database import SessionLocal, init_db
from .core.logging import setup_logging
from .models import Customer

logger = logging.getLogger(__name__)


def seed_customers(session: Session, *, count: int = 10) -> int:
    """Insert ``customer {i}`` accounts that do not exist yet; return how many were added."""

    emails = [f"customer{i}@gmail.com" for i in range(count)]
    existing = set(session.execute(select(Customer.email).where(Customer.email.in_(emails))).scalars())

    added = 0
    for i, email in enumerate(emails):
        if email in existing:
            continue
        session.add(Customer(name=f"customer {i}", email=email))
        added += 1
    session.flush()
    return added


def main() -> None:
    setup_logging()
    init_db()
    session = SessionLocal()
    try:
        added = seed_customers(session)
        session.commit()
        logger.info("seeded %d customers", added)
    except Exception:
        session.rollback()
        logger.exception("customer seeding failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
