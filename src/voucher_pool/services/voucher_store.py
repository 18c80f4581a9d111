"""Transactional persistence of customers, special offers and vouchers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Customer, SpecialOffer, Voucher
from ..utils.datetime import as_naive_utc, utcnow
from .exceptions import (
    AlreadyRedeemed,
    CustomerNotFound,
    Expired,
    OfferUpsertError,
    StorageError,
    VoucherNotFound,
)

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"fail to {action}: {exc}", original=exc) from exc


@contextmanager
def _transaction(session: Session, action: str) -> Iterator[Session]:
    """Commit everything done in the block, or roll all of it back.

    A failed rollback is reported as a ``StorageError`` that keeps both the
    original error and the rollback error.
    """

    try:
        yield session
        session.commit()
    except Exception as exc:
        try:
            session.rollback()
        except SQLAlchemyError as rollback_exc:
            logger.error("rollback of %s failed: %s (original error: %s)", action, rollback_exc, exc)
            raise StorageError(
                f"fail to rollback {action}: {rollback_exc}, original error: {exc}",
                original=exc,
                rollback_error=rollback_exc,
            ) from exc
        if isinstance(exc, SQLAlchemyError):
            logger.warning("%s rolled back: %s", action, exc)
            raise StorageError(f"fail to {action}: {exc}", original=exc) from exc
        raise


def _resolve_now(now: Optional[datetime]) -> datetime:
    return as_naive_utc(now) if now is not None else utcnow()


def find_customer_id(session: Session, email: str) -> int:
    """Return the customer id for ``email``; a missing or zero id is an error."""

    stmt = select(Customer.id).where(Customer.email == email)
    with _storage_errors(f"find customer with email {email}"):
        customer_id = session.execute(stmt).scalar_one_or_none()
    if not customer_id:
        raise CustomerNotFound(email)
    return customer_id


def lookup_redemption_state(
    session: Session,
    email: str,
    code: str,
    *,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """Return ``used_at`` of the voucher owned by ``email`` (``None`` when unredeemed).

    Raises ``VoucherNotFound`` when the pair does not resolve and ``Expired``
    when the voucher is past its expiry, whatever its usage state.
    """

    now = _resolve_now(now)
    stmt = (
        select(Voucher.used_at, Voucher.expired_at)
        .join(Customer, Customer.id == Voucher.customer_id)
        .where(Customer.email == email, Voucher.code == code)
    )
    with _storage_errors("query used_at from table vouchers"):
        row = session.execute(stmt).one_or_none()

    if row is None:
        raise VoucherNotFound(code)
    if row.expired_at <= now:
        raise Expired(code)
    return row.used_at


def _raise_unusable(session: Session, code: str) -> None:
    stmt = select(Voucher).where(Voucher.code == code).execution_options(populate_existing=True)
    voucher = session.execute(stmt).scalar_one()
    if voucher.is_redeemed:
        raise AlreadyRedeemed(code)
    raise Expired(code)


def redeem_and_fetch_discount(
    session: Session,
    code: str,
    *,
    now: Optional[datetime] = None,
) -> float:
    """Stamp ``used_at`` on the voucher and return its offer's discount, atomically.

    The stamp is a conditional update on ``used_at IS NULL``, so of two
    concurrent redemptions of one code only one can change a row.
    """

    now = _resolve_now(now)
    with _transaction(session, "set date of usage"):
        discount = session.execute(
            select(SpecialOffer.discount)
            .join(Voucher, Voucher.special_offer_id == SpecialOffer.id)
            .where(Voucher.code == code)
        ).scalar_one_or_none()
        if discount is None:
            raise VoucherNotFound(code)

        result = session.execute(
            update(Voucher)
            .where(
                Voucher.code == code,
                Voucher.used_at.is_(None),
                Voucher.expired_at > now,
            )
            .values(used_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            _raise_unusable(session, code)

    logger.info("voucher %s redeemed at %s", code, now.isoformat())
    return discount


def _upsert_offer(session: Session, offer_name: str, discount: float) -> Optional[int]:
    dialect = session.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise OfferUpsertError(f"offer upsert is not supported on {dialect}")

    now = utcnow()
    stmt = insert(SpecialOffer).values(name=offer_name, discount=discount, created_at=now, updated_at=now)
    stmt = stmt.on_conflict_do_update(
        index_elements=["name"],
        set_={"discount": stmt.excluded.discount, "updated_at": stmt.excluded.updated_at},
    ).returning(SpecialOffer.id)
    return session.execute(stmt).scalar_one_or_none()


def upsert_offer_and_insert_voucher(
    session: Session,
    *,
    customer_email: str,
    offer_name: str,
    code: str,
    expiry: datetime,
    discount: float,
) -> None:
    """Upsert the offer by name and insert an unredeemed voucher, in one transaction."""

    customer_id = find_customer_id(session, customer_email)

    with _transaction(session, "generate voucher"):
        offer_id = _upsert_offer(session, offer_name, discount)
        if not offer_id:
            raise OfferUpsertError(f"offer {offer_name} upsert returned no id")

        session.add(
            Voucher(
                code=code,
                customer_id=customer_id,
                special_offer_id=offer_id,
                expired_at=as_naive_utc(expiry),
                used_at=None,
            )
        )
        session.flush()


def list_unredeemed_vouchers(
    session: Session,
    email: str,
    *,
    now: Optional[datetime] = None,
) -> Tuple[List[str], List[str]]:
    """Return parallel lists of codes and offer names of the customer's usable vouchers."""

    now = _resolve_now(now)
    customer_id = find_customer_id(session, email)

    stmt = (
        select(Voucher.code, SpecialOffer.name)
        .join(SpecialOffer, SpecialOffer.id == Voucher.special_offer_id)
        .where(
            Voucher.customer_id == customer_id,
            Voucher.used_at.is_(None),
            Voucher.expired_at > now,
        )
        .order_by(Voucher.id)
    )
    with _storage_errors("query vouchers of customer"):
        rows = session.execute(stmt).all()

    codes = [row.code for row in rows]
    names = [row.name for row in rows]
    return codes, names
