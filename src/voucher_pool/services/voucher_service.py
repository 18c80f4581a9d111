"""Voucher lifecycle: validate-and-redeem, generate and list-active.

A voucher is ``Issued`` when generated and moves to ``Redeemed`` on its first
successful redemption. Redeeming an expired or already redeemed voucher is a
terminal failure and changes nothing.
"""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import CODE_LENGTH
from ..utils.datetime import as_naive_utc, utcnow
from . import voucher_store
from .exceptions import AlreadyRedeemed, InconsistentResult, VoucherValidationError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_letters
MAX_DISCOUNT = 100.0


def generate_code(length: int = CODE_LENGTH) -> str:
    """Return a random code drawn uniformly from the 52 ASCII letters."""

    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def validate_and_redeem(
    session: Session,
    *,
    email: str,
    code: str,
    now: Optional[datetime] = None,
) -> float:
    """Redeem the customer's voucher and return its discount percentage."""

    now = as_naive_utc(now) if now is not None else utcnow()

    used_at = voucher_store.lookup_redemption_state(session, email, code, now=now)
    if used_at is not None:
        raise AlreadyRedeemed(code)

    return voucher_store.redeem_and_fetch_discount(session, code, now=now)


def generate_voucher(
    session: Session,
    *,
    email: str,
    offer_name: str,
    discount: float,
    expiry: datetime,
    now: Optional[datetime] = None,
) -> str:
    """Issue a new voucher for the customer under ``offer_name`` and return its code."""

    now = as_naive_utc(now) if now is not None else utcnow()

    if not offer_name or not offer_name.strip():
        raise VoucherValidationError("offer name shall not be empty")
    if not (0 < discount <= MAX_DISCOUNT):
        raise VoucherValidationError("discount shall be bigger than 0 and at most 100.00")
    if as_naive_utc(expiry) <= now:
        raise VoucherValidationError("expiry date shall be in the future")

    code = generate_code()
    voucher_store.upsert_offer_and_insert_voucher(
        session,
        customer_email=email,
        offer_name=offer_name,
        code=code,
        expiry=expiry,
        discount=discount,
    )
    logger.info("voucher %s generated for offer %r", code, offer_name)
    return code


def list_active_vouchers(
    session: Session,
    *,
    email: str,
    now: Optional[datetime] = None,
) -> List[Tuple[str, str]]:
    """Return ``(code, offer_name)`` pairs of the customer's usable vouchers."""

    codes, names = voucher_store.list_unredeemed_vouchers(session, email, now=now)
    if len(codes) != len(names):
        raise InconsistentResult(
            f"store returned {len(codes)} voucher codes but {len(names)} offer names"
        )
    return list(zip(codes, names))
