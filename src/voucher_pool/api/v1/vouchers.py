"""Voucher endpoints: validate, generate and list."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import EmailStr
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import (
    DiscountResponse,
    GenerateRequest,
    GenerateResponse,
    ValidateRequest,
    VoucherSummary,
)
from ...services import voucher_service
from ...services.exceptions import VoucherError

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


@router.post(
    "/validate",
    response_model=DiscountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Validate and redeem a voucher",
    responses={
        201: {
            "description": "Voucher redeemed",
            "content": {"application/json": {"example": {"discount": 50.0}}},
        },
        400: {"description": "Malformed request or voucher already redeemed"},
        404: {"description": "Customer has no voucher with this code"},
        500: {"description": "Voucher expired or storage failure"},
    },
)
def validate_voucher(
    payload: ValidateRequest,
    db: Session = Depends(get_db),
) -> DiscountResponse:
    """Redeem a voucher and disclose its discount.

    Example request body::

        {
            "code": "aBcDeFgH",
            "email": "customer0@gmail.com"
        }
    """

    try:
        discount = voucher_service.validate_and_redeem(db, email=payload.email, code=payload.code)
        return DiscountResponse(discount=discount)
    except VoucherError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a voucher",
    responses={
        201: {
            "description": "Voucher generated",
            "content": {"application/json": {"example": {"code": "aBcDeFgH"}}},
        },
        400: {"description": "Invalid email, discount or expiry"},
        404: {"description": "Customer not found"},
        500: {"description": "Storage failure"},
    },
)
def generate_voucher(
    payload: GenerateRequest,
    db: Session = Depends(get_db),
) -> GenerateResponse:
    """Issue a voucher for a customer under a special offer.

    Example request body::

        {
            "email": "customer0@gmail.com",
            "offer_name": "summer_sale",
            "discount": 25.5,
            "expiry": "2030-01-01T00:00:00Z"
        }
    """

    try:
        code = voucher_service.generate_voucher(
            db,
            email=payload.email,
            offer_name=payload.offer_name,
            discount=payload.discount,
            expiry=payload.expiry,
        )
        return GenerateResponse(code=code)
    except VoucherError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "",
    response_model=List[VoucherSummary],
    summary="List usable vouchers of a customer",
    responses={
        200: {
            "description": "Unredeemed, unexpired vouchers",
            "content": {
                "application/json": {
                    "example": [
                        {"code": "aBcDeFgH", "offer_name": "summer_sale"},
                    ]
                }
            },
        },
        400: {"description": "Invalid email"},
        404: {"description": "Customer not found"},
    },
)
def list_vouchers(
    email: EmailStr = Query(..., description="Customer email"),
    db: Session = Depends(get_db),
) -> List[VoucherSummary]:
    """Return vouchers the customer can still redeem."""

    try:
        pairs = voucher_service.list_active_vouchers(db, email=email)
    except VoucherError as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return [VoucherSummary(code=code, offer_name=offer_name) for code, offer_name in pairs]
