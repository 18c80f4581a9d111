"""Pydantic schemas for voucher endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class ValidateRequest(BaseModel):
    """Request body for validating and redeeming a voucher."""

    code: str = Field(..., min_length=1, max_length=64)
    email: EmailStr


class DiscountResponse(BaseModel):
    """Discount disclosed by a successful redemption."""

    discount: float


class GenerateRequest(BaseModel):
    """Request body for generating a voucher."""

    email: EmailStr
    offer_name: str = Field(..., min_length=1, max_length=255)
    discount: float = Field(
        ...,
        gt=0,
        le=100,
        description="Discount percentage granted by the offer.",
    )
    expiry: datetime = Field(..., description="Timestamp after which the voucher is unusable.")


class GenerateResponse(BaseModel):
    """Code of the freshly generated voucher."""

    code: str


class VoucherSummary(BaseModel):
    """Unredeemed voucher projection."""

    code: str
    offer_name: str
