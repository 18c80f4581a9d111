"""Public schema exports."""

from .voucher import (
	DiscountResponse,
	GenerateRequest,
	GenerateResponse,
	ValidateRequest,
	VoucherSummary,
)

__all__ = [
	"DiscountResponse",
	"GenerateRequest",
	"GenerateResponse",
	"ValidateRequest",
	"VoucherSummary",
]
