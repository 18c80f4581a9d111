"""Service layer exports."""

from . import (
	voucher_service,
	voucher_store,
)

__all__ = [
	"voucher_service",
	"voucher_store",
]
