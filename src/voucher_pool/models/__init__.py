"""SQLAlchemy models for the voucher pool."""

from .customer import Customer
from .special_offer import SpecialOffer
from .voucher import CODE_LENGTH, Voucher

__all__ = [
    "CODE_LENGTH",
    "Customer",
    "SpecialOffer",
    "Voucher",
]
