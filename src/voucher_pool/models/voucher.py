"""Voucher model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow

CODE_LENGTH = 8


class Voucher(Base):
    """Single-use discount token; ``used_at`` is set exactly once on redemption."""

    __tablename__ = "vouchers"
    __table_args__ = (
        UniqueConstraint("code", name="vouchers_code_unique"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(CODE_LENGTH), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False)
    special_offer_id = Column(Integer, ForeignKey("special_offers.id", ondelete="RESTRICT"), nullable=False)
    expired_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    customer = relationship("Customer", back_populates="vouchers")
    special_offer = relationship("SpecialOffer", back_populates="vouchers")

    @property
    def is_redeemed(self) -> bool:
        return self.used_at is not None
