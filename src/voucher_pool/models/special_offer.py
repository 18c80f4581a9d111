"""Special offer model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class SpecialOffer(Base):
    """Named discount template shared by many vouchers.

    Offers are upserted by name, so the discount seen at redemption time is
    whatever the latest generate call for that name wrote.
    """

    __tablename__ = "special_offers"
    __table_args__ = (
        UniqueConstraint("name", name="special_offers_name_unique"),
        CheckConstraint("discount > 0 AND discount <= 100", name="special_offers_discount_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    discount = Column(Float, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    vouchers = relationship("Voucher", back_populates="special_offer")
