"""Customer domain model."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Customer(Base):
    """A voucher holder, identified by email."""

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("email", name="customers_email_unique"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    vouchers = relationship("Voucher", back_populates="customer")
