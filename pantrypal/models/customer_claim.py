"""Customer Claim model."""
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class CustomerClaim(Base):
    """Links a sale to the customer who redeemed its claim code."""

    __tablename__ = 'customer_claims'

    id = Column(BigId, primary_key=True, autoincrement=True)
    sale_id = Column(BigInteger, ForeignKey('sales.id'), nullable=False, unique=True)
    customer_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    claimed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    sale = relationship('Sale', back_populates='claim')
    customer = relationship('User')

    def __repr__(self):
        return f"<CustomerClaim(sale_id={self.sale_id}, customer_id={self.customer_id})>"
