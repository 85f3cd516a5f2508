"""Sale model."""
from sqlalchemy import Column, BigInteger, String, Boolean, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class Sale(Base):
    """Completed sale, redeemable once by a customer through its claim code."""

    __tablename__ = 'sales'

    id = Column(BigId, primary_key=True, autoincrement=True)
    retailer_id = Column(BigInteger, ForeignKey('retailer_profiles.id'), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    claim_code = Column(String(6), nullable=False, unique=True, index=True)
    is_claimed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    retailer = relationship('RetailerProfile', back_populates='sales')
    items = relationship('SaleItem', back_populates='sale', cascade='all, delete-orphan',
                         order_by='SaleItem.id')
    claim = relationship('CustomerClaim', uselist=False, back_populates='sale')

    def __repr__(self):
        return f"<Sale(id={self.id}, total={self.total_amount}, claim_code='{self.claim_code}')>"
