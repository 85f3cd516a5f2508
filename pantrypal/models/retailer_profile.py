"""Retailer profile model."""
from sqlalchemy import Column, BigInteger, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class RetailerProfile(Base):
    """Shop owned by a RETAILER user; owns batches and sales."""

    __tablename__ = 'retailer_profiles'

    id = Column(BigId, primary_key=True, autoincrement=True)
    user_id = Column(BigInteger, ForeignKey('users.id'), nullable=False, unique=True)
    shop_name = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship('User', back_populates='retailer_profile')
    batches = relationship('Batch', back_populates='retailer')
    sales = relationship('Sale', back_populates='retailer')

    def __repr__(self):
        return f"<RetailerProfile(id={self.id}, shop_name='{self.shop_name}')>"
