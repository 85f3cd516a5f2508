"""Batch model - an expiry-dated lot of a product held by one retailer."""
from sqlalchemy import (
    Column, BigInteger, Integer, Numeric, Date, DateTime, ForeignKey, CheckConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class Batch(Base):
    """Stock batch. quantity_available only goes down outside restocking."""

    __tablename__ = 'batches'
    __table_args__ = (
        CheckConstraint('quantity_total > 0', name='ck_batches_quantity_total_positive'),
        CheckConstraint(
            'quantity_available >= 0 AND quantity_available <= quantity_total',
            name='ck_batches_quantity_available_range'
        ),
        CheckConstraint('expiry_date > mfd_date', name='ck_batches_expiry_after_mfd'),
        Index('ix_batches_fefo', 'product_id', 'retailer_id', 'expiry_date'),
    )

    id = Column(BigId, primary_key=True, autoincrement=True)
    product_id = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    retailer_id = Column(BigInteger, ForeignKey('retailer_profiles.id'), nullable=False)
    mfd_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)
    quantity_total = Column(Integer, nullable=False)
    quantity_available = Column(Integer, nullable=False)
    purchase_price = Column(Numeric(10, 2), nullable=False, default=0)
    selling_price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    product = relationship('Product', back_populates='batches')
    retailer = relationship('RetailerProfile', back_populates='batches')

    def __repr__(self):
        return (
            f"<Batch(id={self.id}, product_id={self.product_id}, "
            f"expiry={self.expiry_date}, available={self.quantity_available}/{self.quantity_total})>"
        )
