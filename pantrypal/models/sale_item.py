"""Sale Item model."""
from sqlalchemy import Column, BigInteger, Integer, Numeric, Date, ForeignKey
from sqlalchemy.orm import relationship
from pantrypal.database import Base, BigId


class SaleItem(Base):
    """
    Quantity drawn from one batch within a sale.

    Price and dates are snapshots of the batch at sale time; a line spanning
    two batches produces two rows.
    """

    __tablename__ = 'sale_items'

    id = Column(BigId, primary_key=True, autoincrement=True)
    sale_id = Column(BigInteger, ForeignKey('sales.id'), nullable=False)
    product_id = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    batch_id = Column(BigInteger, ForeignKey('batches.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_per_unit = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    mfd_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)

    # Relationships
    sale = relationship('Sale', back_populates='items')
    product = relationship('Product')
    batch = relationship('Batch')

    def __repr__(self):
        return f"<SaleItem(id={self.id}, batch_id={self.batch_id}, qty={self.quantity})>"
