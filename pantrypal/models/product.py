"""Product model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class Product(Base):
    """Catalogue product, shared by all retailers and identified by barcode."""

    __tablename__ = 'products'

    id = Column(BigId, primary_key=True, autoincrement=True)
    barcode = Column(String(64), nullable=True, unique=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(120), nullable=True)
    category = Column(String(120), nullable=True)
    unit = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    batches = relationship('Batch', back_populates='product')

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', barcode='{self.barcode}')>"
