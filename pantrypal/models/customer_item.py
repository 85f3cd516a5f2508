"""Customer Item model."""
import enum
from sqlalchemy import Column, BigInteger, Date, Time, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pantrypal.database import Base, BigId


class CustomerItemStatus(enum.Enum):
    """Item status; ACTIVE -> USED only."""
    ACTIVE = 'ACTIVE'
    USED = 'USED'


class CustomerItem(Base):
    """A claimed sale item tracked by its customer until used or expired."""

    __tablename__ = 'customer_items'

    id = Column(BigId, primary_key=True, autoincrement=True)
    customer_id = Column(BigInteger, ForeignKey('users.id'), nullable=False)
    sale_item_id = Column(BigInteger, ForeignKey('sale_items.id'), nullable=False, unique=True)
    status = Column(Enum(CustomerItemStatus, name='customer_item_status'), nullable=False,
                    default=CustomerItemStatus.ACTIVE)
    reminder_date = Column(Date, nullable=True)
    reminder_time = Column(Time, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    customer = relationship('User', back_populates='items')
    sale_item = relationship('SaleItem')

    def __repr__(self):
        return f"<CustomerItem(id={self.id}, sale_item_id={self.sale_item_id}, status={self.status.value})>"
