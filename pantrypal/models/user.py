"""User model - retailers and customers share one account table."""
import enum
from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash, check_password_hash
from pantrypal.database import Base, BigId


class UserRole(enum.Enum):
    """Closed set of account roles."""
    RETAILER = 'RETAILER'
    CUSTOMER = 'CUSTOMER'


class User(Base):
    """Platform user."""

    __tablename__ = 'users'

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(Enum(UserRole, name='user_role'), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    retailer_profile = relationship('RetailerProfile', uselist=False, back_populates='user')
    items = relationship('CustomerItem', back_populates='customer')

    def set_password(self, password):
        """Set password hash."""
        self.password_hash = generate_password_hash(password, method='scrypt')

    def check_password(self, password):
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_retailer(self):
        return self.role is UserRole.RETAILER

    def __repr__(self):
        return f"<User(id={self.id}, phone='{self.phone}', role={self.role.value})>"
