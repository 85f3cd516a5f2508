"""Models package - exports all SQLAlchemy models."""
# Accounts
from pantrypal.models.user import User, UserRole
from pantrypal.models.retailer_profile import RetailerProfile

# Inventory
from pantrypal.models.product import Product
from pantrypal.models.batch import Batch

# Sales and claims
from pantrypal.models.sale import Sale
from pantrypal.models.sale_item import SaleItem
from pantrypal.models.customer_claim import CustomerClaim
from pantrypal.models.customer_item import CustomerItem, CustomerItemStatus

__all__ = [
    'User', 'UserRole', 'RetailerProfile',
    'Product', 'Batch',
    'Sale', 'SaleItem', 'CustomerClaim', 'CustomerItem', 'CustomerItemStatus',
]
