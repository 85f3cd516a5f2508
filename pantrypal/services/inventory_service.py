"""Inventory service: stock intake (batch creation) and the retailer stock view."""
import logging
from decimal import Decimal
from typing import List, Tuple

from pantrypal.database import atomic
from pantrypal.exceptions import ValidationError, ProductNotFoundError
from pantrypal.models import Batch, Product
from pantrypal.services.sales_service import get_retailer_profile
from pantrypal.utils.parsing import parse_date, parse_int, parse_positive_int, parse_money

logger = logging.getLogger(__name__)

REQUIRED_STOCK_FIELDS = ('product_id', 'mfd_date', 'expiry_date', 'quantity')


def add_stock(session, user_id: int, data: dict) -> Batch:
    """
    Record a new batch for the retailer owned by ``user_id``.

    Raises:
        ValidationError: missing fields, bad dates, expiry not after mfd
        RetailerNotFoundError: user has no retailer profile
        ProductNotFoundError: unknown product
    """
    missing = [field for field in REQUIRED_STOCK_FIELDS if data.get(field) in (None, '')]
    if missing:
        raise ValidationError('Required fields missing', payload={'fields': missing})

    product_id = parse_int(data['product_id'], 'product_id')
    mfd_date = parse_date(data['mfd_date'], 'mfd_date')
    expiry_date = parse_date(data['expiry_date'], 'expiry_date')
    quantity = parse_positive_int(data['quantity'], 'quantity')
    purchase_price = parse_money(data.get('purchase_price'), 'purchase_price', default=Decimal('0.00'))
    selling_price = parse_money(data.get('selling_price'), 'selling_price', default=Decimal('0.00'))

    if expiry_date <= mfd_date:
        raise ValidationError('Expiry must be after MFD')

    with atomic(session):
        retailer_id = get_retailer_profile(session, user_id).id

        if session.query(Product.id).filter(Product.id == product_id).first() is None:
            raise ProductNotFoundError()

        batch = Batch(
            product_id=product_id,
            retailer_id=retailer_id,
            mfd_date=mfd_date,
            expiry_date=expiry_date,
            quantity_total=quantity,
            quantity_available=quantity,
            purchase_price=purchase_price,
            selling_price=selling_price,
        )
        session.add(batch)
        session.flush()
        batch_id = batch.id

    logger.info(
        f"Batch {batch_id} added for retailer {retailer_id}: product {product_id}, "
        f"qty {quantity}, expiry {expiry_date.isoformat()}"
    )
    return batch


def get_inventory(session, user_id: int) -> List[Tuple[Batch, Product]]:
    """All batches of the user's shop with their product, soonest expiry first."""
    retailer = get_retailer_profile(session, user_id)
    return (
        session.query(Batch, Product)
        .join(Product, Batch.product_id == Product.id)
        .filter(Batch.retailer_id == retailer.id)
        .order_by(Batch.expiry_date.asc(), Batch.id.asc())
        .all()
    )
