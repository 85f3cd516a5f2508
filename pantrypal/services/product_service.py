"""Catalogue service: manual product entry, search and barcode lookup."""
import logging
from typing import List, Optional

from sqlalchemy import func

from pantrypal.database import atomic
from pantrypal.exceptions import ValidationError, ConflictError, ProductNotFoundError
from pantrypal.models import Product

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10


def _clean(value: Optional[str], max_length: int) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value[:max_length] or None


def add_product(session, data: dict) -> Product:
    """Create a product; the barcode, when given, must not exist yet."""
    name = _clean(data.get('name') or data.get('product_name'), 255)
    if not name:
        raise ValidationError('Product name required')

    barcode = _clean(data.get('barcode'), 64)

    with atomic(session):
        if barcode and session.query(Product.id).filter(Product.barcode == barcode).first():
            raise ConflictError('Product already exists', status_code=400)

        product = Product(
            barcode=barcode,
            name=name,
            brand=_clean(data.get('brand'), 120),
            category=_clean(data.get('category'), 120),
            unit=_clean(data.get('unit'), 50),
        )
        session.add(product)
        session.flush()
        product_id = product.id

    logger.info(f"Product {product_id} created (barcode={barcode})")
    return product


def search_products(session, query: Optional[str], limit: int = DEFAULT_SEARCH_LIMIT) -> List[Product]:
    """Case-insensitive name search for autocomplete."""
    if not query or not query.strip():
        return []

    # Sanitize input (limit length)
    term = query.strip()[:100].lower()
    return (
        session.query(Product)
        .filter(func.lower(Product.name).like(f'%{term}%'))
        .order_by(Product.name.asc())
        .limit(limit)
        .all()
    )


def get_product_by_barcode(session, barcode: str) -> Product:
    product = session.query(Product).filter(Product.barcode == barcode).first()
    if product is None:
        raise ProductNotFoundError()
    return product
