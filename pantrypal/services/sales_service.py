"""
Sales service with transactional logic.
Allocates FEFO stock for every line, records sale items and the claim code,
and commits the whole sale or nothing.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, NamedTuple, Optional, Tuple

from pantrypal.database import atomic
from pantrypal.exceptions import ValidationError, RetailerNotFoundError
from pantrypal.models import RetailerProfile, Sale, SaleItem
from pantrypal.services.claim_code_service import generate_claim_code
from pantrypal.services.fefo_service import allocate_fefo
from pantrypal.utils.parsing import MAX_MONEY, parse_int, parse_positive_int

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


class SaleResult(NamedTuple):
    sale_id: int
    claim_code: str
    total_amount: Decimal


def normalize_sale_items(items: Any) -> List[Tuple[int, int]]:
    """Validate the raw ``items`` payload into (product_id, quantity) pairs."""
    if not items or not isinstance(items, list):
        raise ValidationError('No items provided')

    lines = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValidationError(f'Item {index} must be an object')
        if item.get('product_id') is None:
            raise ValidationError(f'Item {index}: product_id is required')
        product_id = parse_int(item.get('product_id'), f'Item {index}: product_id')
        quantity = parse_positive_int(item.get('quantity'), f'Item {index}: quantity')
        lines.append((product_id, quantity))
    return lines


def get_retailer_profile(session, user_id: int) -> RetailerProfile:
    """Retailer profile of a user, or RetailerNotFoundError."""
    retailer = session.query(RetailerProfile).filter(
        RetailerProfile.user_id == user_id
    ).first()
    if retailer is None:
        raise RetailerNotFoundError()
    return retailer


def line_total(quantity: int, unit_price: Decimal) -> Decimal:
    return (Decimal(quantity) * Decimal(unit_price)).quantize(CENTS)


def create_sale(session, user_id: int, items: Any, today: Optional[date] = None) -> SaleResult:
    """
    Record a sale for the retailer owned by ``user_id``.

    Every requested line is allocated FEFO across the retailer's batches; one
    SaleItem is written per batch touched. Everything happens in one unit of
    work: a failing line leaves no sale, no sale items and no stock change.

    Args:
        session: Database session
        user_id: Authenticated retailer user id
        items: ``[{"product_id": int, "quantity": int}, ...]``
        today: Reference date for expiry filtering (defaults to today)

    Returns:
        SaleResult with the claim code and the final total

    Raises:
        ValidationError: empty or malformed items, or a total beyond the amount column
        RetailerNotFoundError: user has no retailer profile
        OutOfStockError / InsufficientStockError: a line cannot be covered
        ClaimCodeExhaustedError: no free claim code
        TransientStoreError: storage failure, safe to retry
    """
    lines = normalize_sale_items(items)

    with atomic(session):
        retailer_id = get_retailer_profile(session, user_id).id
        claim_code = generate_claim_code(session)

        sale = Sale(
            retailer_id=retailer_id,
            total_amount=Decimal('0.00'),
            claim_code=claim_code,
            is_claimed=False,
        )
        session.add(sale)
        session.flush()

        total = Decimal('0.00')
        for product_id, quantity in lines:
            for batch, taken in allocate_fefo(session, product_id, retailer_id, quantity, today=today):
                price = Decimal(batch.selling_price)
                item_total = line_total(taken, price)
                session.add(SaleItem(
                    sale_id=sale.id,
                    product_id=product_id,
                    batch_id=batch.id,
                    quantity=taken,
                    price_per_unit=price,
                    total_price=item_total,
                    mfd_date=batch.mfd_date,
                    expiry_date=batch.expiry_date,
                ))
                total += item_total

        if total > MAX_MONEY:
            raise ValidationError(f'Sale total must not exceed {MAX_MONEY}')
        sale.total_amount = total
        session.flush()
        result = SaleResult(sale.id, claim_code, total)

    logger.info(
        f"Sale {result.sale_id} completed for retailer {retailer_id}: "
        f"{len(lines)} line(s), total {result.total_amount}"
    )
    return result
