"""
Claim service.
Binds the items of a sale to the customer who redeems its claim code, once.
"""
import logging

from sqlalchemy import update

from pantrypal.database import atomic
from pantrypal.exceptions import ValidationError, InvalidClaimCodeError, AlreadyClaimedError
from pantrypal.models import Sale, SaleItem, CustomerClaim, CustomerItem, CustomerItemStatus

logger = logging.getLogger(__name__)


def _mark_claimed(session, sale_id: int) -> bool:
    """Flip is_claimed false -> true; False when another claim got there first."""
    result = session.execute(
        update(Sale)
        .where(Sale.id == sale_id, Sale.is_claimed.is_(False))
        .values(is_claimed=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def claim_purchase(session, customer_id: int, claim_code) -> int:
    """
    Redeem a claim code for a customer.

    The claimed flag is set with a conditional update inside the same unit of
    work that writes the claim and the customer items, so of two concurrent
    attempts on one code exactly one commits.

    Returns:
        Number of customer items created (one per sale item)

    Raises:
        ValidationError: claim code missing
        InvalidClaimCodeError: no sale with this code
        AlreadyClaimedError: the sale was already claimed
    """
    code = str(claim_code).strip() if claim_code is not None else ''
    if not code:
        raise ValidationError('Claim code required')

    with atomic(session):
        sale = session.query(Sale).filter(Sale.claim_code == code).first()
        if sale is None:
            raise InvalidClaimCodeError()
        if sale.is_claimed:
            raise AlreadyClaimedError()

        sale_id = sale.id
        if not _mark_claimed(session, sale_id):
            raise AlreadyClaimedError()
        session.expire(sale, ['is_claimed'])

        session.add(CustomerClaim(sale_id=sale_id, customer_id=customer_id))

        sale_item_ids = [
            row.id for row in
            session.query(SaleItem.id).filter(SaleItem.sale_id == sale_id).order_by(SaleItem.id)
        ]
        for sale_item_id in sale_item_ids:
            session.add(CustomerItem(
                customer_id=customer_id,
                sale_item_id=sale_item_id,
                status=CustomerItemStatus.ACTIVE,
            ))
        session.flush()

    logger.info(f"Sale {sale_id} claimed by customer {customer_id}: {len(sale_item_ids)} item(s)")
    return len(sale_item_ids)
