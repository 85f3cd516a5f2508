"""
FEFO stock allocation.

Draws a requested quantity from a retailer's batches of a product, earliest
expiry first. Deductions are staged in the caller's transaction; the caller
owns commit and rollback.
"""
import logging
from datetime import date
from typing import List, NamedTuple, Optional

from sqlalchemy import update

from pantrypal.exceptions import OutOfStockError, InsufficientStockError
from pantrypal.models import Batch

logger = logging.getLogger(__name__)


class Allocation(NamedTuple):
    """Quantity drawn from one batch."""
    batch: Batch
    quantity: int


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; the guarded update in
    deduct_from_batch still prevents overselling there.
    """
    return query.with_for_update()


def eligible_batches(session, product_id: int, retailer_id: int, today: Optional[date] = None) -> List[Batch]:
    """Lock and return sellable batches in FEFO order (expiry, then id)."""
    today = today or date.today()
    query = session.query(Batch).filter(
        Batch.product_id == product_id,
        Batch.retailer_id == retailer_id,
        Batch.quantity_available > 0,
        Batch.expiry_date >= today,
    ).order_by(Batch.expiry_date.asc(), Batch.id.asc())
    return lock_for_update(query).populate_existing().all()


def deduct_from_batch(session, batch: Batch, quantity: int) -> None:
    """
    Decrement a batch's available quantity inside the current transaction.

    The update only matches while enough stock is left, so a concurrent sale
    that consumed the batch first makes this raise instead of going negative.
    """
    result = session.execute(
        update(Batch)
        .where(Batch.id == batch.id, Batch.quantity_available >= quantity)
        .values(quantity_available=Batch.quantity_available - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        session.expire(batch, ['quantity_available'])
        logger.warning(f"Batch {batch.id} changed concurrently; cannot deduct {quantity}")
        raise InsufficientStockError(batch.product_id, quantity, batch.quantity_available)
    session.expire(batch, ['quantity_available'])


def allocate_fefo(session, product_id: int, retailer_id: int, quantity: int,
                  today: Optional[date] = None) -> List[Allocation]:
    """
    Allocate ``quantity`` units of a product across batches, earliest expiry first.

    Returns the (batch, quantity) pairs in consumption order.

    Raises:
        OutOfStockError: no in-date batch with stock exists
        InsufficientStockError: in-date batches cannot cover the quantity
    """
    batches = eligible_batches(session, product_id, retailer_id, today)
    if not batches:
        raise OutOfStockError(product_id)

    # Snapshot before deducting; deduct_from_batch expires the attribute
    available = {batch.id: batch.quantity_available for batch in batches}
    total_available = sum(available.values())

    remaining = quantity
    allocations = []
    for batch in batches:
        if remaining <= 0:
            break
        take = min(available[batch.id], remaining)
        deduct_from_batch(session, batch, take)
        allocations.append(Allocation(batch, take))
        remaining -= take

    if remaining > 0:
        raise InsufficientStockError(product_id, quantity, total_available)

    logger.debug(
        f"Allocated {quantity} of product {product_id} for retailer {retailer_id} "
        f"from batches {[a.batch.id for a in allocations]}"
    )
    return allocations
