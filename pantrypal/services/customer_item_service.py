"""Customer item service: claimed items, usage status and reminders."""
import logging
from datetime import date, time
from typing import List, Optional, Tuple

from flask import current_app, has_app_context

from pantrypal.database import atomic
from pantrypal.exceptions import NotFoundError, ValidationError
from pantrypal.models import (
    CustomerItem, CustomerItemStatus, SaleItem, Sale, Product, RetailerProfile
)
from pantrypal.utils.parsing import parse_date, parse_time

logger = logging.getLogger(__name__)

FALLBACK_REMINDER_TIME = '06:00:00'


def get_customer_items(session, customer_id: int) -> List[Tuple[CustomerItem, SaleItem, Product, RetailerProfile]]:
    """Claimed items of a customer with sale, product and shop details, soonest expiry first."""
    return (
        session.query(CustomerItem, SaleItem, Product, RetailerProfile)
        .join(SaleItem, CustomerItem.sale_item_id == SaleItem.id)
        .join(Sale, SaleItem.sale_id == Sale.id)
        .join(RetailerProfile, Sale.retailer_id == RetailerProfile.id)
        .join(Product, SaleItem.product_id == Product.id)
        .filter(CustomerItem.customer_id == customer_id)
        .order_by(SaleItem.expiry_date.asc(), CustomerItem.id.asc())
        .all()
    )


def _get_owned_item(session, customer_id: int, item_id: int) -> CustomerItem:
    item = session.query(CustomerItem).filter(
        CustomerItem.id == item_id,
        CustomerItem.customer_id == customer_id
    ).first()
    if item is None:
        raise NotFoundError('Item not found')
    return item


def mark_item_used(session, customer_id: int, item_id: int) -> CustomerItem:
    """Set an item to USED. USED never goes back to ACTIVE."""
    with atomic(session):
        item = _get_owned_item(session, customer_id, item_id)
        if item.status is not CustomerItemStatus.USED:
            item.status = CustomerItemStatus.USED
        session.flush()

    logger.info(f"Customer item {item_id} marked USED by customer {customer_id}")
    return item


def _default_reminder_time() -> time:
    raw = FALLBACK_REMINDER_TIME
    if has_app_context():
        raw = current_app.config.get('DEFAULT_REMINDER_TIME', FALLBACK_REMINDER_TIME)
    return parse_time(raw, 'DEFAULT_REMINDER_TIME')


def set_item_reminder(session, customer_id: int, item_id: int,
                      reminder_date, reminder_time: Optional[str] = None) -> CustomerItem:
    """Store a reminder date/time on an item; the time falls back to the configured default."""
    if reminder_date in (None, ''):
        raise ValidationError('Reminder date required')

    when: date = parse_date(reminder_date, 'reminder_date')
    at: time = parse_time(reminder_time, 'reminder_time') if reminder_time else _default_reminder_time()

    with atomic(session):
        item = _get_owned_item(session, customer_id, item_id)
        item.reminder_date = when
        item.reminder_time = at
        session.flush()

    logger.info(f"Reminder set on customer item {item_id} for {when.isoformat()} {at.isoformat()}")
    return item
