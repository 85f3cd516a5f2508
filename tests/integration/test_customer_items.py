"""
Integration tests for a customer's claimed items.
"""

import pytest
from datetime import date, time

from pantrypal.exceptions import NotFoundError, ValidationError
from pantrypal.models import CustomerItem, CustomerItemStatus
from pantrypal.services.claim_service import claim_purchase
from pantrypal.services.customer_item_service import (
    get_customer_items, mark_item_used, set_item_reminder
)
from pantrypal.services.sales_service import create_sale


@pytest.fixture
def claimed_items(session, retailer, customer, product, product_b, make_batch):
    """Claim a sale of milk (expiry +20) and bread (expiry +4); returns ids soonest expiry first."""
    make_batch(product, retailer, expiry=20, quantity=5, selling_price=30)
    make_batch(product_b, retailer, expiry=4, quantity=5, selling_price=45)
    result = create_sale(session, retailer.id, [
        {'product_id': product.id, 'quantity': 1},
        {'product_id': product_b.id, 'quantity': 2},
    ])
    claim_purchase(session, customer.id, result.claim_code)
    return [item.id for item, _, _, _ in get_customer_items(session, customer.id)]


class TestCustomerItems:

    def test_listing_joins_sale_product_and_shop(self, session, customer, claimed_items):
        rows = get_customer_items(session, customer.id)

        assert [product.name for _, _, product, _ in rows] == ['Wheat Bread', 'Whole Milk']
        item, sale_item, product, shop = rows[0]
        assert item.status is CustomerItemStatus.ACTIVE
        assert sale_item.quantity == 2
        assert shop.shop_name == 'Fresh Mart'

    def test_other_customers_see_nothing(self, session, other_customer, claimed_items):
        assert get_customer_items(session, other_customer.id) == []

    def test_mark_used(self, session, customer, claimed_items):
        mark_item_used(session, customer.id, claimed_items[0])

        session.expire_all()
        statuses = [item.status for item, _, _, _ in get_customer_items(session, customer.id)]
        assert statuses == [CustomerItemStatus.USED, CustomerItemStatus.ACTIVE]

    def test_mark_used_twice_stays_used(self, session, customer, claimed_items):
        mark_item_used(session, customer.id, claimed_items[1])
        mark_item_used(session, customer.id, claimed_items[1])

        session.expire_all()
        assert session.get(CustomerItem, claimed_items[1]).status is CustomerItemStatus.USED

    def test_cannot_touch_another_customers_item(self, session, other_customer, claimed_items):
        with pytest.raises(NotFoundError) as exc_info:
            mark_item_used(session, other_customer.id, claimed_items[0])
        assert exc_info.value.status_code == 404

        with pytest.raises(NotFoundError):
            set_item_reminder(session, other_customer.id, claimed_items[0], '2030-01-01')

    def test_reminder_defaults_to_six_am(self, session, customer, claimed_items):
        set_item_reminder(session, customer.id, claimed_items[0], '2030-05-17')

        session.expire_all()
        item = session.get(CustomerItem, claimed_items[0])
        assert item.reminder_date == date(2030, 5, 17)
        assert item.reminder_time == time(6, 0)

    def test_reminder_with_explicit_time(self, session, customer, claimed_items):
        set_item_reminder(session, customer.id, claimed_items[1], '2030-05-17', '19:45')

        session.expire_all()
        assert session.get(CustomerItem, claimed_items[1]).reminder_time == time(19, 45)

    def test_reminder_default_time_from_config(self, app, session, customer, claimed_items):
        app.config['DEFAULT_REMINDER_TIME'] = '08:30:00'

        with app.app_context():
            set_item_reminder(session, customer.id, claimed_items[0], '2030-05-17')

        session.expire_all()
        assert session.get(CustomerItem, claimed_items[0]).reminder_time == time(8, 30)

    @pytest.mark.parametrize('reminder_date', [None, '', 'tomorrow'])
    def test_reminder_date_required(self, session, customer, claimed_items, reminder_date):
        with pytest.raises(ValidationError):
            set_item_reminder(session, customer.id, claimed_items[0], reminder_date)
