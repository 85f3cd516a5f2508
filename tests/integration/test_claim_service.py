"""
Integration tests for claiming purchases with a claim code.
"""

import pytest

from pantrypal.exceptions import ValidationError, InvalidClaimCodeError, AlreadyClaimedError
from pantrypal.models import Sale, SaleItem, CustomerClaim, CustomerItem, CustomerItemStatus
from pantrypal.services.claim_service import claim_purchase
from pantrypal.services.sales_service import create_sale


@pytest.fixture
def sale(session, retailer, product, product_b, make_batch):
    """Sale with three sale items: two batches of one product, one of another."""
    make_batch(product, retailer, expiry=5, quantity=2, selling_price=10)
    make_batch(product, retailer, expiry=15, quantity=5, selling_price=11)
    make_batch(product_b, retailer, expiry=3, quantity=5, selling_price=4)
    return create_sale(session, retailer.id, [
        {'product_id': product.id, 'quantity': 3},
        {'product_id': product_b.id, 'quantity': 1},
    ])


class TestClaimPurchase:

    def test_claim_creates_one_item_per_sale_item(self, session, sale, customer):
        count = claim_purchase(session, customer.id, sale.claim_code)

        session.expire_all()
        sale_item_ids = [i.id for i in session.query(SaleItem).filter_by(sale_id=sale.sale_id)]
        items = session.query(CustomerItem).filter_by(customer_id=customer.id).all()
        assert count == 3
        assert sorted(i.sale_item_id for i in items) == sorted(sale_item_ids)
        assert all(i.status is CustomerItemStatus.ACTIVE for i in items)
        assert all(i.reminder_date is None for i in items)

        assert session.get(Sale, sale.sale_id).is_claimed is True
        claim = session.query(CustomerClaim).filter_by(sale_id=sale.sale_id).one()
        assert claim.customer_id == customer.id
        assert claim.claimed_at is not None

    def test_code_with_whitespace(self, session, sale, customer):
        assert claim_purchase(session, customer.id, f'  {sale.claim_code} ') == 3

    def test_second_claim_is_rejected(self, session, sale, customer, other_customer):
        claim_purchase(session, customer.id, sale.claim_code)

        with pytest.raises(AlreadyClaimedError) as exc_info:
            claim_purchase(session, other_customer.id, sale.claim_code)

        assert exc_info.value.status_code == 400
        session.expire_all()
        assert session.query(CustomerClaim).count() == 1
        assert session.query(CustomerItem).filter_by(customer_id=other_customer.id).count() == 0

    def test_same_customer_cannot_claim_twice(self, session, sale, customer):
        claim_purchase(session, customer.id, sale.claim_code)

        with pytest.raises(AlreadyClaimedError):
            claim_purchase(session, customer.id, sale.claim_code)

        assert session.query(CustomerItem).count() == 3

    def test_unknown_code(self, session, customer, sale):
        unknown = '100000' if sale.claim_code != '100000' else '100001'

        with pytest.raises(InvalidClaimCodeError) as exc_info:
            claim_purchase(session, customer.id, unknown)

        assert exc_info.value.message == 'Invalid claim code'
        assert session.query(CustomerClaim).count() == 0

    @pytest.mark.parametrize('code', [None, '', '   '])
    def test_missing_code(self, session, customer, code):
        with pytest.raises(ValidationError):
            claim_purchase(session, customer.id, code)


class TestConcurrentClaims:

    def test_only_one_of_two_interleaved_claims_commits(self, session, session_factory, sale,
                                                         customer, other_customer):
        first = session_factory()
        second = session_factory()
        try:
            # Both transactions observe the sale as unclaimed before either writes
            assert first.query(Sale).filter_by(claim_code=sale.claim_code).one().is_claimed is False
            assert second.query(Sale).filter_by(claim_code=sale.claim_code).one().is_claimed is False

            assert claim_purchase(first, customer.id, sale.claim_code) == 3
            with pytest.raises(AlreadyClaimedError):
                claim_purchase(second, other_customer.id, sale.claim_code)
        finally:
            first.close()
            second.close()

        session.expire_all()
        assert session.query(CustomerClaim).count() == 1
        assert session.query(CustomerItem).filter_by(customer_id=customer.id).count() == 3
        assert session.query(CustomerItem).filter_by(customer_id=other_customer.id).count() == 0
