"""
Unit tests for the unit-of-work helper.
"""

import pytest
from sqlalchemy import text

from pantrypal.database import atomic
from pantrypal.exceptions import TransientStoreError, ValidationError
from pantrypal.models import Product


class TestAtomic:

    def test_commits_on_success(self, session, session_factory):
        with atomic(session):
            session.add(Product(barcode='111', name='Committed'))

        other = session_factory()
        try:
            assert other.query(Product).filter_by(barcode='111').count() == 1
        finally:
            other.close()

    def test_rolls_back_on_domain_error(self, session):
        with pytest.raises(ValidationError):
            with atomic(session):
                session.add(Product(barcode='222', name='Discarded'))
                session.flush()
                raise ValidationError('stop')

        assert session.query(Product).filter_by(barcode='222').count() == 0

    def test_storage_errors_become_transient(self, session):
        with pytest.raises(TransientStoreError) as exc_info:
            with atomic(session):
                session.execute(text('SELECT * FROM table_that_does_not_exist'))

        assert exc_info.value.status_code == 503
        assert 'table_that_does_not_exist' not in exc_info.value.message

    def test_integrity_errors_become_transient(self, session, product):
        with pytest.raises(TransientStoreError):
            with atomic(session):
                session.add(Product(barcode=product.barcode, name='Duplicate'))

        assert session.query(Product).count() == 1
