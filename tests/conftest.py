import pytest
from datetime import date, timedelta
from decimal import Decimal

import jwt
from sqlalchemy.orm import sessionmaker

from config import TestingConfig
from pantrypal import create_app
from pantrypal.database import get_engine
from pantrypal.models import User, UserRole, RetailerProfile, Product, Batch


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application instance backed by a fresh SQLite file."""
    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'pantrypal.sqlite3'}"

    app = create_app(Config)
    yield app
    get_engine(app).dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session_factory(app):
    """Sessions independent of the request-scoped registry."""
    return sessionmaker(autoflush=False, bind=get_engine(app))


@pytest.fixture(scope='function')
def session(session_factory):
    """Create database session for testing."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


def _create_user(session, name, phone, role, shop_name=None):
    user = User(name=name, phone=phone, role=role)
    user.set_password('password123')
    session.add(user)
    session.flush()
    if shop_name:
        session.add(RetailerProfile(user_id=user.id, shop_name=shop_name))
    session.commit()
    return user


@pytest.fixture(scope='function')
def retailer(session):
    """Retailer user with a shop profile."""
    return _create_user(session, 'Retailer One', '9000000001', UserRole.RETAILER, 'Fresh Mart')


@pytest.fixture(scope='function')
def other_retailer(session):
    """Second retailer, for isolation tests."""
    return _create_user(session, 'Retailer Two', '9000000002', UserRole.RETAILER, 'Daily Needs')


@pytest.fixture(scope='function')
def customer(session):
    return _create_user(session, 'Customer One', '9000000003', UserRole.CUSTOMER)


@pytest.fixture(scope='function')
def other_customer(session):
    return _create_user(session, 'Customer Two', '9000000004', UserRole.CUSTOMER)


@pytest.fixture(scope='function')
def product(session):
    product = Product(barcode='8901000000011', name='Whole Milk', brand='Dairy Co',
                      category='Dairy', unit='1 l')
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def product_b(session):
    product = Product(barcode='8901000000028', name='Wheat Bread', brand='Bakery Co',
                      category='Bakery', unit='400 g')
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def make_batch(session):
    """
    Factory for batches.

    ``expiry`` may be a date or an offset in days from today.
    """
    def _make(product, retailer, expiry, quantity, selling_price, purchase_price=10,
              mfd=None, quantity_available=None):
        if isinstance(expiry, int):
            expiry = date.today() + timedelta(days=expiry)
        batch = Batch(
            product_id=product.id,
            retailer_id=retailer.retailer_profile.id,
            mfd_date=mfd or (expiry - timedelta(days=90)),
            expiry_date=expiry,
            quantity_total=quantity,
            quantity_available=quantity if quantity_available is None else quantity_available,
            purchase_price=Decimal(str(purchase_price)),
            selling_price=Decimal(str(selling_price)),
        )
        session.add(batch)
        session.commit()
        return batch
    return _make


@pytest.fixture(scope='function')
def auth_headers(app):
    """Build Authorization headers for a user (optionally with a forged role claim)."""
    def _headers(user, role=None):
        token = jwt.encode(
            {'userId': user.id, 'role': role or user.role.value},
            app.config['JWT_SECRET'],
            algorithm=app.config['JWT_ALGORITHM'],
        )
        return {'Authorization': f'Bearer {token}'}
    return _headers
