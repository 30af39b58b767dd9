import pytest
from decimal import Decimal

from pricing_app import create_app
from pricing_app import database
from pricing_app.database import create_tables
from pricing_app.models import PricingRow, DiscountRow, Product, Discount


CATALOG = [
    ('p-100', 'ABC-100', 'Hex bolt M8 zinc', Decimal('100.00')),
    ('p-200', 'ABC-200', 'Hex nut M8 zinc', Decimal('50.00')),
    ('p-300', 'XYZ-900', 'Stainless washer 8mm', Decimal('200.00')),
    ('p-400', 'FREE-1', 'Sample kit', Decimal('0.00')),
    ('p-500', 'ab_c-1', 'Odd part number with underscore', Decimal('10.00')),
]

DISCOUNTS = [
    ('d-0', '0', Decimal('1.0000')),
    ('d-5', '5', Decimal('0.9500')),
    ('d-10', '10', Decimal('0.9000')),
]


def seed_catalog(session):
    for pid, item, description, price in CATALOG:
        session.add(PricingRow(id=pid, item=item, description=description, list_price=price))
    for did, label, multiplier in DISCOUNTS:
        session.add(DiscountRow(id=did, discount=label, multiplier=multiplier))
    session.commit()


@pytest.fixture(scope='function')
def app():
    """Create application instance with a seeded in-memory catalog."""
    app = create_app('config.TestConfig')
    with app.app_context():
        create_tables()
        seed_catalog(database.db_session)
        database.db_session.remove()
    yield app
    database.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session bound to the test catalog."""
    with app.app_context():
        yield database.db_session
        database.db_session.rollback()
        database.db_session.remove()


@pytest.fixture(scope='function')
def gateway(app, session):
    return app.extensions['catalog_gateway']


@pytest.fixture
def bolt():
    return Product(id='p-100', part_number='ABC-100', description='Hex bolt M8 zinc', list_price=Decimal('100.00'))


@pytest.fixture
def nut():
    return Product(id='p-200', part_number='ABC-200', description='Hex nut M8 zinc', list_price=Decimal('50.00'))


@pytest.fixture
def washer():
    return Product(id='p-300', part_number='XYZ-900', description='Stainless washer 8mm', list_price=Decimal('200.00'))


@pytest.fixture
def ten_percent():
    return Discount(id='d-10', name='10%', value=Decimal('0.10'))


@pytest.fixture
def five_percent():
    return Discount(id='d-5', name='5%', value=Decimal('0.05'))
