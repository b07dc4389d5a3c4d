"""
Pytest fixtures for restoledger backend tests.

Provides an in-memory database, per-test table cleanup, branch / menu /
stock fixtures, factories for sales and losses, and the Flask test client.
"""

import pytest
from restoledger import create_app
from restoledger.extensions import db
from restoledger.models import Organization, MenuItem, StockItem
from restoledger.services import loss_service, sales_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.expunge_all()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def org_a(db_session):
    """Downtown branch."""
    org = Organization(name="Downtown Branch", address="123 Main St, Downtown")
    db_session.add(org)
    db_session.commit()
    return org


@pytest.fixture(scope='function')
def org_b(db_session):
    """Uptown branch."""
    org = Organization(name="Uptown Branch", address="456 Oak Ave, Uptown")
    db_session.add(org)
    db_session.commit()
    return org


@pytest.fixture(scope='function')
def pizza(db_session):
    """Menu item: cost 8.50, sells for 15.99."""
    item = MenuItem(name="Margherita Pizza", category="Main Course", cost_price_cents=850, selling_price_cents=1599)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def cola(db_session):
    """Menu item: cost 1.25, sells for 2.99."""
    item = MenuItem(name="Coca Cola", category="Beverages", cost_price_cents=125, selling_price_cents=299)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def tomatoes(db_session, org_a):
    """Stock item in the Downtown branch: 3.50 per kg."""
    item = StockItem(
        organization_id=org_a.id,
        name="Tomatoes",
        category="Vegetables",
        unit="kg",
        cost_per_unit_cents=350,
        current_stock=25,
        min_stock_level=5,
    )
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def record_sale(db_session):
    """Factory: create a sale through the service, optionally back-dating created_at."""
    def _record(org, item, quantity=1, *, sale_date=None, created_at=None):
        sale = sales_service.create_sale(
            organization_id=org.id,
            menu_item_id=item.id,
            quantity=quantity,
            sale_date=sale_date,
        )
        if created_at is not None:
            sale.created_at = created_at
            db_session.commit()
        return sale
    return _record


@pytest.fixture(scope='function')
def record_loss(db_session):
    """Factory: create a loss through the service, optionally back-dating created_at."""
    def _record(org, *, menu_item=None, stock_item=None, quantity=1, type="waste",
                loss_date=None, created_at=None):
        loss = loss_service.create_loss(
            type=type,
            quantity=quantity,
            organization_id=org.id,
            menu_item_id=menu_item.id if menu_item is not None else None,
            stock_item_id=stock_item.id if stock_item is not None else None,
            loss_date=loss_date,
        )
        if created_at is not None:
            loss.created_at = created_at
            db_session.commit()
        return loss
    return _record
