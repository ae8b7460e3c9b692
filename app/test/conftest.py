"""
Pytest configuration and fixtures for the stock ledger tests
"""
import os

# Console-only logging while testing
os.environ['LOG_DIR'] = ''
os.environ.setdefault('LOG_LEVEL', 'WARNING')

from decimal import Decimal

import pytest
from app import create_app
from app import db as _db
from app.buisness.core.permissions import Actor
from app.data.core.asset import Asset
from app.data.core.constants import Condition, ItemType, Role
from app.data.core.item import Item
from app.data.core.location import Location
from app.data.core.property import Property
from app.data.core.user_info.user import User
from app.data.inventory.stock_balance import StockBalance

TEST_PASSWORD = 'correct-horse-42'


@pytest.fixture(scope='function')
def app():
    """Create Flask application with a fresh in-memory database per test"""
    app = create_app({
        'SECRET_KEY': 'test-secret-key',
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'SESSION_COOKIE_SECURE': False,
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    return _db.session


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def _make_user(username, role):
    user = User(username=username, display_name=username.title(), role=role)
    user.set_password(TEST_PASSWORD)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture
def admin_user(app):
    return _make_user('admin', Role.ADMIN)


@pytest.fixture
def manager_user(app):
    return _make_user('storekeeper', Role.STORE_MANAGER)


@pytest.fixture
def department_user(app):
    return _make_user('chef', Role.DEPARTMENT_USER)


@pytest.fixture
def technician_user(app):
    return _make_user('tech', Role.TECHNICIAN)


@pytest.fixture
def actor(manager_user):
    """Store manager actor allowed to create slips"""
    return Actor.from_user(manager_user)


class Factory:
    """Creates committed master data and opening balances for tests"""

    def property(self, name='Harbour View Hotel'):
        prop = Property(name=name)
        _db.session.add(prop)
        _db.session.commit()
        return prop

    def location(self, prop, name):
        location = Location(property_id=prop.id, name=name)
        _db.session.add(location)
        _db.session.commit()
        return location

    def item(self, name, item_type=ItemType.STOCK, unit='pcs', reorder_level=None):
        item = Item(name=name, item_type=item_type, unit=unit, reorder_level=reorder_level)
        _db.session.add(item)
        _db.session.commit()
        return item

    def asset(self, item, tag, condition=Condition.GOOD, location=None):
        asset = Asset(
            tag=tag,
            item_id=item.id,
            condition=condition,
            current_location_id=location.id if location is not None else None,
        )
        _db.session.add(asset)
        _db.session.commit()
        return asset

    def balance(self, item, location, qty):
        balance = StockBalance(item_id=item.id, location_id=location.id, qty_on_hand=Decimal(str(qty)))
        _db.session.add(balance)
        _db.session.commit()
        return balance


@pytest.fixture
def factory(app):
    return Factory()


@pytest.fixture
def world(factory):
    """
    One property with two locations, one more property with its own store,
    a STOCK item and an ASSET item.
    """
    prop = factory.property()
    other = factory.property('Airport Lodge')
    return {
        'property': prop,
        'store': factory.location(prop, 'Main Store'),
        'kitchen': factory.location(prop, 'Kitchen'),
        'other_property': other,
        'other_store': factory.location(other, 'Lodge Store'),
        'soap': factory.item('Dishwashing Liquid', unit='L', reorder_level=Decimal('10')),
        'vacuum': factory.item('Vacuum Cleaner', item_type=ItemType.ASSET),
    }


def build_slip_payload(slip_type, prop, to_location, lines, from_location=None, **extra):
    """Build a slip request body"""
    payload = {
        'slip_type': slip_type,
        'property_id': prop.id,
        'to_location_id': to_location.id,
        'department': 'KITCHEN',
        'lines': lines,
        'signature': {'signed_by_name': 'Jane Doe', 'method': 'TYPED'},
    }
    if from_location is not None:
        payload['from_location_id'] = from_location.id
    payload.update(extra)
    return payload


@pytest.fixture
def slip_payload():
    return build_slip_payload


@pytest.fixture
def authenticated_client(client, manager_user):
    """Test client logged in as a store manager"""
    response = client.post('/login', json={'username': manager_user.username, 'password': TEST_PASSWORD})
    assert response.status_code == 200, response.get_json()
    return client


def login_user(client, username, password=TEST_PASSWORD):
    """Helper function to login a user"""
    return client.post('/login', json={'username': username, 'password': password})
