#!/usr/bin/env python3
"""
Main build orchestrator for the stock ledger
Creates tables, ensures critical users exist and optionally inserts demo data
"""

import os
from decimal import Decimal

from app import create_app, db
from app.logger import get_logger

logger = get_logger("stock_ledger.build")

SYSTEM_USERNAME = 'system'


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if the system and admin users exist
    """
    from app.data.core.user_info.user import User

    admin_username = os.environ.get('ADMIN_USERNAME', 'admin')

    system_user = User.query.filter_by(username=SYSTEM_USERNAME).first()
    if not system_user:
        logger.warning("System user not found")
        return False

    admin_user = User.query.filter_by(username=admin_username).first()
    if not admin_user:
        logger.warning(f"Admin user '{admin_username}' not found")
        return False

    logger.info("Critical data verification passed")
    return True


def insert_critical_data():
    """
    Insert critical data that must always be present: the system user that
    owns automated changes and the first administrator.

    Raises:
        RuntimeError: If ADMIN_PASSWORD is not configured or insertion fails
    """
    from app.data.core.constants import Role
    from app.data.core.user_info.user import User
    import secrets

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    admin_username = os.environ.get('ADMIN_USERNAME', 'admin')
    admin_password = os.environ.get('ADMIN_PASSWORD')
    if not admin_password:
        logger.critical("ADMIN_PASSWORD not set in environment! Run generate_env.py first.")
        raise RuntimeError("ADMIN_PASSWORD environment variable is required to create the admin user")

    logger.warning("Critical data missing, attempting insertion...")

    try:
        system_user, _ = User.find_or_create_from_dict(
            {
                'username': SYSTEM_USERNAME,
                'display_name': 'System',
                'role': Role.ADMIN,
                'is_system': True,
                'is_active': False,
                'password': os.environ.get('SYSTEM_USER_PASSWORD') or secrets.token_urlsafe(32),
            },
            lookup_fields=['username'],
            commit=False,
        )
        User.find_or_create_from_dict(
            {
                'username': admin_username,
                'display_name': 'Administrator',
                'role': Role.ADMIN,
                'password': admin_password,
            },
            user_id=system_user.id,
            lookup_fields=['username'],
            commit=False,
        )
        db.session.commit()
        logger.info("Successfully inserted critical data")
    except Exception as e:
        db.session.rollback()
        logger.error(f"Critical data insertion failed: {e}")
        raise RuntimeError(f"Critical data insertion failed: {e}") from e


DEMO_PROPERTY = {'name': 'Harbour View Hotel', 'address': '1 Quay Street'}

DEMO_LOCATIONS = [
    {'name': 'Main Store', 'floor': 'B1', 'area': 'Stores'},
    {'name': 'Kitchen', 'floor': 'G', 'area': 'F&B'},
    {'name': 'Housekeeping Store', 'floor': '1', 'area': 'Housekeeping'},
    {'name': 'Electrical Room', 'floor': 'B1', 'room': 'E-01', 'area': 'Engineering'},
]

DEMO_ITEMS = [
    {'name': 'Dishwashing Liquid', 'item_type': 'STOCK', 'unit': 'L', 'reorder_level': Decimal('10')},
    {'name': 'LED Bulb 9W', 'item_type': 'STOCK', 'unit': 'pcs', 'reorder_level': Decimal('25')},
    {'name': 'Bed Sheet (King)', 'item_type': 'STOCK', 'unit': 'pcs', 'reorder_level': Decimal('40')},
    {'name': 'Vacuum Cleaner', 'item_type': 'ASSET', 'unit': 'pcs'},
    {'name': 'Cordless Drill', 'item_type': 'ASSET', 'unit': 'pcs'},
]

DEMO_ASSETS = [
    {'tag': 'VAC-001', 'item': 'Vacuum Cleaner', 'serial_no': 'VC-88213'},
    {'tag': 'VAC-002', 'item': 'Vacuum Cleaner', 'serial_no': 'VC-88214'},
    {'tag': 'DRL-001', 'item': 'Cordless Drill', 'serial_no': 'CD-10023'},
]

DEMO_OPENING_STOCK = {
    'Dishwashing Liquid': '60',
    'LED Bulb 9W': '200',
    'Bed Sheet (King)': '120',
}


def insert_demo_data():
    """
    Insert a demo property with locations, items, assets and opening stock.

    Opening stock is posted through a RETURN slip so that every balance is
    backed by movements and an audit event. Skipped when the demo property
    already exists.
    """
    from app.buisness.core.permissions import Actor
    from app.buisness.slips.slip_engine import SlipEngine
    from app.data.core.asset import Asset
    from app.data.core.item import Item
    from app.data.core.location import Location
    from app.data.core.property import Property
    from app.data.core.user_info.user import User

    if Property.query.filter_by(name=DEMO_PROPERTY['name']).first():
        logger.info("Demo data already present, skipping insertion")
        return

    admin = User.query.filter_by(username=os.environ.get('ADMIN_USERNAME', 'admin')).first()
    if admin is None:
        raise RuntimeError("Admin user must exist before demo data is inserted")
    admin_id = admin.id

    try:
        prop = Property.create_from_dict(DEMO_PROPERTY, user_id=admin_id, commit=False)

        locations = {}
        for data in DEMO_LOCATIONS:
            location = Location.create_from_dict(dict(data, property_id=prop.id), user_id=admin_id, commit=False)
            locations[location.name] = location

        items = {}
        for data in DEMO_ITEMS:
            item = Item.create_from_dict(data, user_id=admin_id, commit=False)
            items[item.name] = item

        store = locations['Main Store']
        for data in DEMO_ASSETS:
            Asset.create_from_dict(
                {
                    'tag': data['tag'],
                    'serial_no': data['serial_no'],
                    'item_id': items[data['item']].id,
                    'property_id': prop.id,
                    'current_location_id': store.id,
                },
                user_id=admin_id,
                commit=False,
            )
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Demo data insertion failed: {e}")
        raise

    SlipEngine().create_slip(
        {
            'slip_type': 'RETURN',
            'property_id': prop.id,
            'to_location_id': store.id,
            'department': 'OTHER',
            'notes': 'Opening stock',
            'lines': [
                {'item_id': items[name].id, 'qty': qty}
                for name, qty in DEMO_OPENING_STOCK.items()
            ],
            'signature': {'signed_by_name': admin.name},
        },
        Actor.from_user(admin),
    )
    logger.info("Demo data inserted")


def build_models():
    """Create all tables for the registered models"""
    db.create_all()
    logger.info("All database tables created")


def build_database(seed=True, app=None):
    """
    Main build orchestrator

    Args:
        seed (bool): Insert demo data after critical data
        app (Flask, optional): Application to build against; created if omitted
                               Note: Critical data is ALWAYS checked and inserted
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (seed={seed})")
        build_models()

        logger.info("Verifying and inserting critical data (always required)...")
        insert_critical_data()

        if seed:
            insert_demo_data()

        logger.info("Database build completed successfully")


if __name__ == '__main__':
    import sys
    build_database(seed='--no-debug-data' not in sys.argv)
