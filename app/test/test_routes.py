"""
Tests for the JSON HTTP surface: login, slips, inventory reads, asset search
and maintenance tickets
"""

import pytest
from app import db
from app.data.core.constants import Condition
from app.data.inventory.movement_log import MovementLog
from app.data.slips.slip import Slip
from conftest import TEST_PASSWORD, login_user


@pytest.fixture
def stocked(world, factory):
    factory.balance(world['soap'], world['store'], '10')
    return world


def issue_body(world, qty='4', **extra):
    body = {
        'slip_type': 'ISSUE',
        'property_id': world['property'].id,
        'from_location_id': world['store'].id,
        'to_location_id': world['kitchen'].id,
        'department': 'KITCHEN',
        'lines': [{'item_id': world['soap'].id, 'qty': qty}],
        'signature': {'signed_by_name': 'Jane Doe'},
    }
    body.update(extra)
    return body


# Authentication

def test_endpoints_require_login(client, app):
    for url in ('/slips', '/inventory/stock', '/inventory/movements', '/api/assets/search?q=x'):
        response = client.get(url)
        assert response.status_code == 401, url
        assert response.get_json()['kind'] == 'unauthorized'


def test_login_and_logout(client, manager_user):
    response = login_user(client, manager_user.username)
    assert response.status_code == 200
    assert response.get_json() == {'id': manager_user.id, 'username': 'storekeeper', 'role': 'STORE_MANAGER'}

    assert client.get('/slips').status_code == 200
    assert client.get('/logout').status_code == 200
    assert client.get('/slips').status_code == 401


def test_login_failures(client, manager_user):
    assert login_user(client, manager_user.username, 'wrong-password').status_code == 401
    assert login_user(client, 'nobody').status_code == 401
    assert client.post('/login', json={'username': manager_user.username}).status_code == 400


def test_disabled_account_cannot_login(client, manager_user):
    manager_user.is_active = False
    db.session.commit()

    response = login_user(client, manager_user.username, TEST_PASSWORD)
    assert response.status_code == 401


def test_csrf_token_endpoint(client, app):
    response = client.get('/csrf-token')
    assert response.status_code == 200
    assert response.get_json()['csrf_token']


# Slips

def test_create_slip(authenticated_client, stocked):
    response = authenticated_client.post('/slips', json=issue_body(stocked))

    assert response.status_code == 201
    data = response.get_json()
    assert data['slip_no'] == 'ISS-000001'
    assert data['slip_type'] == 'ISSUE'
    assert data['lines'] == [{
        'line_no': 1,
        'item_id': stocked['soap'].id,
        'item_name': 'Dishwashing Liquid',
        'asset_id': None,
        'asset_tag': None,
        'qty': '4.00',
        'condition_at_move': None,
        'new_condition': None,
        'notes': None,
    }]
    assert data['signature']['signed_by_name'] == 'Jane Doe'
    assert data['signature']['method'] == 'TYPED'


def test_create_slip_insufficient_stock(authenticated_client, stocked):
    response = authenticated_client.post('/slips', json=issue_body(stocked, qty='11'))

    assert response.status_code == 409
    data = response.get_json()
    assert data['kind'] == 'insufficient_stock'
    assert data['current_qty'] == '10.00'
    assert data['delta'] == '-11.00'
    assert Slip.query.count() == 0


def test_create_slip_validation_error(authenticated_client, stocked):
    response = authenticated_client.post('/slips', json=issue_body(stocked, lines=[]))

    assert response.status_code == 400
    data = response.get_json()
    assert data['kind'] == 'validation'
    assert data['field'] == 'lines'


def test_create_slip_unknown_item(authenticated_client, stocked):
    body = issue_body(stocked, lines=[{'item_id': 999, 'qty': '1'}])
    response = authenticated_client.post('/slips', json=body)

    assert response.status_code == 404
    assert response.get_json() == {
        'kind': 'not_found', 'message': 'Item 999 not found', 'entity': 'Item', 'entity_id': 999,
    }


def test_create_slip_blocked_asset(authenticated_client, stocked, factory):
    asset = factory.asset(stocked['vacuum'], 'VAC-001', condition=Condition.SCRAP, location=stocked['store'])
    body = issue_body(stocked, lines=[{'asset_id': asset.id}])

    response = authenticated_client.post('/slips', json=body)

    assert response.status_code == 409
    assert response.get_json()['kind'] == 'asset_not_movable'


def test_department_user_gets_403(client, department_user, stocked):
    login_user(client, department_user.username)

    response = client.post('/slips', json=issue_body(stocked))

    assert response.status_code == 403
    assert response.get_json() == {
        'kind': 'permission_denied',
        'message': 'You do not have permission to perform this action',
    }


def test_read_back_and_list(authenticated_client, stocked):
    created = authenticated_client.post('/slips', json=issue_body(stocked, qty='1')).get_json()
    authenticated_client.post('/slips', json=issue_body(stocked, qty='2'))

    response = authenticated_client.get(f"/slips/{created['id']}")
    assert response.status_code == 200
    assert response.get_json() == created

    listing = authenticated_client.get('/slips?slip_type=ISSUE&per_page=1').get_json()
    assert listing['pagination']['total'] == 2
    assert len(listing['slips']) == 1
    assert listing['slips'][0]['slip_no'] == 'ISS-000002'
    assert 'ISSUE' in listing['options']['slip_types']

    assert authenticated_client.get('/slips?slip_type=RETURN').get_json()['slips'] == []


def test_unknown_slip_is_404(authenticated_client):
    response = authenticated_client.get('/slips/31337')
    assert response.status_code == 404
    assert response.get_json()['entity'] == 'Slip'


def test_bad_date_filter(authenticated_client):
    response = authenticated_client.get('/slips?date_from=yesterday')
    assert response.status_code == 400
    assert response.get_json()['field'] == 'date_from'


def test_unknown_route_is_json(authenticated_client):
    response = authenticated_client.get('/no-such-page')
    assert response.status_code == 404
    assert response.get_json()['kind'] == 'http_error'


# Inventory reads

def test_stock_and_low_stock(authenticated_client, stocked):
    authenticated_client.post('/slips', json=issue_body(stocked, qty='3'))

    balances = authenticated_client.get('/inventory/stock').get_json()['balances']
    assert [(b['location_name'], b['qty_on_hand']) for b in balances] == [('Main Store', '7.00')]

    # Reorder level is 10
    low = authenticated_client.get('/inventory/stock/low').get_json()['balances']
    assert [b['item_name'] for b in low] == ['Dishwashing Liquid']
    assert low[0]['reorder_level'] == '10.00'


def test_stock_hides_zero_balances_on_request(authenticated_client, stocked):
    authenticated_client.post('/slips', json=issue_body(stocked, qty='10'))

    assert len(authenticated_client.get('/inventory/stock').get_json()['balances']) == 1
    assert authenticated_client.get('/inventory/stock?include_zero=false').get_json()['balances'] == []


def test_movement_history(authenticated_client, stocked):
    slip = authenticated_client.post('/slips', json=issue_body(stocked)).get_json()

    data = authenticated_client.get(f"/inventory/movements?slip_id={slip['id']}").get_json()

    assert len(data['movements']) == 1
    movement = data['movements'][0]
    assert movement['movement_type'] == 'ISSUE_OUT'
    assert movement['qty_delta'] == '-4.00'
    assert movement['slip_no'] == slip['slip_no']
    assert movement['item_name'] == 'Dishwashing Liquid'
    assert MovementLog.query.count() == 1


def test_asset_search_endpoint(authenticated_client, world, factory):
    factory.asset(world['vacuum'], 'VAC-001', location=world['store'])

    data = authenticated_client.get('/api/assets/search?q=vac').get_json()
    assert [a['tag'] for a in data['assets']] == ['VAC-001']
    assert authenticated_client.get('/api/assets/search?q=').get_json() == {'assets': []}


# Maintenance

def test_ticket_lifecycle(authenticated_client, world, factory):
    asset = factory.asset(world['vacuum'], 'VAC-001', location=world['store'])

    response = authenticated_client.post('/maintenance/tickets', json={
        'asset_id': asset.id, 'problem': 'Suction is very weak', 'vendor_name': 'Acme Repairs',
    })
    assert response.status_code == 201
    ticket = response.get_json()
    assert ticket['status'] == 'REPORTED'
    assert ticket['asset_tag'] == 'VAC-001'
    assert ticket['asset_condition'] == 'UNDER_MAINTENANCE'

    response = authenticated_client.post(f"/maintenance/tickets/{ticket['id']}/status", json={'status': 'IN_REPAIR'})
    assert response.status_code == 409
    assert response.get_json()['kind'] == 'invalid_transition'

    for status in ('DIAGNOSING', 'FIXED'):
        response = authenticated_client.post(f"/maintenance/tickets/{ticket['id']}/status", json={'status': status})
        assert response.status_code == 200

    response = authenticated_client.post(f"/maintenance/tickets/{ticket['id']}/close", json={})
    assert response.status_code == 200
    closed = response.get_json()
    assert closed['status'] == 'CLOSED'
    assert closed['asset_condition'] == 'GOOD'
    assert [log['status'] for log in closed['logs']] == ['REPORTED', 'DIAGNOSING', 'FIXED', 'CLOSED']


def test_missing_ticket_is_404(authenticated_client):
    response = authenticated_client.post('/maintenance/tickets/999/close', json={})
    assert response.status_code == 404
