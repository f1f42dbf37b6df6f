import pytest
from fastapi.testclient import TestClient

from tracker.client import ApiError, TrackerClient, group_by_status
from tracker.main import app


@pytest.fixture
def tracker():
    return TrackerClient(http=TestClient(app))


def test_client_register_and_board(tracker):
    assert tracker.health() is True
    tracker.register('board@test.com', 'password123')
    assert tracker.authenticated
    stripe = tracker.create_application('Stripe', 'SWE Intern')
    figma = tracker.create_application('Figma', 'PM Intern', status='oa', referral=True)
    board = tracker.board()
    assert set(board['columns']) == {'applied', 'oa', 'interview', 'offer', 'rejected'}
    assert [a['id'] for a in board['columns']['applied']] == [stripe['id']]
    assert [a['id'] for a in board['columns']['oa']] == [figma['id']]
    assert board['columns']['offer'] == []
    assert board['stats']['total'] == 2


def test_client_move_and_delete(tracker):
    tracker.register('move@test.com', 'password123')
    item = tracker.create_application('Stripe', 'SWE Intern')
    assert tracker.move(item, 'applied') is item
    moved = tracker.move(item, 'interview')
    assert moved['status'] == 'interview'
    assert moved['company'] == 'Stripe'
    tracker.delete_application(item['id'])
    assert tracker.list_applications() == []
    with pytest.raises(ApiError) as exc:
        tracker.delete_application(item['id'])
    assert exc.value.status_code == 404
    assert exc.value.message == 'Application not found'
    # a 404 does not end the session
    assert tracker.authenticated


def test_client_surfaces_server_message(tracker):
    tracker.register('errors@test.com', 'password123')
    with pytest.raises(ApiError) as exc:
        tracker.create_application('  ', 'SWE Intern')
    assert exc.value.status_code == 400
    assert exc.value.message == 'Company is required'


def test_client_clears_token_on_401(tracker):
    tracker.token = 'expired-or-forged'
    with pytest.raises(ApiError) as exc:
        tracker.stats()
    assert exc.value.status_code == 401
    assert tracker.token is None


def test_client_login_failure_keeps_no_token(tracker):
    tracker.register('login@test.com', 'password123')
    tracker.logout()
    with pytest.raises(ApiError) as exc:
        tracker.login('login@test.com', 'wrong-password')
    assert exc.value.message == 'Invalid credentials'
    assert tracker.token is None
    tracker.login('login@test.com', 'password123')
    assert tracker.list_applications() == []


def test_group_by_status_keeps_order_and_fills_columns():
    items = [
        {'id': 3, 'status': 'offer'},
        {'id': 2, 'status': 'applied'},
        {'id': 1, 'status': 'offer'},
    ]
    columns = group_by_status(items)
    assert [a['id'] for a in columns['offer']] == [3, 1]
    assert [a['id'] for a in columns['applied']] == [2]
    assert columns['oa'] == columns['interview'] == columns['rejected'] == []
