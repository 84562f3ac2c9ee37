"""
Pytest configuration and fixtures for DigForWeb tests.

This module provides common fixtures and test utilities.
"""
import pytest
from datetime import date, datetime
from digforweb import create_app
from digforweb.extensions import db
from digforweb.models.entities import (
    ActionStatus, Case, Evidence, ForensicAction, ForensicStage, Snapshot, Victim
)
from digforweb.models.user import User
from digforweb.services.backends import MemoryBackend
from digforweb.services.entity_store import EntityStore
from digforweb.services.permissions import ROLE_OFFICER, ROLE_VIEWER


PASSWORD = 'secret123'


@pytest.fixture
def app():
    """Create application for testing (in-memory SQLite)."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

    # No app context stays pushed: each test request gets its own ``g``
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create CLI test runner."""
    return app.test_cli_runner()


def _make_user(app, email, name, role):
    with app.app_context():
        user = User(email=email, name=name, role=role, contact='+62-811-0000')
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return {'id': user.id, 'email': email, 'password': PASSWORD, 'role': role}


@pytest.fixture
def officer(app):
    """Officer account (full access)."""
    return _make_user(app, 'officer@test.com', 'Test Officer', ROLE_OFFICER)


@pytest.fixture
def viewer(app):
    """Viewer account (read only)."""
    return _make_user(app, 'viewer@test.com', 'Test Viewer', ROLE_VIEWER)


def login(client, user):
    return client.post('/auth/login', data={
        'email': user['email'],
        'password': user['password'],
    })


@pytest.fixture
def officer_client(client, officer):
    """Test client logged in as an officer."""
    response = login(client, officer)
    assert response.status_code == 302
    return client


@pytest.fixture
def viewer_client(client, viewer):
    """Test client logged in as a viewer."""
    response = login(client, viewer)
    assert response.status_code == 302
    return client


def api_token(client, user):
    response = client.post('/api/login', json={
        'email': user['email'],
        'password': user['password'],
    })
    assert response.status_code == 200
    return response.get_json()['token']


@pytest.fixture
def officer_headers(client, officer):
    """Bearer headers for the REST API as an officer."""
    return {'Authorization': f'Bearer {api_token(client, officer)}'}


@pytest.fixture
def viewer_headers(client, viewer):
    """Bearer headers for the REST API as a viewer."""
    return {'Authorization': f'Bearer {api_token(client, viewer)}'}


@pytest.fixture
def snapshot():
    """
    Two victims; victim 1 has cases 1 and 2, victim 2 has case 3.
    Case 1 has evidence 1, 2 and actions 1, 2; case 3 has evidence 3.
    """
    created = datetime(2025, 12, 1, 9, 0)
    return Snapshot(
        victims=(
            Victim(id=1, name='John Anderson', contact='+1-555-0123', location='New York, NY',
                   report_date=date(2025, 12, 1), created_at=created),
            Victim(id=2, name='Sarah Mitchell', created_at=created),
        ),
        cases=(
            Case(id=1, victim_id=1, case_type='Email Compromise', status='active',
                 created_at=datetime(2025, 12, 1, 10, 0)),
            Case(id=2, victim_id=1, case_type='Phishing', created_at=datetime(2025, 12, 2, 10, 0)),
            Case(id=3, victim_id=2, case_type='Data Theft', status='Active',
                 created_at=datetime(2025, 12, 3, 10, 0)),
        ),
        evidence=(
            Evidence(id=1, case_id=1, evidence_type='Email Logs', storage_location='Server-A'),
            Evidence(id=2, case_id=1, evidence_type='Network Traffic', storage_location='Server-A'),
            Evidence(id=3, case_id=3, evidence_type='Mobile Device', storage_location='Locker 4'),
        ),
        actions=(
            ForensicAction(id=1, case_id=1, stage=ForensicStage.IDENTIFICATION,
                           status=ActionStatus.COMPLETED, created_at=datetime(2025, 12, 1, 11, 0)),
            ForensicAction(id=2, case_id=1, stage=ForensicStage.COLLECTION,
                           created_at=datetime(2025, 12, 4, 11, 0)),
        ),
    )


@pytest.fixture
def memory_backend(snapshot):
    """In-memory backend preloaded with the sample snapshot."""
    return MemoryBackend(snapshot, {'victims': 2, 'cases': 3, 'evidence': 3, 'actions': 2})


@pytest.fixture
def officer_store(memory_backend):
    return EntityStore(memory_backend, role=ROLE_OFFICER)


@pytest.fixture
def viewer_store(memory_backend):
    return EntityStore(memory_backend, role=ROLE_VIEWER)


@pytest.fixture
def empty_store():
    return EntityStore(MemoryBackend(), role=ROLE_OFFICER)
