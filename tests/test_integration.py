"""
Integration tests for end-to-end workflows.

Tests cover complete user journeys through the HTML screens, the JSON REST
API and the CLI.
"""
import pytest
from digforweb.models.entities import EntityKind
from digforweb.services.backends import BlobBackend
from digforweb.services.entity_store import EntityStore
from digforweb.services.navigation import SESSION_KEY


def stored_snapshot(app):
    with app.app_context():
        snapshot, _ = BlobBackend(app.config['STORAGE_KEY_PREFIX']).load()
    return snapshot


def seed(app):
    """Victim 1 -> case 1 -> evidence 1 and action 1; victim 2 with no cases."""
    with app.app_context():
        store = EntityStore(BlobBackend(app.config['STORAGE_KEY_PREFIX']), role='officer')
        store.create(EntityKind.VICTIM, {'name': 'John Anderson'})
        store.create(EntityKind.VICTIM, {'name': 'Sarah Mitchell'})
        store.create(EntityKind.CASE, {'victim_id': 1, 'case_type': 'Email Compromise', 'status': 'active'})
        store.create(EntityKind.EVIDENCE, {'case_id': 1, 'evidence_type': 'Email Logs',
                                           'storage_location': 'Server-A'})
        store.create(EntityKind.ACTION, {'case_id': 1, 'stage': 'identification'})


@pytest.mark.integration
class TestAuthenticationFlow:
    """Test complete authentication workflow."""

    def test_login_logout_flow(self, client, officer):
        # Login
        response = client.post('/auth/login', data={
            'email': officer['email'],
            'password': officer['password'],
        }, follow_redirects=True)

        assert response.status_code == 200
        assert b'Dashboard' in response.data

        # Access protected page
        response = client.get('/dashboard/')
        assert response.status_code == 200

        # Logout
        response = client.get('/auth/logout', follow_redirects=True)
        assert response.status_code == 200

        # Try to access protected page after logout
        response = client.get('/dashboard/')
        assert response.status_code == 302

    def test_invalid_login_is_shown_inline(self, client, officer):
        response = client.post('/auth/login', data={
            'email': officer['email'],
            'password': 'WrongPassword',
        })

        assert response.status_code == 401
        assert b'Invalid email or password.' in response.data

    def test_register_viewer(self, client):
        response = client.post('/auth/register', data={
            'name': 'Ayu Lestari',
            'email': 'ayu@digforweb.id',
            'role': 'viewer',
            'password': 'secret123',
            'password_confirm': 'secret123',
        })

        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

        response = client.post('/auth/login', data={
            'email': 'ayu@digforweb.id', 'password': 'secret123'
        })
        assert response.status_code == 302

    def test_register_duplicate_email(self, client, viewer):
        response = client.post('/auth/register', data={
            'name': 'Someone',
            'email': viewer['email'],
            'role': 'viewer',
            'password': 'secret123',
            'password_confirm': 'secret123',
        })

        assert response.status_code == 200
        assert b'already registered' in response.data


@pytest.mark.integration
class TestRecordManagementFlow:
    """Create, edit and delete through the HTML screens."""

    def test_create_victim_then_case(self, app, officer_client):
        response = officer_client.post('/victims/create', data={
            'name': 'Budi Santoso',
            'contact': '0811-222-333',
            'location': 'Jakarta',
            'report_date': '2025-12-05',
        })
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/victims/1')

        response = officer_client.post('/cases/create', data={
            'victim_id': '1',
            'case_type': 'Account Takeover',
            'status': 'active',
        })
        assert response.status_code == 302

        snapshot = stored_snapshot(app)
        assert snapshot.victims[0].name == 'Budi Santoso'
        assert snapshot.cases[0].victim_id == 1
        assert snapshot.cases[0].status == 'active'

    def test_case_creation_disabled_without_victims(self, officer_client):
        response = officer_client.get('/cases/create')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/cases/')

    def test_missing_required_field_is_shown_inline(self, app, officer_client):
        response = officer_client.post('/victims/create', data={'name': ''})

        assert response.status_code == 200
        assert b'The victim name is required' in response.data
        assert len(stored_snapshot(app)) == 0

    def test_generate_evidence_hash(self, app, officer_client):
        seed(app)

        response = officer_client.post('/evidence/create', data={
            'case_id': '1',
            'evidence_type': 'Disk Image',
            'storage_location': 'Locker 7',
            'generate_hash': 'y',
        })

        assert response.status_code == 302
        evidence = stored_snapshot(app).evidence[-1]
        assert len(evidence.integrity_hash) == 64

    def test_edit_action(self, app, officer_client):
        seed(app)

        response = officer_client.post('/actions/1/edit', data={
            'case_id': '1',
            'stage': 'preservation',
            'description': 'Imaged the mail server',
            'person_in_charge': 'Dr. Emily Carter',
            'status': 'completed',
        })

        assert response.status_code == 302
        action = stored_snapshot(app).actions[0]
        assert action.stage.value == 'preservation'
        assert action.status.value == 'completed'

    def test_edit_of_deleted_record_falls_back_to_list(self, officer_client):
        response = officer_client.get('/cases/42/edit')

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/cases/')

    def test_delete_victim_asks_for_confirmation_then_cascades(self, app, officer_client):
        seed(app)

        response = officer_client.get('/victims/1/delete')
        assert response.status_code == 200
        assert b'1 case(s)' in response.data
        assert b'1 evidence item(s)' in response.data
        assert len(stored_snapshot(app).victims) == 2

        response = officer_client.post('/victims/1/delete', data={})
        assert response.status_code == 302

        snapshot = stored_snapshot(app)
        assert [v.id for v in snapshot.victims] == [2]
        assert snapshot.cases == ()
        assert snapshot.evidence == ()
        assert snapshot.actions == ()

    def test_missing_record_renders_not_found_page(self, officer_client):
        response = officer_client.get('/evidence/99')

        assert response.status_code == 404
        assert b'Evidence #99 was not found.' in response.data

    def test_viewer_is_read_only(self, app, viewer_client):
        seed(app)

        assert viewer_client.get('/cases/1').status_code == 200
        assert viewer_client.get('/victims/create').status_code == 403
        assert viewer_client.post('/victims/1/delete').status_code == 403
        assert len(stored_snapshot(app).victims) == 2

    def test_search(self, app, officer_client):
        seed(app)

        response = officer_client.get('/victims/?q=sarah')

        assert b'Sarah Mitchell' in response.data
        assert b'John Anderson' not in response.data


@pytest.mark.integration
class TestNavigationFlow:
    """Navigation state kept in the session."""

    def test_selecting_a_page_resets_subviews(self, app, officer_client):
        seed(app)
        officer_client.get('/cases/1')

        with officer_client.session_transaction() as session:
            assert session[SESSION_KEY]['subviews']['cases'] == ['detail', 1]

        response = officer_client.get('/nav/evidence')
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/evidence/')

        with officer_client.session_transaction() as session:
            assert session[SESSION_KEY]['page'] == 'evidence'
            assert session[SESSION_KEY]['subviews']['cases'] == ['list', None]

    def test_back_returns_to_list(self, app, officer_client):
        seed(app)
        officer_client.get('/victims/1')

        response = officer_client.get('/nav/victims/back')

        assert response.status_code == 302
        with officer_client.session_transaction() as session:
            assert session[SESSION_KEY]['subviews']['victims'] == ['list', None]

    def test_unknown_page(self, officer_client):
        assert officer_client.get('/nav/reports').status_code == 404


@pytest.mark.integration
class TestDashboard:
    """Dashboard statistics page."""

    def test_dashboard_shows_counts(self, app, officer_client):
        seed(app)

        response = officer_client.get('/dashboard/')

        assert response.status_code == 200
        assert b'Recent Activity' in response.data
        assert b'Case #1' in response.data


@pytest.mark.integration
class TestRestApi:
    """JSON REST API with Indonesian field names."""

    def test_login_returns_token_and_role(self, client, officer):
        response = client.post('/api/login', json={
            'email': officer['email'], 'password': officer['password']
        })

        body = response.get_json()
        assert response.status_code == 200
        assert body['role'] == 'petugas'
        assert body['token']
        assert body['message']

    def test_login_with_bad_password(self, client, officer):
        response = client.post('/api/login', json={
            'email': officer['email'], 'password': 'nope'
        })

        assert response.status_code == 401
        assert response.get_json()['message'] == 'Invalid email or password.'

    def test_register_petugas(self, client):
        response = client.post('/api/register-petugas', json={
            'name': 'Rina', 'email': 'rina@example.com',
            'password': 'secret123', 'password_confirmation': 'secret123',
        })

        assert response.status_code == 201
        assert response.get_json()['role'] == 'petugas'

    def test_register_viewer_with_mismatched_confirmation(self, client):
        response = client.post('/api/register-viewer', json={
            'name': 'Rina', 'email': 'rina@example.com',
            'password': 'secret123', 'password_confirmation': 'secret124',
        })

        assert response.status_code == 400
        assert 'password_confirmation' in response.get_json()['errors']

    def test_requires_token(self, client):
        assert client.get('/api/korban').status_code == 401
        assert client.get('/api/korban', headers={'Authorization': 'Bearer junk'}).status_code == 401

    def test_crud_round_trip(self, client, officer_headers):
        response = client.post('/api/korban', json={'data': {
            'nama': 'Budi', 'kontak': '0811', 'tgl_laporan': '2025-12-01'
        }}, headers=officer_headers)
        assert response.status_code == 201
        victim = response.get_json()['data']
        assert victim['id'] == 1
        assert victim['nama'] == 'Budi'

        response = client.post('/api/kasus', json={
            'korban_id': victim['id'], 'jenis_kasus': 'Penipuan', 'status_kasus': 'dalam investigasi'
        }, headers=officer_headers)
        assert response.status_code == 201
        case = response.get_json()['data']
        assert case['status_kasus'] == 'dalam investigasi'

        response = client.put(f"/api/kasus/{case['id']}", json={'status_kasus': 'selesai'},
                              headers=officer_headers)
        assert response.get_json()['data']['status_kasus'] == 'selesai'

        response = client.get('/api/kasus', headers=officer_headers)
        assert [c['id'] for c in response.get_json()['data']] == [case['id']]

    def test_create_with_missing_parent_reports_wire_field(self, client, officer_headers):
        response = client.post('/api/tindakan', json={
            'case_id': 5, 'tahap_forensik': 'analysis'
        }, headers=officer_headers)

        assert response.status_code == 400
        assert 'case_id' in response.get_json()['errors']

    def test_fractional_foreign_key_is_rejected(self, app, client, officer_headers):
        seed(app)

        response = client.post('/api/kasus', json={
            'korban_id': 1.9, 'jenis_kasus': 'Phishing'
        }, headers=officer_headers)

        assert response.status_code == 400
        assert 'korban_id' in response.get_json()['errors']
        assert len(stored_snapshot(app).cases) == 1

    def test_delete_cascades_and_second_delete_is_404(self, app, client, officer_headers):
        seed(app)

        response = client.delete('/api/korban/1', headers=officer_headers)
        assert response.status_code == 200
        assert response.get_json()['data']['deleted'] == {
            'victims': 1, 'cases': 1, 'evidence': 1, 'actions': 1
        }

        response = client.delete('/api/korban/1', headers=officer_headers)
        assert response.status_code == 404

        response = client.get('/api/kasus/1', headers=officer_headers)
        assert response.status_code == 404

    def test_viewer_cannot_write(self, app, client, viewer_headers):
        seed(app)

        assert client.get('/api/evidence', headers=viewer_headers).status_code == 200
        response = client.post('/api/korban', json={'nama': 'X'}, headers=viewer_headers)
        assert response.status_code == 403
        assert client.delete('/api/korban/1', headers=viewer_headers).status_code == 403

    def test_logout_revokes_token(self, client, officer, officer_headers):
        response = client.post('/api/logout', headers=officer_headers)
        assert response.status_code == 200

        response = client.get('/api/korban', headers=officer_headers)
        assert response.status_code == 401

        response = client.post('/api/login', json={
            'email': officer['email'], 'password': officer['password']
        })
        fresh_headers = {'Authorization': f"Bearer {response.get_json()['token']}"}
        assert client.get('/api/korban', headers=fresh_headers).status_code == 200


@pytest.mark.integration
class TestCli:
    """Flask CLI commands."""

    def test_seed_demo_and_check_integrity(self, app, runner):
        result = runner.invoke(args=['seed-demo'])
        assert 'Demo data loaded' in result.output

        result = runner.invoke(args=['seed-demo'])
        assert 'not empty' in result.output

        result = runner.invoke(args=['check-integrity'])
        assert result.exit_code == 0
        assert result.output.startswith('OK')

        snapshot = stored_snapshot(app)
        assert snapshot.counts() == {'victims': 2, 'cases': 2, 'evidence': 2, 'actions': 3}

    def test_create_user(self, app, runner):
        result = runner.invoke(args=[
            'create-user', '--name', 'Admin', '--email', 'admin@digforweb.com',
            '--password', 'admin123', '--role', 'officer',
        ])

        assert result.exit_code == 0
        assert 'admin@digforweb.com' in result.output
