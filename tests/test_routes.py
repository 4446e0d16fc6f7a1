"""Rendered pages and form flows through the Flask test client."""

from stubs import sign_in
from vms.services.errors import ConflictError


def registration_form(**overrides):
    data = {
        'full_name': 'Bilal Ahmed',
        'email': 'bilal@example.com',
        'phone': '0321 7654321',
        'city': 'Lahore',
        'password': 'volunteer1',
        'confirm_password': 'volunteer1',
        'availability': 'flexible',
        'skills': ['Education', 'Other'],
        'bio': '',
        'agree_to_terms': 'y',
    }
    data.update(overrides)
    return data


# ==================== PUBLIC ====================

class TestPublic:
    def test_landing_for_guest(self, client):
        response = client.get('/')
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'Al-Khidmat' in body
        assert 'Featured Activities' in body
        assert 'Join Us' in body
        assert '/#about' in body

    def test_security_headers(self, client):
        response = client.get('/')
        assert response.headers['X-Frame-Options'] == 'DENY'
        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert 'Content-Security-Policy' in response.headers

    def test_member_navigation(self, member):
        body = member.get('/').get_data(as_text=True)
        assert 'My Activities' in body
        assert 'Sign Out' in body
        assert 'amina' in body
        assert 'Join Us' not in body


# ==================== AUTHENTICATION ====================

class TestAuthentication:
    def test_login_success_redirects_to_dashboard(self, client):
        response = sign_in(client)
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')

    def test_login_notice_survives_redirect(self, client):
        body = sign_in(client, follow_redirects=True).get_data(as_text=True)
        assert '<strong>Welcome back!</strong>' in body
        assert 'You have signed in successfully.' in body

    def test_login_follows_safe_next(self, client):
        response = sign_in(client, query_string={'next': '/profile'})
        assert response.headers['Location'].endswith('/profile')

    def test_login_ignores_offsite_next(self, client):
        response = sign_in(client, query_string={'next': 'https://evil.example.com/'})
        assert response.headers['Location'].endswith('/dashboard')

    def test_login_wrong_password(self, client):
        response = sign_in(client, password='wrong-password')
        assert response.status_code == 200
        assert 'Invalid login credentials' in response.get_data(as_text=True)

    def test_login_malformed_email_never_calls_provider(self, client, backend):
        response = sign_in(client, email='not-an-email')
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'Invalid email address' in body
        assert backend.called('accounts.authenticate') == 0

    def test_logged_in_user_skips_login_page(self, member):
        response = member.get('/auth/login')
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')

    def test_logout(self, member, backend):
        response = member.post('/auth/logout')
        assert response.status_code == 302
        assert backend.called('accounts.sign_out') == 1
        assert member.get('/dashboard').status_code == 302

    def test_revoked_token_signs_user_out(self, member, backend):
        backend.revoke_all()
        response = member.get('/dashboard')
        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

    def test_expired_token_is_refreshed(self, member, backend):
        backend.expire()
        assert member.get('/dashboard').status_code == 200
        assert member.get('/dashboard').status_code == 200
        assert backend.called('accounts.refresh') == 1

    def test_register_success(self, client, backend):
        response = client.post('/auth/register', data=registration_form())
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard')
        assert 'bilal@example.com' in backend.users

        dashboard = client.get('/dashboard')
        assert dashboard.status_code == 200
        assert 'Welcome, Bilal Ahmed!' in dashboard.get_data(as_text=True)

    def test_register_invalid_shows_field_errors(self, client, backend):
        response = client.post('/auth/register', data=registration_form(phone='123', confirm_password='other'))
        assert response.status_code == 200
        body = response.get_data(as_text=True)
        assert 'Phone number must be at least 10 digits' in body
        assert 'Please fix the errors in the form.' in body
        assert backend.called('accounts.create') == 0

    def test_register_password_mismatch(self, client, backend):
        response = client.post('/auth/register', data=registration_form(confirm_password='volunteer2'))
        assert 'Passwords do not match' in response.get_data(as_text=True)
        assert backend.called('accounts.create') == 0

    def test_register_terms_required(self, client, backend):
        data = registration_form()
        del data['agree_to_terms']
        response = client.post('/auth/register', data=data)
        assert 'You must agree to the terms' in response.get_data(as_text=True)
        assert backend.called('accounts.create') == 0


# ==================== MEMBER PAGES ====================

class TestMemberPages:
    def test_guest_redirected_to_login(self, client):
        for path in ('/dashboard', '/activities', '/profile'):
            response = client.get(path)
            assert response.status_code == 302
            assert '/auth/login' in response.headers['Location']
            assert 'next=' in response.headers['Location']

    def test_dashboard(self, member, backend):
        backend.add_assignment('user-1', backend.add_activity('Food Drive'))
        body = member.get('/dashboard').get_data(as_text=True)
        assert 'Welcome, Amina Khan!' in body
        assert 'Food Drive' in body
        assert 'Active Assignments' in body

    def test_activities_tabs(self, member, backend):
        backend.add_assignment('user-1', backend.add_activity('Food Drive'))
        backend.add_assignment('user-1', backend.add_activity('Blood Camp'), status='cancelled')

        body = member.get('/activities').get_data(as_text=True)
        assert 'Active (1)' in body
        assert 'Cancelled (1)' in body
        assert 'Food Drive' in body
        assert 'Cancel Participation' in body

        cancelled = member.get('/activities?tab=cancelled').get_data(as_text=True)
        assert 'Blood Camp' in cancelled
        assert 'Cancel Participation' not in cancelled

    def test_cancel_renders_from_local_state(self, member, backend):
        row = backend.add_assignment('user-1', backend.add_activity('Food Drive'))
        loads = backend.called('assignments.list_for')

        response = member.post(f"/activities/{row['id']}/cancel")

        body = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'Active (0)' in body
        assert 'Cancelled (1)' in body
        assert 'You have been removed from this activity.' in body
        assert backend.called('assignments.list_for') == loads + 1

    def test_profile_page(self, member):
        body = member.get('/profile').get_data(as_text=True)
        assert 'Amina Khan' in body
        assert 'Email cannot be changed' in body
        assert 'Weekends Only' in body

    def test_profile_short_phone_rejected(self, member, backend):
        response = member.post('/profile', data={
            'full_name': 'Amina Khan',
            'phone': '12345',
            'city': 'Karachi',
            'availability': 'weekends',
            'skills': ['Healthcare'],
            'bio': '',
        })
        body = response.get_data(as_text=True)
        assert 'Phone number must be at least 10 digits' in body
        assert backend.called('profiles.update') == 0

    def test_profile_update(self, member, backend):
        response = member.post('/profile', data={
            'full_name': 'Amina K.',
            'phone': '+92 300 1234567',
            'city': 'Hyderabad',
            'availability': 'evenings',
            'skills': ['Transportation'],
            'bio': 'Weekend driver',
        })
        body = response.get_data(as_text=True)
        assert 'Your profile has been saved successfully.' in body
        assert '<strong>Profile Updated</strong>' in body
        assert backend.profile_rows['user-1']['city'] == 'Hyderabad'
        assert backend.profile_rows['user-1']['skills'] == ['Transportation']


# ==================== OPPORTUNITIES ====================

class TestOpportunities:
    def test_guest_sees_register_to_join(self, client, backend):
        backend.add_activity('Food Drive', max_volunteers=10, current_volunteers=0)
        body = client.get('/opportunities').get_data(as_text=True)
        assert 'Register to Join' in body
        assert '/auth/register' in body
        assert 'Join Activity' not in body
        assert '10 spots left' in body

    def test_member_sees_already_joined(self, member, backend):
        activity_id = backend.add_activity('Food Drive')
        backend.add_assignment('user-1', activity_id)
        body = member.get('/opportunities').get_data(as_text=True)
        assert 'Already Joined' in body
        assert 'disabled' in body
        assert 'Join Activity' not in body

    def test_full_activity(self, member, backend):
        backend.add_activity('Blood Camp', max_volunteers=2, current_volunteers=2)
        body = member.get('/opportunities').get_data(as_text=True)
        assert 'Activity Full' in body
        assert 'No spots left' in body

    def test_empty_state(self, client):
        assert 'No Open Opportunities' in client.get('/opportunities').get_data(as_text=True)

    def test_join(self, member, backend):
        activity_id = backend.add_activity('Food Drive')
        response = member.post(f'/opportunities/{activity_id}/join')
        body = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'You have been added to this volunteer activity.' in body
        assert '<strong>Successfully Joined!</strong>' in body
        assert 'Already Joined' in body
        assert backend.called('activities.list_open') == 1

    def test_failed_join_renders_previous_state(self, member, backend):
        activity_id = backend.add_activity('Food Drive')
        backend.fail('assignments.insert', ConflictError('You have already joined this activity.'))
        body = member.post(f'/opportunities/{activity_id}/join').get_data(as_text=True)
        assert 'You have already joined this activity.' in body
        assert '<strong>Failed to Join</strong>' in body
        assert 'Join Activity' in body
        assert 'Already Joined' not in body

    def test_guest_join_goes_to_login(self, client, backend):
        activity_id = backend.add_activity('Food Drive')
        response = client.post(f'/opportunities/{activity_id}/join')
        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']
        assert backend.called('assignments.insert') == 0
