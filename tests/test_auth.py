"""
Tests for password hashing, session tokens and the auth endpoints.
"""

from app.auth import (
    SESSION_COOKIE,
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    """Tests for password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password('s3cret!')
        assert hashed != 's3cret!'
        assert verify_password('s3cret!', hashed) is True
        assert verify_password('wrong', hashed) is False

    def test_malformed_hash(self):
        assert verify_password('s3cret!', 'not-a-hash') is False


class TestSessionTokens:
    """Tests for signed session tokens."""

    def test_round_trip(self):
        assert decode_session_token(create_session_token(7))['user_id'] == 7

    def test_tampered_token(self):
        assert decode_session_token(create_session_token(7) + 'x') is None


class TestAuthApi:
    """Tests for register, login, logout and /api/me."""

    def test_register_logs_in(self, client):
        response = client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        assert response.status_code == 201
        assert SESSION_COOKIE in response.cookies
        assert client.get('/api/me').json()['username'] == 'admin'

    def test_duplicate_username(self, client):
        client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        response = client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        assert response.status_code == 400

    def test_login(self, client):
        client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        client.cookies.clear()
        assert client.get('/api/me').status_code == 401

        response = client.post('/api/login', json={'username': 'admin', 'password': 'pw'})
        assert response.status_code == 200
        assert client.get('/api/me').json()['username'] == 'admin'

    def test_bad_credentials(self, client):
        client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        response = client.post('/api/login', json={'username': 'admin', 'password': 'nope'})
        assert response.status_code == 401
        response = client.post('/api/login', json={'username': 'ghost', 'password': 'pw'})
        assert response.status_code == 401

    def test_logout(self, client):
        client.post('/api/register', json={'username': 'admin', 'password': 'pw'})
        assert client.post('/api/logout').status_code == 204
        assert client.get('/api/me').status_code == 401
