"""
Authentication tests: passwords, tokens, login and the bootstrap admin.
"""
from datetime import timedelta

import pytest

from auth.security import (
    validate_password, get_password_hash, verify_password,
    create_access_token, decode_access_token,
)
from core.exceptions import ConflictError, ValidationError
from database.models import UserRole
from services.auth_service import AuthService, Credentials, PasswordIdentityProvider
from services.user_service import UserService
from conftest import TEST_PASSWORD


class TestPasswords:

    @pytest.mark.parametrize('password,ok', [
        ('Secret#123', True),
        ('a1!', False),
        ('password!', False),
        ('password1', False),
        ('', False),
        ('a1!' + 'x' * 70, False),
    ])
    def test_validate_password(self, password, ok):
        is_valid, message = validate_password(password)
        assert is_valid is ok
        assert (message is None) is ok

    def test_hash_and_verify(self):
        hashed = get_password_hash('Secret#123')
        assert hashed != 'Secret#123'
        assert verify_password('Secret#123', hashed)
        assert not verify_password('Secret#124', hashed)

    def test_empty_hash_never_matches(self):
        assert not verify_password('anything', '')


class TestTokens:

    def test_round_trip_claims(self):
        token = create_access_token({'sub': 7, 'role': 'admin'})
        payload = decode_access_token(token)
        assert payload['sub'] == '7'
        assert payload['role'] == 'admin'
        assert payload['type'] == 'access'

    def test_expired_token_is_rejected(self):
        token = create_access_token({'sub': 1}, expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_wrong_key_is_rejected(self):
        token = create_access_token({'sub': 1}, secret_key='another-key')
        assert decode_access_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_access_token('not-a-token') is None


class TestLogin:

    def test_login_by_username_and_email(self, repo, make):
        user = make.user(UserRole.OFFICER, username='asha')
        by_name = AuthService.login(repo, 'asha', TEST_PASSWORD)
        by_email = AuthService.login(repo, 'ASHA@crms.test', TEST_PASSWORD)

        assert by_name.user.id == user.id
        assert by_email.user.id == user.id
        payload = decode_access_token(by_name.access_token)
        assert payload['sub'] == str(user.id)
        assert payload['role'] == 'officer'
        assert by_name.token_type == 'bearer'

    def test_login_records_last_login(self, repo, make):
        user = make.user(username='asha')
        assert UserService.get(repo, user.id).last_login is None
        AuthService.login(repo, 'asha', TEST_PASSWORD)
        assert UserService.get(repo, user.id).last_login is not None

    @pytest.mark.parametrize('login_id,password', [
        ('asha', 'Wrong#123'),
        ('nobody', TEST_PASSWORD),
        ('', TEST_PASSWORD),
        ('asha', ''),
    ])
    def test_bad_credentials(self, repo, make, login_id, password):
        make.user(username='asha')
        assert AuthService.login(repo, login_id, password) is None

    def test_inactive_account_cannot_login(self, repo, make):
        make.user(username='asha', is_active=False)
        provider = PasswordIdentityProvider()
        assert provider.authenticate(repo, Credentials('asha', TEST_PASSWORD)) is None


class TestUsers:

    def test_create_hashes_and_normalizes(self, repo):
        user = UserService.create(repo, {
            'email': ' Priya@Example.com ', 'username': 'priya', 'password': 'Secret#123', 'role': 'officer',
        })
        stored = UserService.get(repo, user.id)
        assert stored.email == 'priya@example.com'
        assert stored.role == UserRole.OFFICER
        assert verify_password('Secret#123', stored.hashed_password)

    def test_weak_password_is_rejected(self, repo):
        with pytest.raises(ValidationError) as exc:
            UserService.create(repo, {'email': 'a@b.c', 'username': 'a', 'password': 'short'})
        assert exc.value.field == 'password'

    def test_duplicates_conflict(self, repo, make):
        make.user(username='asha')
        with pytest.raises(ConflictError):
            UserService.create(repo, {'email': 'asha@crms.test', 'username': 'other', 'password': 'Secret#123'})
        with pytest.raises(ConflictError):
            UserService.create(repo, {'email': 'new@crms.test', 'username': 'asha', 'password': 'Secret#123'})

    def test_self_service_fields_exclude_role(self, repo, make):
        from services.user_service import SELF_SERVICE_FIELDS
        user = make.user(username='asha')
        UserService.update(repo, user.id, {'first_name': 'Asha', 'role': 'admin'}, allowed_fields=SELF_SERVICE_FIELDS)
        stored = UserService.get(repo, user.id)
        assert stored.first_name == 'Asha'
        assert stored.role == UserRole.USER

    def test_deactivate(self, repo, make):
        user = make.user(username='asha')
        UserService.deactivate(repo, user.id)
        assert UserService.get(repo, user.id).is_active is False


class TestBootstrapAdmin:

    def test_skipped_without_config(self, repo):
        assert AuthService.ensure_admin(repo) is None
        assert UserService.list(repo) == []

    def test_creates_admin_once(self, repo):
        first = AuthService.ensure_admin(repo, email='root@crms.test', username='root', password='Root#1234')
        second = AuthService.ensure_admin(repo, email='root@crms.test', username='root', password='Root#1234')
        assert first.role == UserRole.ADMIN
        assert second.id == first.id
        assert len(UserService.list(repo)) == 1
        assert AuthService.login(repo, 'root', 'Root#1234') is not None

    def test_promotes_existing_account(self, repo, make):
        user = make.user(username='root', email='root@crms.test', is_active=False)
        admin = AuthService.ensure_admin(repo, email='root@crms.test', username='root', password='Root#1234')
        stored = UserService.get(repo, admin.id)
        assert stored.id == user.id
        assert stored.role == UserRole.ADMIN
        assert stored.is_active is True
