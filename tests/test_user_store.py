"""Unit tests for auth/store.py -- credential store and first-run admin seeding."""

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.tokens import hash_password, verify_password


def _make_user(store, username="admin", password="secret-pass"):
    return store.create_user(User(username=username, hashed_password=hash_password(password)))


class TestUserStore:
    def test_empty_store_has_no_users(self, user_store):
        assert user_store.has_users() is False

    def test_create_and_fetch(self, user_store):
        uid = _make_user(user_store)
        by_name = user_store.get_by_username("admin")
        by_id = user_store.get_by_id(uid)
        assert by_name is not None and by_id is not None
        assert by_name.id == by_id.id == uid
        assert by_name.created_at == by_name.updated_at
        assert user_store.has_users() is True

    def test_username_is_unique(self, user_store):
        _make_user(user_store)
        with pytest.raises(IntegrityError):
            _make_user(user_store)

    def test_lookup_is_case_sensitive(self, user_store):
        _make_user(user_store)
        assert user_store.get_by_username("Admin") is None

    def test_update_password(self, user_store):
        uid = _make_user(user_store, password="old-pass")
        before = user_store.get_by_id(uid)

        assert user_store.update_password(uid, hash_password("new-pass")) is True

        after = user_store.get_by_id(uid)
        assert verify_password("new-pass", after.hashed_password)
        assert not verify_password("old-pass", after.hashed_password)
        assert after.updated_at >= before.updated_at
        assert after.created_at == before.created_at

    def test_update_password_unknown_user(self, user_store):
        assert user_store.update_password(999, hash_password("x" * 8)) is False


class TestEnsureAdmin:
    def test_creates_admin_with_configured_password(self, user_store):
        generated = user_store.ensure_admin("admin", "configured-pass")
        assert generated is None
        user = user_store.get_by_username("admin")
        assert verify_password("configured-pass", user.hashed_password)

    def test_no_op_when_users_exist(self, user_store):
        _make_user(user_store, username="someone")
        assert user_store.ensure_admin("admin", "configured-pass") is None
        assert user_store.get_by_username("admin") is None

    def test_production_requires_password(self, user_store):
        with pytest.raises(ValueError, match="ADMIN_PASSWORD"):
            user_store.ensure_admin("admin", "", debug=False)
        assert user_store.has_users() is False

    def test_debug_generates_password(self, user_store):
        generated = user_store.ensure_admin("admin", "", debug=True)
        assert generated
        user = user_store.get_by_username("admin")
        assert verify_password(generated, user.hashed_password)
