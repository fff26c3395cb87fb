"""Unit tests for auth/accounts.py -- account operations without HTTP.

Covers:
- register: validation order, no record on validation failure, conflict,
  rollback when token issuance fails
- login: unknown email, wrong password, success
- login_status: anonymous, garbage, valid
- update_profile: allow-listed fields only, empty values ignored
- delete_user: missing id
"""

from __future__ import annotations

import logging

import pytest
from sqlalchemy.exc import OperationalError

from auth import accounts
from auth.errors import BadRequest, Conflict, InternalError, NotFound
from auth.models import Role
from auth.passwords import verify_password
from auth.tokens import issue_token, verify_token


class TestRegister:
    def test_register_returns_user_and_token(self, store):
        user, token = accounts.register(store, "Rona", "rona@x.com", "secret1")
        assert user.role is Role.user
        assert verify_token(token).user_id == user.id
        assert verify_password("secret1", store.find_by_id(user.id).hashed_password)

    @pytest.mark.parametrize(
        "name,email,password",
        [
            (None, "rona@x.com", "secret1"),
            ("Rona", None, "secret1"),
            ("Rona", "rona@x.com", None),
            ("  ", "rona@x.com", "secret1"),
            ("Rona", "", "secret1"),
        ],
    )
    def test_missing_fields(self, store, name, email, password):
        with pytest.raises(BadRequest, match="All fields are required"):
            accounts.register(store, name, email, password)
        assert store.count() == 0

    def test_short_password_persists_nothing(self, store):
        with pytest.raises(BadRequest, match="at least 6 characters"):
            accounts.register(store, "Rona", "rona@x.com", "12345")
        assert store.count() == 0
        assert store.find_by_email("rona@x.com") is None

    def test_failed_rollback_still_reports_issuance_error(self, store, monkeypatch, caplog):
        def boom(user_id):
            raise RuntimeError("signing failed")

        def broken_delete(user_id):
            raise OperationalError("DELETE ...", {}, Exception("database is locked"))

        monkeypatch.setattr(accounts, "issue_token", boom)
        monkeypatch.setattr(store, "delete_by_id", broken_delete)
        with caplog.at_level(logging.ERROR, logger="authkit.auth"):
            with pytest.raises(InternalError) as excinfo:
                accounts.register(store, "Rona", "rona@x.com", "secret1")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert "Token issuance failed" in caplog.text
        assert "Rollback of new user" in caplog.text

    def test_six_character_password_is_enough(self, store):
        user, _ = accounts.register(store, "Rona", "rona@x.com", "123456")
        assert store.find_by_id(user.id) is not None

    def test_malformed_email(self, store):
        with pytest.raises(BadRequest, match="valid email"):
            accounts.register(store, "Rona", "not-an-email", "secret1")
        assert store.count() == 0

    def test_duplicate_email(self, store):
        accounts.register(store, "Rona", "rona@x.com", "secret1")
        with pytest.raises(Conflict):
            accounts.register(store, "Rona Again", "Rona@X.com", "secret2")
        assert store.count() == 1

    def test_token_failure_rolls_back_the_record(self, store, monkeypatch):
        def boom(user_id):
            raise RuntimeError("signing failed")

        monkeypatch.setattr(accounts, "issue_token", boom)
        with pytest.raises(InternalError):
            accounts.register(store, "Rona", "rona@x.com", "secret1")
        assert store.find_by_email("rona@x.com") is None


class TestLogin:
    def test_login_success(self, store, make_user):
        created = make_user(store, email="rona@x.com", password="secret1")
        user, token = accounts.login(store, "rona@x.com", "secret1")
        assert user.id == created.id
        assert verify_token(token).user_id == created.id

    def test_login_email_is_case_insensitive(self, store, make_user):
        created = make_user(store, email="rona@x.com", password="secret1")
        user, _ = accounts.login(store, " RONA@x.com", "secret1")
        assert user.id == created.id

    def test_unknown_email(self, store):
        with pytest.raises(NotFound, match="sign up"):
            accounts.login(store, "nobody@x.com", "secret1")

    def test_wrong_password(self, store, make_user):
        make_user(store, email="rona@x.com", password="secret1")
        with pytest.raises(BadRequest, match="Invalid credentials"):
            accounts.login(store, "rona@x.com", "wrong")

    def test_missing_fields(self, store):
        with pytest.raises(BadRequest):
            accounts.login(store, "rona@x.com", None)


class TestLoginStatus:
    def test_anonymous(self):
        assert accounts.login_status(None) is False
        assert accounts.login_status("") is False

    def test_garbage(self):
        assert accounts.login_status("not.a.token") is False

    def test_valid_token(self):
        assert accounts.login_status(issue_token("whoever")) is True


class TestProfile:
    def test_get_profile_missing(self, store):
        with pytest.raises(NotFound):
            accounts.get_profile(store, "missing")

    def test_update_bio_only(self, store, make_user):
        user = make_user(store, name="Rona", email="rona@x.com")
        updated = accounts.update_profile(store, user.id, bio="new bio")
        assert updated.bio == "new bio"
        assert updated.name == "Rona"
        assert updated.email == "rona@x.com"
        assert updated.role is Role.user
        assert updated.photo == user.photo

    def test_empty_values_leave_fields_unchanged(self, store, make_user):
        user = make_user(store, name="Rona")
        updated = accounts.update_profile(store, user.id, name="", bio="", photo=None)
        assert updated.name == "Rona"
        assert updated.bio == user.bio

    def test_update_all_three(self, store, make_user):
        user = make_user(store)
        updated = accounts.update_profile(store, user.id, name="R", bio="b", photo="p.png")
        assert (updated.name, updated.bio, updated.photo) == ("R", "b", "p.png")


class TestDeleteUser:
    def test_delete_existing(self, store, make_user):
        user = make_user(store)
        accounts.delete_user(store, user.id)
        assert store.find_by_id(user.id) is None

    def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            accounts.delete_user(store, "missing")
