"""Tests for the admin CLI in main.py -- the only path that grants the admin role."""

from __future__ import annotations

import pytest

import main as cli
from auth.models import Role
from auth.store import UserStore


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


def test_create_admin_user(db_url, capsys):
    code = cli.main(["--db", db_url, "create-user", "Ada", "Ada@X.com", "s3cret!", "--role", "admin"])
    assert code == 0
    assert "role 'admin'" in capsys.readouterr().out

    store = UserStore(db_url)
    try:
        user = store.find_by_email("ada@x.com")
        assert user is not None
        assert user.role is Role.admin
    finally:
        store.close()


def test_create_user_rejects_short_password(db_url, capsys):
    code = cli.main(["--db", db_url, "create-user", "Ada", "ada@x.com", "12345"])
    assert code == 1
    assert "at least 6 characters" in capsys.readouterr().err


def test_create_user_duplicate_email(db_url, capsys):
    assert cli.main(["--db", db_url, "create-user", "Ada", "ada@x.com", "secret1"]) == 0
    assert cli.main(["--db", db_url, "create-user", "Ada", "ada@x.com", "secret1"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_set_role_promotes_and_demotes(db_url):
    assert cli.main(["--db", db_url, "create-user", "Rona", "rona@x.com", "secret1"]) == 0
    assert cli.main(["--db", db_url, "set-role", "rona@x.com", "admin"]) == 0

    store = UserStore(db_url)
    try:
        assert store.find_by_email("rona@x.com").role is Role.admin
    finally:
        store.close()

    assert cli.main(["--db", db_url, "set-role", "RONA@x.com", "user"]) == 0
    store = UserStore(db_url)
    try:
        assert store.find_by_email("rona@x.com").role is Role.user
    finally:
        store.close()


def test_set_role_unknown_email(db_url):
    assert cli.main(["--db", db_url, "set-role", "nobody@x.com", "admin"]) == 1


def test_invalid_role_is_rejected_by_argparse(db_url):
    with pytest.raises(SystemExit):
        cli.main(["--db", db_url, "set-role", "rona@x.com", "superuser"])
