"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper.
UserStore is the repository; _row_to_user is the mapper. Route, dependency,
and account code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Consistency:
  Email uniqueness is enforced by the UNIQUE constraint on users.email, not
  by a read-then-write check, so two concurrent registrations with the same
  address cannot both succeed. Emails are normalized (strip + lower) before
  every read and write, which makes the constraint case-insensitive.

  Every write runs in its own connection and transaction. A profile save is
  one UPDATE statement, so concurrent saves of the same record are atomic
  and the last one wins.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.errors import Conflict, NotFound
from auth.models import Role, User
from core.config import get_settings

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("role", String(16), nullable=False, server_default=Role.user.value),
    Column("photo", Text, nullable=False, server_default=""),
    Column("bio", Text, nullable=False, server_default=""),
    Column("is_verified", Integer, nullable=False, server_default="0"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode so readers proceed while a write is in flight.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records.

    Usage:
        store = UserStore("sqlite:///authkit.db")
        user = store.create("Rona", "rona@x.com", hash_password("secret1"))
        store.find_by_email("RONA@x.com")  # same record
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_email(self, email: str) -> User | None:
        """Look up a user by email (case-insensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == normalize_email(email))).fetchone()
        return _row_to_user(row) if row is not None else None

    def find_by_id(self, user_id: str) -> User | None:
        """Look up a user by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def count(self) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(select(func.count()).select_from(_users)).scalar()
        return result or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: Role = Role.user,
        photo: str | None = None,
        bio: str | None = None,
    ) -> User:
        """Insert a new user and return the stored record.

        Raises Conflict if a user with the same (normalized) email exists.
        photo/bio default to the configured profile defaults.
        """
        settings = get_settings()
        now = _now_iso()
        user = User(
            id=uuid.uuid4().hex,
            name=name.strip(),
            email=normalize_email(email),
            hashed_password=hashed_password,
            role=role,
            photo=settings.default_photo if photo is None else photo,
            bio=settings.default_bio if bio is None else bio,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    _users.insert().values(
                        id=user.id,
                        name=user.name,
                        email=user.email,
                        hashed_password=user.hashed_password,
                        role=user.role.value,
                        photo=user.photo,
                        bio=user.bio,
                        is_verified=0,
                        created_at=user.created_at,
                        updated_at=user.updated_at,
                    )
                )
        except IntegrityError as exc:
            raise Conflict("User already exists") from exc
        return user

    def save(self, user: User) -> User:
        """Persist the mutable fields of user and return the re-read record.

        email, hashed_password, id, and created_at are never written here.
        Raises NotFound if the record was deleted in the meantime.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _users.update()
                .where(_users.c.id == user.id)
                .values(
                    name=user.name,
                    bio=user.bio,
                    photo=user.photo,
                    role=Role(user.role).value,
                    is_verified=1 if user.is_verified else 0,
                    updated_at=_now_iso(),
                )
            )
        if result.rowcount == 0:
            raise NotFound()
        saved = self.find_by_id(user.id)
        if saved is None:
            raise NotFound()
        return saved

    def set_role(self, user_id: str, role: Role) -> bool:
        """Change a user's role. Privileged path -- only the admin CLI calls this.

        Returns True if a row was updated, False if user_id was not found.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _users.update().where(_users.c.id == user_id).values(role=Role(role).value, updated_at=_now_iso())
            )
        return result.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        """Permanently delete a user record. Returns True if deleted, False if not found."""
        with self.engine.begin() as conn:
            result = conn.execute(_users.delete().where(_users.c.id == user_id))
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        hashed_password=row.hashed_password,
        role=Role(row.role),
        photo=row.photo,
        bio=row.bio,
        is_verified=bool(row.is_verified),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
