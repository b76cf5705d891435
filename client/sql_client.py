# client/sql_client.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth.utils.auth_utils import get_password_hash, verify_password
from .contract import (
    AuthResponse,
    AuthUser,
    BackendErrorInfo,
    QueryResult,
    INVALID_CREDENTIALS,
    NO_ROWS,
    TABLE_NOT_FOUND,
    UNIQUE_VIOLATION,
    USER_ALREADY_EXISTS,
)
from .models import AuthIdentity
from user.models import UserProfile
from posting.models import JobPosting
from application.models import Application
from review.models import Review

logger = logging.getLogger(__name__)


class UnknownColumn(LookupError):
    pass


TABLES: dict[str, type] = {
    "user_profiles": UserProfile,
    "job_postings": JobPosting,
    "applications": Application,
    "reviews": Review,
}


def _row_to_dict(obj, columns: Optional[list[str]] = None) -> dict[str, Any]:
    keys = [attr.key for attr in obj.__mapper__.column_attrs]
    if columns:
        keys = [k for k in keys if k in columns]
    return {k: getattr(obj, k) for k in keys}


def _auth_user(identity: AuthIdentity) -> AuthUser:
    return AuthUser(id=identity.id, email=identity.email, user_metadata=dict(identity.user_metadata or {}))


class SqlTableQuery:
    """Chainable query on one table; nothing touches the database until execute()."""

    def __init__(self, db: Session, name: str, model: Optional[type]):
        self.db = db
        self.name = name
        self.model = model
        self._op = "select"
        self._payload: dict[str, Any] = {}
        self._columns: Optional[list[str]] = None
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, bool]] = []
        self._single = False

    # ---------- builders ----------

    def select(self, columns: str = "*") -> "SqlTableQuery":
        self._op = "select"
        if columns.strip() != "*":
            self._columns = [c.strip() for c in columns.split(",") if c.strip()]
        return self

    def insert(self, row: dict[str, Any]) -> "SqlTableQuery":
        self._op, self._payload = "insert", dict(row)
        return self

    def upsert(self, row: dict[str, Any]) -> "SqlTableQuery":
        self._op, self._payload = "upsert", dict(row)
        return self

    def update(self, values: dict[str, Any]) -> "SqlTableQuery":
        self._op, self._payload = "update", dict(values)
        return self

    def delete(self) -> "SqlTableQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "SqlTableQuery":
        self._filters.append((column, "eq", value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> "SqlTableQuery":
        self._filters.append((column, "in", list(values)))
        return self

    def order(self, column: str, *, desc: bool = False) -> "SqlTableQuery":
        self._orders.append((column, desc))
        return self

    def single(self) -> "SqlTableQuery":
        self._single = True
        return self

    # ---------- execution ----------

    def execute(self) -> QueryResult:
        if self.model is None:
            return QueryResult(error=BackendErrorInfo(
                code=TABLE_NOT_FOUND,
                message=f"Could not find the table 'public.{self.name}' in the schema cache",
            ))
        try:
            handler = getattr(self, f"_run_{self._op}")
            return handler()
        except IntegrityError as exc:
            self.db.rollback()
            msg = str(exc.orig)
            code = UNIQUE_VIOLATION if "unique" in msg.lower() else "23000"
            return QueryResult(error=BackendErrorInfo(code=code, message=msg))
        except OperationalError as exc:
            self.db.rollback()
            msg = str(exc.orig)
            lowered = msg.lower()
            if "no such table" in lowered or "does not exist" in lowered:
                return QueryResult(error=BackendErrorInfo(code=TABLE_NOT_FOUND, message=msg))
            return QueryResult(error=BackendErrorInfo(code="backend_error", message=msg))
        except UnknownColumn as exc:
            self.db.rollback()
            return QueryResult(error=BackendErrorInfo(code="42703", message=str(exc)))
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("query on %s failed", self.name)
            return QueryResult(error=BackendErrorInfo(code="backend_error", message=str(exc)))

    def _column(self, name: str):
        if name not in self.model.__mapper__.column_attrs:
            raise UnknownColumn(f"column {self.name}.{name} does not exist")
        return getattr(self.model, name)

    def _where(self, stmt):
        for column, kind, value in self._filters:
            col = self._column(column)
            stmt = stmt.where(col == value) if kind == "eq" else stmt.where(col.in_(value))
        return stmt

    def _matching_rows(self) -> list:
        stmt = self._where(select(self.model))
        if self._orders:
            for column, desc in self._orders:
                col = self._column(column)
                stmt = stmt.order_by(col.desc() if desc else col.asc())
            # stable tie-break on the primary key, same direction as the last sort
            pk = self.model.__mapper__.primary_key[0]
            stmt = stmt.order_by(pk.desc() if self._orders[-1][1] else pk.asc())
        return list(self.db.scalars(stmt))

    def _result(self, rows: list) -> QueryResult:
        data = [_row_to_dict(r, self._columns) for r in rows]
        if not self._single:
            return QueryResult(data=data)
        if len(data) != 1:
            return QueryResult(error=BackendErrorInfo(
                code=NO_ROWS,
                message=f"JSON object requested, {len(data)} rows returned",
            ))
        return QueryResult(data=data[0])

    def _run_select(self) -> QueryResult:
        return self._result(self._matching_rows())

    def _run_insert(self) -> QueryResult:
        for key in self._payload:
            self._column(key)
        row = self.model(**self._payload)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._result([row])

    def _run_upsert(self) -> QueryResult:
        pk_name = self.model.__mapper__.primary_key[0].key
        existing = None
        if self._payload.get(pk_name) is not None:
            existing = self.db.get(self.model, self._payload[pk_name])
        if existing is None:
            return self._run_insert()
        for key, value in self._payload.items():
            self._column(key)
            setattr(existing, key, value)
        self.db.commit()
        self.db.refresh(existing)
        return self._result([existing])

    def _run_update(self) -> QueryResult:
        rows = self._matching_rows()
        for row in rows:
            for key, value in self._payload.items():
                self._column(key)
                setattr(row, key, value)
        self.db.commit()
        for row in rows:
            self.db.refresh(row)
        return self._result(rows)

    def _run_delete(self) -> QueryResult:
        rows = self._matching_rows()
        data = [_row_to_dict(r, self._columns) for r in rows]
        for row in rows:
            self.db.delete(row)
        self.db.commit()
        return QueryResult(data=data)


class SqlBackendClient:
    """BackendClient backed by a SQLAlchemy session."""

    def __init__(self, db: Session, user: Optional[AuthUser] = None, tables: Optional[dict[str, type]] = None):
        self.db = db
        self._user = user
        self._tables = TABLES if tables is None else tables

    @classmethod
    def for_user_id(cls, db: Session, user_id: str) -> "SqlBackendClient":
        """Restore a signed-in client from an identity id (e.g. a token subject)."""
        identity = db.get(AuthIdentity, user_id)
        return cls(db, user=_auth_user(identity) if identity else None)

    # ---------- auth ----------

    def sign_up(self, email: str, password: str, metadata: Optional[dict[str, Any]] = None) -> AuthResponse:
        email = email.strip().lower()
        if "@" not in email:
            return AuthResponse(error=BackendErrorInfo(
                code="validation_failed", message="Unable to validate email address: invalid format"
            ))
        exists = self.db.scalar(select(AuthIdentity).where(AuthIdentity.email == email))
        if exists:
            return AuthResponse(error=BackendErrorInfo(code=USER_ALREADY_EXISTS, message="User already registered"))

        identity = AuthIdentity(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=get_password_hash(password),
            user_metadata=dict(metadata or {}),
        )
        self.db.add(identity)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return AuthResponse(error=BackendErrorInfo(code=USER_ALREADY_EXISTS, message="User already registered"))
        self.db.refresh(identity)
        self._user = _auth_user(identity)
        return AuthResponse(user=self._user)

    def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        identity = self.db.scalar(
            select(AuthIdentity).where(AuthIdentity.email == email.strip().lower())
        )
        if identity is None or not verify_password(password, identity.password_hash):
            return AuthResponse(error=BackendErrorInfo(code=INVALID_CREDENTIALS, message="Invalid login credentials"))
        self._user = _auth_user(identity)
        return AuthResponse(user=self._user)

    def sign_out(self) -> None:
        self._user = None

    def get_user(self) -> Optional[AuthUser]:
        return self._user

    # ---------- records ----------

    def table(self, name: str) -> SqlTableQuery:
        return SqlTableQuery(self.db, name, self._tables.get(name))
