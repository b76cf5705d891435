"""
Backend client contract.

Everything the services know about persistence and identity goes through this
surface: password auth plus typed record CRUD on named tables. Any backend that
honours it (hosted or local) can sit underneath.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

from pydantic import BaseModel, Field

# error codes a backend reports in BackendErrorInfo.code
UNIQUE_VIOLATION = "23505"
TABLE_NOT_FOUND = "PGRST205"
NO_ROWS = "PGRST116"
INVALID_CREDENTIALS = "invalid_credentials"
USER_ALREADY_EXISTS = "user_already_exists"


class BackendErrorInfo(BaseModel):
    code: str
    message: str


class AuthUser(BaseModel):
    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class AuthResponse(BaseModel):
    user: Optional[AuthUser] = None
    error: Optional[BackendErrorInfo] = None


class QueryResult(BaseModel):
    data: Any = None
    error: Optional[BackendErrorInfo] = None


class TableQuery(Protocol):
    def select(self, columns: str = "*") -> "TableQuery": ...
    def insert(self, row: dict[str, Any]) -> "TableQuery": ...
    def upsert(self, row: dict[str, Any]) -> "TableQuery": ...
    def update(self, values: dict[str, Any]) -> "TableQuery": ...
    def delete(self) -> "TableQuery": ...
    def eq(self, column: str, value: Any) -> "TableQuery": ...
    def in_(self, column: str, values: Iterable[Any]) -> "TableQuery": ...
    def order(self, column: str, *, desc: bool = False) -> "TableQuery": ...
    def single(self) -> "TableQuery": ...
    def execute(self) -> QueryResult: ...


class BackendClient(Protocol):
    def sign_up(self, email: str, password: str, metadata: Optional[dict[str, Any]] = None) -> AuthResponse: ...
    def sign_in_with_password(self, email: str, password: str) -> AuthResponse: ...
    def sign_out(self) -> None: ...
    def get_user(self) -> Optional[AuthUser]: ...
    def table(self, name: str) -> TableQuery: ...
