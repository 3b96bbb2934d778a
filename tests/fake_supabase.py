"""In-memory stand-in for the supabase-py client used by RemoteStore.

Supports the query-builder chain the store issues (select/insert/update/upsert/
delete with eq, order, limit), embedded ``child(*)`` selects keyed on
``event_id``, unique constraints, and a switch that makes every call fail.
"""

import re
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple

UNIQUE_KEYS = {
    "users": [("email",)],
    "event_interactions": [("event_id", "user_id", "interaction_type")],
}


class FakeSupabaseError(Exception):
    pass


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.filters: List[Tuple[str, Any]] = []
        self.order_by: Optional[Tuple[str, bool]] = None
        self.row_limit: Optional[int] = None

    # Builder
    def select(self, columns: str = "*"):
        self.action, self.columns = "select", columns
        return self

    def insert(self, payload: Dict[str, Any]):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload: Dict[str, Any]):
        self.action, self.payload = "update", payload
        return self

    def upsert(self, payload: Dict[str, Any], on_conflict: str = "id"):
        self.action, self.payload, self.on_conflict = "upsert", payload, on_conflict
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    # Execution
    def execute(self):
        self.client.calls.append((self.table, self.action))
        if self.client.offline or (self.table, self.action) in self.client.failing:
            raise FakeSupabaseError(f"{self.action} on {self.table} failed")
        return SimpleNamespace(data=getattr(self, f"_run_{self.action}")())

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(str(row.get(col)) == str(value) for col, value in self.filters)

    def _rows(self) -> List[Dict[str, Any]]:
        return self.client.tables.setdefault(self.table, [])

    def _run_select(self):
        rows = [dict(row) for row in self._rows() if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.row_limit is not None:
            rows = rows[: self.row_limit]

        embedded = re.findall(r"(\w+)\(\*\)", self.columns)
        for row in rows:
            for child in embedded:
                row[child] = [
                    dict(c)
                    for c in self.client.tables.get(child, [])
                    if str(c.get("event_id")) == str(row.get("id"))
                ]

        wanted = [c.strip() for c in self.columns.split(",") if "(" not in c]
        if "*" not in wanted:
            rows = [{c: row.get(c) for c in wanted} for row in rows]
        return rows

    def _run_insert(self):
        row = dict(self.payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.client.next_timestamp())
        self.client.check_unique(self.table, row)
        self._rows().append(row)
        return [dict(row)]

    def _run_update(self):
        updated = []
        for row in self._rows():
            if self._matches(row):
                row.update(self.payload)
                updated.append(dict(row))
        return updated

    def _run_upsert(self):
        keys = [k.strip() for k in self.on_conflict.split(",")]
        for row in self._rows():
            if all(str(row.get(k)) == str(self.payload.get(k)) for k in keys):
                row.update(self.payload)
                return [dict(row)]
        return self._run_insert()

    def _run_delete(self):
        rows = self._rows()
        deleted = [dict(row) for row in rows if self._matches(row)]
        self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
        return deleted


class FakeAuth:
    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, str] = {}

    def sign_up(self, credentials: Dict[str, Any]):
        email = credentials["email"]
        if email in self.accounts:
            raise FakeSupabaseError("User already registered")
        metadata = credentials.get("options", {}).get("data", {})
        self.accounts[email] = {
            "id": str(uuid.uuid4()),
            "password": credentials["password"],
            "metadata": metadata,
        }
        return SimpleNamespace(user=self._user(email))

    def sign_in_with_password(self, credentials: Dict[str, Any]):
        account = self.accounts.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise FakeSupabaseError("Invalid login credentials")
        return SimpleNamespace(
            user=self._user(credentials["email"]),
            session=SimpleNamespace(access_token=self.issue_token(credentials["email"])),
        )

    def get_user(self, access_token: str):
        email = self.tokens.get(access_token)
        if email is None:
            raise FakeSupabaseError("invalid JWT")
        return SimpleNamespace(user=self._user(email))

    def issue_token(self, email: str) -> str:
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = email
        return token

    def _user(self, email: str):
        account = self.accounts[email]
        return SimpleNamespace(
            id=account["id"], email=email, user_metadata=account["metadata"]
        )


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.offline = False
        self.failing = set()
        self.calls: List[Tuple[str, str]] = []
        self.auth = FakeAuth()
        self._clock = datetime(2025, 1, 1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def check_unique(self, table: str, row: Dict[str, Any]):
        for columns in UNIQUE_KEYS.get(table, []):
            for existing in self.tables.get(table, []):
                if all(str(existing.get(c)) == str(row.get(c)) for c in columns):
                    raise FakeSupabaseError(
                        f"duplicate key value violates unique constraint on {columns}"
                    )
