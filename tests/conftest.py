from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from market_admin_api.app.core.config import Settings
from market_admin_api.app.main import create_app


RECORD_STORE_METHODS = {"select_one", "insert", "delete"}

ADMIN_UID = "6f1c2a9e-0b1d-4c55-9a0e-3d7f1a2b0001"
STAFF_UID = "6f1c2a9e-0b1d-4c55-9a0e-3d7f1a2b0002"
FARM_UID = "6f1c2a9e-0b1d-4c55-9a0e-3d7f1a2b0003"
LONER_UID = "6f1c2a9e-0b1d-4c55-9a0e-3d7f1a2b0004"
GHOST_UID = "6f1c2a9e-0b1d-4c55-9a0e-3d7f1a2b0099"


def column_matches(row: Dict[str, Any], column: str, value: Any) -> bool:
    """Compare like the record store: ``id`` is a bigint, so "01" matches 1."""
    if column == "id":
        try:
            return int(str(value).strip()) == int(row["id"])
        except ValueError:
            return False
    return str(row.get(column)) == str(value)


class FakeBackend:
    """In-memory stand-in for SupabaseBackend.

    Mirrors the gateway's ``(data, error)`` contract.  Setting
    ``fail[<method name>] = "<message>"`` makes that method return an
    error instead of touching the in-memory state.
    """

    def __init__(self) -> None:
        self.tokens: Dict[str, str] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.vendors: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, tuple]] = []
        self.fail: Dict[str, str] = {}
        self._next_vendor_id = 100

    # helpers -----------------------------------------------------------
    def add_user(self, user_id: str, email: str, token: Optional[str] = None, password: str = "secret") -> None:
        self.users[user_id] = {"id": user_id, "email": email, "password": password, "email_confirmed": True}
        if token:
            self.tokens[token] = user_id

    def add_vendor(self, vendor_id: int, **fields: Any) -> None:
        row = {
            "id": vendor_id,
            "name": f"Vendor {vendor_id}",
            "email": f"vendor{vendor_id}@market.test",
            "region_id": None,
            "phone": None,
            "address": None,
            "is_active": True,
            "is_management": False,
            "user_id": None,
            "created_at": "2025-01-01T00:00:00+00:00",
            "updated_at": "2025-01-01T00:00:00+00:00",
        }
        row.update(fields)
        self.vendors[str(vendor_id)] = row

    def called(self, name: str) -> List[tuple]:
        return [args for method, args in self.calls if method == name]

    @property
    def record_store_calls(self) -> List[Tuple[str, tuple]]:
        return [call for call in self.calls if call[0] in RECORD_STORE_METHODS]

    def _failure(self, name: str):
        message = self.fail.get(name)
        if message:
            return None, {"status_code": 500, "message": message}
        return None

    # credential service -----------------------------------------------
    def get_user(self, access_token: str):
        self.calls.append(("get_user", (access_token,)))
        failure = self._failure("get_user")
        if failure:
            return failure
        user_id = self.tokens.get(access_token)
        if not user_id or user_id not in self.users:
            return None, {"status_code": 401, "message": "invalid JWT"}
        return dict(self.users[user_id]), None

    def create_user(self, email: str, password: str, *, email_confirm: bool = True):
        self.calls.append(("create_user", (email, email_confirm)))
        failure = self._failure("create_user")
        if failure:
            return failure
        if any(user["email"] == email for user in self.users.values()):
            return None, {"status_code": 422, "message": "A user with this email address has already been registered"}
        user_id = str(uuid.uuid4())
        self.users[user_id] = {"id": user_id, "email": email, "password": password, "email_confirmed": email_confirm}
        return dict(self.users[user_id]), None

    def get_user_by_id(self, user_id: str):
        self.calls.append(("get_user_by_id", (user_id,)))
        failure = self._failure("get_user_by_id")
        if failure:
            return failure
        if user_id not in self.users:
            return None, {"status_code": 404, "message": "User not found"}
        return dict(self.users[user_id]), None

    def update_user_by_id(self, user_id: str, attributes: Dict[str, Any]):
        self.calls.append(("update_user_by_id", (user_id, tuple(sorted(attributes)))))
        failure = self._failure("update_user_by_id")
        if failure:
            return failure
        if user_id not in self.users:
            return None, {"status_code": 404, "message": "User not found"}
        self.users[user_id].update(attributes)
        return dict(self.users[user_id]), None

    def delete_user(self, user_id: str):
        self.calls.append(("delete_user", (user_id,)))
        failure = self._failure("delete_user")
        if failure:
            return failure
        if user_id not in self.users:
            return None, {"status_code": 404, "message": "User not found"}
        del self.users[user_id]
        return {}, None

    # record store ------------------------------------------------------
    def select_one(self, table: str, column: str, value: Any, *, columns: str = "*"):
        self.calls.append(("select_one", (table, column, str(value))))
        failure = self._failure("select_one")
        if failure:
            return failure
        rows = [row for row in self.vendors.values() if column_matches(row, column, value)]
        if not rows:
            return None, None
        if len(rows) > 1:
            return None, {"status_code": None, "message": "multiple rows"}
        return dict(rows[0]), None

    def insert(self, table: str, row: Dict[str, Any]):
        self.calls.append(("insert", (table, row.get("email"))))
        failure = self._failure("insert")
        if failure:
            return failure
        vendor_id = self._next_vendor_id
        self._next_vendor_id += 1
        self.add_vendor(vendor_id, **row)
        return dict(self.vendors[str(vendor_id)]), None

    def delete(self, table: str, column: str, value: Any):
        self.calls.append(("delete", (table, column, str(value))))
        failure = self._failure("delete")
        if failure:
            return failure
        removed = [key for key, row in self.vendors.items() if column_matches(row, column, value)]
        return [self.vendors.pop(key) for key in removed], None


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://project.supabase.co",
        service_role_key="service-role-key",
        protected_vendor_ids=("1",),
        log_level="WARNING",
    )


@pytest.fixture
def backend():
    fake = FakeBackend()
    # Vendor 1: default administrative vendor (protected, management).
    fake.add_user(ADMIN_UID, "admin@market.test", token="admin-token")
    fake.add_vendor(1, name="Market Office", email="admin@market.test", is_management=True, user_id=ADMIN_UID)
    # Vendor 2: ordinary vendor that can sign in.
    fake.add_user(STAFF_UID, "staff@market.test", token="staff-token")
    fake.add_vendor(2, name="Staff Stall", email="staff@market.test", user_id=STAFF_UID)
    # Vendor 3: vendor with a login account, target of deletions.
    fake.add_user(FARM_UID, "farm@market.test", token="farm-token")
    fake.add_vendor(3, name="Green Valley Farm", email="farm@market.test", user_id=FARM_UID)
    # Vendor 4: vendor without a login account.
    fake.add_vendor(4, name="Walk-in Stall", email="stall@market.test", user_id=None)
    # A signed-in user with no vendor row at all.
    fake.add_user(LONER_UID, "loner@market.test", token="loner-token")
    fake.calls.clear()
    return fake


@pytest.fixture
def app(settings, backend):
    return create_app(settings, backend=backend)


@pytest.fixture
def client(app):
    return TestClient(app)


def auth(token: str = "admin-token") -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
