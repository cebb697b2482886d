"""
Gateway to the hosted backend (credential service and record store).

``SupabaseBackend`` wraps a ``supabase`` client created with the
service role key:

* the credential service through ``client.auth`` (token validation)
  and ``client.auth.admin`` (account management);
* the record store through ``client.table(...)`` query builders.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is ``None`` and ``error`` is
a dictionary with keys ``status_code`` and ``message``.  SDK errors and
transport failures (timeouts, refused connections) are reported the
same way, so callers never need to catch client exceptions.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
from postgrest import APIError
from supabase import AuthError, Client, ClientOptions, create_client

from .config import Settings


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


def _error(message: str, status_code: Optional[int] = None) -> Dict[str, Any]:
    return {"status_code": status_code, "message": message}


def _user_dict(response: Any) -> Optional[Dict[str, Any]]:
    """Turn a ``UserResponse`` (or a bare ``User``) into a plain dict."""
    user = getattr(response, "user", response)
    if user is None:
        return None
    if hasattr(user, "model_dump"):
        return user.model_dump(mode="json")
    return dict(user)


def is_user_id(value: Any) -> bool:
    """Return True if ``value`` is a credential account id (a UUID)."""
    try:
        return str(uuid.UUID(str(value))) == str(value).lower()
    except ValueError:
        return False


class SupabaseBackend:
    """Client for the credential service and record store.

    One instance is created by the application factory and shared by
    all requests.  The underlying ``supabase`` client is built on first
    use, once the configuration has been checked, and holds no
    per-request state.
    """

    def __init__(self, settings: Settings, *, client: Optional[Client] = None) -> None:
        self.settings = settings
        self._client = client
        self._lock = threading.Lock()

    @property
    def client(self) -> Client:
        with self._lock:
            if self._client is None:
                options = ClientOptions(
                    auto_refresh_token=False,
                    persist_session=False,
                    postgrest_client_timeout=self.settings.backend_timeout,
                )
                self._client = create_client(
                    self.settings.supabase_url.rstrip("/"),
                    self.settings.service_role_key,
                    options=options,
                )
            return self._client

    def _call(self, description: str, action: Callable[[Client], Any]) -> Result:
        """Run one SDK call and convert its outcome to ``(data, error)``."""
        problems = self.settings.validate()
        if problems:
            return None, _error("Backend is not configured: " + "; ".join(problems))
        try:
            return action(self.client), None
        except AuthError as exc:
            logger.debug("%s failed: %s", description, exc.message)
            return None, _error(exc.message, getattr(exc, "status", None))
        except APIError as exc:
            logger.debug("%s failed: %s", description, exc.message)
            return None, _error(exc.message or str(exc))
        except httpx.HTTPError as exc:
            logger.error("%s failed: %s", description, exc)
            return None, _error(str(exc))

    def _admin_user_call(self, description: str, user_id: str, action: Callable[[Client], Any]) -> Result:
        # Account ids end up in the admin endpoint's URL path.
        if not is_user_id(user_id):
            return None, _error(f"Invalid user id: {user_id!r}", 400)
        return self._call(description, action)

    # ------------------------------------------------------------------
    # Credential service
    # ------------------------------------------------------------------
    def get_user(self, access_token: str) -> Result:
        """Resolve an access token to the user it was issued for."""
        data, error = self._call("token lookup", lambda client: _user_dict(client.auth.get_user(access_token)))
        if error:
            return None, error
        if not data or not data.get("id"):
            return None, _error("Token did not resolve to a user", 401)
        return data, None

    def create_user(self, email: str, password: str, *, email_confirm: bool = True) -> Result:
        """Create a credential account (admin endpoint)."""
        attributes = {"email": email, "password": password, "email_confirm": email_confirm}
        data, error = self._call("create user", lambda client: _user_dict(client.auth.admin.create_user(attributes)))
        if error:
            return None, error
        if not data or not data.get("id"):
            return None, _error("Credential service did not return the created user")
        return data, None

    def get_user_by_id(self, user_id: str) -> Result:
        return self._admin_user_call(
            "get user",
            user_id,
            lambda client: _user_dict(client.auth.admin.get_user_by_id(user_id)),
        )

    def update_user_by_id(self, user_id: str, attributes: Dict[str, Any]) -> Result:
        return self._admin_user_call(
            "update user",
            user_id,
            lambda client: _user_dict(client.auth.admin.update_user_by_id(user_id, attributes)),
        )

    def delete_user(self, user_id: str) -> Result:
        return self._admin_user_call("delete user", user_id, lambda client: client.auth.admin.delete_user(user_id))

    # ------------------------------------------------------------------
    # Record store
    # ------------------------------------------------------------------
    def select_one(self, table: str, column: str, value: Any, *, columns: str = "*") -> Result:
        """Fetch the single row where ``column`` equals ``value``.

        Returns ``(row, None)`` when exactly one row matches, ``(None,
        None)`` when none does, and an error when the filter matched
        more than one row.
        """
        response, error = self._call(
            f"select from {table}",
            lambda client: client.table(table).select(columns).eq(column, value).execute(),
        )
        if error:
            return None, error
        rows: List[Dict[str, Any]] = response.data or []
        if not rows:
            return None, None
        if len(rows) > 1:
            return None, _error(f"Expected a single {table} row for {column}, got {len(rows)}")
        return rows[0], None

    def insert(self, table: str, row: Dict[str, Any]) -> Result:
        """Insert a row and return it as stored (defaults and id filled in)."""
        response, error = self._call(f"insert into {table}", lambda client: client.table(table).insert(row).execute())
        if error:
            return None, error
        if not response.data:
            return None, _error(f"Insert into {table} returned no row")
        return response.data[0], None

    def delete(self, table: str, column: str, value: Any) -> Result:
        """Delete rows where ``column`` equals ``value``; returns the deleted rows."""
        response, error = self._call(
            f"delete from {table}",
            lambda client: client.table(table).delete().eq(column, value).execute(),
        )
        if error:
            return None, error
        return response.data or [], None
