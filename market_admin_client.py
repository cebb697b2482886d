"""Market admin API client.

A thin wrapper around the account management endpoints of the Market
Admin API, for scripts and back‑office tools that need the same
operations the admin web client performs.  The client uses the
``requests`` library internally.

The client exposes one method per operation:

* :meth:`create_vendor_account` – create a vendor and its login account.
* :meth:`delete_vendor_account` – delete a vendor and its login account.
* :meth:`reset_vendor_password` – set a new password for a vendor.
* :meth:`delete_user` – delete a bare login account.

Every request carries the caller's access token (a token issued by the
credential service to a management vendor) in the ``Authorization``
header.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]

FUNCTIONS_PREFIX = "/functions/v1"


class MarketAdminClient:
    """Client for the account management endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        access_token: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``https://admin.example.com``.
            access_token: Bearer token of a management vendor.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _post(self, operation: str, payload: Dict[str, Any]) -> Result:
        """POST ``payload`` to a function route.

        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            for 2xx responses (207 included, whose body carries the
            secondary ``error``).  On failure ``data`` is ``None`` and
            ``error`` is a dictionary with keys ``status_code`` and
            ``message``.
        """
        url = f"{self.base_url}{FUNCTIONS_PREFIX}/{operation}"
        headers = {"Authorization": f"Bearer {self.access_token}"}
        try:
            logger.debug("Sending POST request to %s", url)
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {"error": response.text}
        if response.ok:
            return body, None
        message = ""
        if isinstance(body, dict):
            message = body.get("error") or body.get("message") or ""
        message = message or f"HTTP {response.status_code}"
        logger.error("API request failed (%s): %s", response.status_code, message)
        return None, {"status_code": response.status_code, "message": message}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def create_vendor_account(self, email: str, password: str, vendor: Dict[str, Any]) -> Result:
        """Create a vendor row and its login account.

        Args:
            email: Login email of the new account.
            password: Initial password.
            vendor: Vendor fields (``name``, ``region_id``, ``phone``...).
        """
        return self._post("create-vendor-user", {"email": email, "password": password, "userData": vendor})

    def delete_vendor_account(self, vendor_id: Any) -> Result:
        """Delete a vendor row and its login account.

        A partial success (HTTP 207) is returned as data; check
        ``data.get("error")`` to see whether the login account survived.
        """
        return self._post("delete-vendor-with-auth", {"vendorId": str(vendor_id)})

    def reset_vendor_password(self, email: str, new_password: str) -> Result:
        return self._post("reset-vendor-password", {"email": email, "newPassword": new_password})

    def delete_user(self, user_id: str) -> Result:
        return self._post("delete-user", {"userId": user_id})
