"""
Business logic for vendor accounts.

A vendor account is two linked resources in two independent systems:
a login account in the credential service and a row in the record
store's ``vendors`` table whose ``user_id`` points at that account.
``AccountService`` creates, deletes and maintains the pair.  None of
its operations is atomic; each follows a fixed step order with a
documented outcome for partial failure:

* creation makes the login account first, then the row, and deletes
  the account again if the row cannot be written;
* deletion removes the row first, then the account, and reports a
  partial success (HTTP 207) if only the row could be removed.

Callers must have passed the management check before calling in.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import status

from ..core.backend import SupabaseBackend, is_user_id
from ..core.config import Settings
from ..core.errors import (
    CredentialCreateFailed,
    CredentialDeleteFailed,
    CredentialUpdateFailed,
    DeleteFailed,
    InvalidRequest,
    NotFound,
    ProtectedResource,
    VendorInsertFailed,
)
from ..schemas.account import (
    CreateVendorAccountRequest,
    DeleteUserRequest,
    DeleteVendorAccountRequest,
    ResetVendorPasswordRequest,
)
from ..schemas.vendor import VendorRecord
from .compensation import CompensatingSequence


logger = logging.getLogger(__name__)

_INTEGER_ID = re.compile(r"[+-]?\d+")


def canonical_vendor_id(value: Any) -> str:
    """Normalise a vendor id as sent by a client.

    Surrounding whitespace is dropped and integer ids lose their sign
    and leading zeros, so ``" 01"`` and ``1`` both become ``"1"``.
    """
    if value is None:
        return ""
    vendor_id = str(value).strip()
    if _INTEGER_ID.fullmatch(vendor_id):
        return str(int(vendor_id))
    return vendor_id


@dataclass
class DeletionOutcome:
    """Result of deleting a vendor and its login account."""

    vendor_id: str
    user_id: Optional[str]
    credential_error: Optional[str] = None

    @property
    def partial(self) -> bool:
        return self.credential_error is not None

    @property
    def status_code(self) -> int:
        return status.HTTP_207_MULTI_STATUS if self.partial else status.HTTP_200_OK

    def to_body(self) -> Dict[str, Any]:
        if self.partial:
            return {
                "message": "Vendor record deleted, but failed to delete auth user",
                "error": self.credential_error,
            }
        return {"message": "Vendor deleted successfully"}


class AccountService:
    """Privileged operations on vendor login accounts."""

    def __init__(self, backend: SupabaseBackend, settings: Settings) -> None:
        self.backend = backend
        self.settings = settings

    @property
    def table(self) -> str:
        return self.settings.vendors_table

    def _refuse_protected(self, vendor_id: str, caller: VendorRecord) -> None:
        if vendor_id in self.settings.protected_ids:
            logger.warning("Refused deletion of protected vendor %s by %s", vendor_id, caller.id)
            raise ProtectedResource("This vendor account is protected and cannot be deleted")

    def create_vendor_account(self, data: CreateVendorAccountRequest, caller: VendorRecord) -> Dict[str, Any]:
        """Create a login account and its vendor row as one unit.

        Raises ``CredentialCreateFailed`` if the account cannot be
        created (nothing is written) and ``VendorInsertFailed`` if the
        row cannot be inserted.  In the latter case the new account is
        deleted again before the error is raised; the insert error is
        the one reported, and a failed cleanup is attached to it as
        ``cleanup_error``.
        """
        if not data.email or not data.password:
            raise InvalidRequest("Email and password are required")
        if data.user_data is None:
            raise InvalidRequest("Vendor data (userData) is required")

        logger.info("Vendor account for %s requested by %s", data.email, caller.id)
        sequence = CompensatingSequence("create-vendor-account")

        user, error = sequence.run(
            "create auth user",
            lambda: self.backend.create_user(data.email, data.password, email_confirm=True),
            compensate=lambda created: self.backend.delete_user(created["id"]),
        )
        if error:
            raise CredentialCreateFailed(f"Failed to create auth user: {error['message']}")

        user_id = str(user["id"])
        row = data.user_data.to_row(user_id, data.email)
        vendor, error = sequence.run(
            "insert vendor",
            lambda: self.backend.insert(self.table, row),
        )
        if error:
            failures = sequence.compensate()
            extra: Dict[str, Any] = {}
            if failures:
                extra["cleanup_error"] = "; ".join(f.message for f in failures)
                logger.error("Auth user %s (%s) may be orphaned", user_id, data.email)
            raise VendorInsertFailed(f"Failed to create vendor: {error['message']}", extra=extra)

        logger.info("Vendor %s created with auth user %s", vendor.get("id"), user_id)
        return {"message": "Vendor user created successfully", "vendor": vendor}

    def delete_vendor_account(self, data: DeleteVendorAccountRequest, caller: VendorRecord) -> DeletionOutcome:
        """Delete a vendor row, then the login account linked to it.

        The row goes first so that nothing can act through the account
        on a vendor that is half gone.  If the account cannot be deleted
        afterwards the row stays deleted and the outcome is partial.
        """
        vendor_id = canonical_vendor_id(data.vendor_id)
        if not vendor_id:
            raise InvalidRequest("Vendor ID is required")
        self._refuse_protected(vendor_id, caller)

        target, error = self.backend.select_one(self.table, "id", vendor_id, columns="id,user_id")
        if error:
            logger.error("Error finding vendor %s: %s", vendor_id, error["message"])
        if error or not target:
            raise NotFound("Vendor not found")
        # The record store may match loosely written ids ("01", " 1"), so
        # the row it found is checked again and deleted by its own id.
        vendor_id = str(target["id"])
        self._refuse_protected(vendor_id, caller)
        user_id = target.get("user_id")

        _, error = self.backend.delete(self.table, "id", vendor_id)
        if error:
            logger.error("Error deleting vendor %s: %s", vendor_id, error["message"])
            raise DeleteFailed(f"Failed to delete vendor: {error['message']}")
        logger.info("Vendor %s deleted by %s", vendor_id, caller.id)

        outcome = DeletionOutcome(vendor_id=vendor_id, user_id=user_id)
        if not user_id:
            logger.info("Vendor %s had no auth user, nothing else to delete", vendor_id)
            return outcome

        _, error = self.backend.delete_user(user_id)
        if error:
            logger.error("Vendor %s deleted but auth user %s was not: %s", vendor_id, user_id, error["message"])
            outcome.credential_error = error["message"]
        else:
            logger.info("Auth user %s deleted", user_id)
        return outcome

    def reset_vendor_password(self, data: ResetVendorPasswordRequest, caller: VendorRecord) -> Dict[str, Any]:
        """Set a new password on the login account of the vendor with ``email``."""
        if not data.email or not data.new_password:
            raise InvalidRequest("Email and new password are required")

        vendor, error = self.backend.select_one(self.table, "email", data.email, columns="id,user_id")
        if error or not vendor or not vendor.get("user_id"):
            raise NotFound("Vendor not found")

        _, error = self.backend.update_user_by_id(vendor["user_id"], {"password": data.new_password})
        if error:
            logger.error("Password update for vendor %s failed: %s", vendor.get("id"), error["message"])
            raise CredentialUpdateFailed(f"Failed to update password: {error['message']}")

        logger.info("Password of vendor %s reset by %s", vendor.get("id"), caller.id)
        return {"message": "Password updated successfully"}

    def delete_user(self, data: DeleteUserRequest, caller: VendorRecord) -> Dict[str, Any]:
        """Delete a login account that is not (or no longer) tied to a vendor row."""
        if not data.user_id:
            raise InvalidRequest("User ID is required")
        if not is_user_id(data.user_id):
            raise InvalidRequest("User ID must be a UUID")
        if data.user_id.lower() == (caller.user_id or "").lower():
            raise InvalidRequest("Cannot delete your own account")

        _, error = self.backend.get_user_by_id(data.user_id)
        if error:
            raise NotFound("User not found", extra={"details": error["message"]})

        _, error = self.backend.delete_user(data.user_id)
        if error:
            logger.error("Error deleting auth user %s: %s", data.user_id, error["message"])
            raise CredentialDeleteFailed("Failed to delete user", extra={"details": error["message"]})

        logger.info("Auth user %s deleted by %s", data.user_id, caller.id)
        return {"success": True, "message": "User deleted successfully"}
