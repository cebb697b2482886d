"""
Credential account endpoints for API v1.

Remove a login account directly by its id, e.g. one left behind when a
vendor deletion ended in a partial success.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from market_admin_api.app.core.security import management_vendor
from market_admin_api.app.schemas.account import DeleteUserRequest
from market_admin_api.app.schemas.vendor import VendorRecord
from market_admin_api.app.services.account_service import AccountService

from .vendor_accounts import get_account_service


router = APIRouter()


@router.post("/delete-user")
def delete_user(
    payload: DeleteUserRequest,
    caller: VendorRecord = Depends(management_vendor),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    """Delete a login account by id.  Callers cannot delete their own."""
    return service.delete_user(payload, caller)
