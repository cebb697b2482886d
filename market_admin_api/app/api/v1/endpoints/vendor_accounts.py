"""
Vendor account endpoints for API v1.

Create a vendor together with its login account, delete a vendor
together with its login account, and reset a vendor's password.  All
routes require a bearer token belonging to a management vendor.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from market_admin_api.app.core.security import management_vendor
from market_admin_api.app.schemas.account import (
    CreateVendorAccountRequest,
    DeleteVendorAccountRequest,
    ResetVendorPasswordRequest,
)
from market_admin_api.app.schemas.vendor import VendorRecord
from market_admin_api.app.services.account_service import AccountService


router = APIRouter()


def get_account_service(request: Request) -> AccountService:
    return AccountService(request.app.state.backend, request.app.state.settings)


@router.post("/create-vendor-user")
def create_vendor_user(
    payload: CreateVendorAccountRequest,
    caller: VendorRecord = Depends(management_vendor),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    """Create a login account (email pre‑confirmed) and its vendor row.

    If the vendor row cannot be written the login account is removed
    again and a 400 is returned.
    """
    return service.create_vendor_account(payload, caller)


# ``delete-vendor-user`` is the older name of the same operation; the
# admin client has used both, so both paths stay routed.
@router.post("/delete-vendor-with-auth")
@router.post("/delete-vendor-user")
def delete_vendor(
    payload: DeleteVendorAccountRequest,
    caller: VendorRecord = Depends(management_vendor),
    service: AccountService = Depends(get_account_service),
) -> JSONResponse:
    """Delete a vendor row and then its login account.

    Returns 207 when the row was deleted but the login account could
    not be; the row is not restored.
    """
    outcome = service.delete_vendor_account(payload, caller)
    return JSONResponse(content=outcome.to_body(), status_code=outcome.status_code)


@router.post("/reset-vendor-password")
def reset_vendor_password(
    payload: ResetVendorPasswordRequest,
    caller: VendorRecord = Depends(management_vendor),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    """Set a new password for the vendor identified by email."""
    return service.reset_vendor_password(payload, caller)
