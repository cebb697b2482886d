"""
Top‑level router for version 1 of the API.

This router aggregates the endpoint modules.  When new endpoints are
added, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import credentials, vendor_accounts

router = APIRouter()

router.include_router(vendor_accounts.router, tags=["vendor accounts"])
router.include_router(credentials.router, tags=["credentials"])
