"""
Authentication and authorisation dependencies.

Callers authenticate with the access token issued to them by the
credential service, sent as ``Authorization: Bearer <token>``.  The
token is not decoded locally: it is handed to the credential service,
which resolves it to a user (the *caller identity*).  Authorisation is
a single rule shared by every operation: the caller must own a vendor
row whose ``is_management`` flag is set.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .backend import SupabaseBackend
from .config import Settings
from .errors import Forbidden, Unauthenticated
from ..schemas.vendor import VendorRecord


logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Return the settings object the app was built with."""
    return request.app.state.settings


def get_backend(request: Request) -> SupabaseBackend:
    """Return the backend gateway shared by all requests."""
    return request.app.state.backend


def get_caller_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    backend: SupabaseBackend = Depends(get_backend),
) -> str:
    """Dependency that resolves the bearer token to a caller id.

    Raises ``Unauthenticated`` if the header is missing, is not a
    bearer credential, or the credential service does not recognise
    the token.  Nothing is read from the record store here.
    """
    if credentials is None:
        raise Unauthenticated()
    return resolve_caller_identity(credentials.credentials, backend)


def resolve_caller_identity(access_token: Optional[str], backend: SupabaseBackend) -> str:
    if not access_token:
        raise Unauthenticated()
    user, error = backend.get_user(access_token)
    if error or not user:
        logger.info("Rejected bearer token: %s", (error or {}).get("message", "no user"))
        raise Unauthenticated()
    return str(user["id"])


def bearer_token(request: Request) -> Optional[str]:
    """Return the bearer token of ``request``, or None if it carries none."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def authorize_request(request: Request) -> VendorRecord:
    """Run both caller checks outside the dependency chain.

    Used for requests rejected before their route's dependencies ran,
    such as bodies that fail to parse.
    """
    backend = get_backend(request)
    caller_id = resolve_caller_identity(bearer_token(request), backend)
    return require_management_privilege(caller_id, backend, get_settings(request))


def require_management_privilege(caller_id: str, backend: SupabaseBackend, settings: Settings) -> VendorRecord:
    """Return the caller's vendor row if it carries the management flag.

    Raises ``Forbidden`` when the caller has no vendor row, the lookup
    fails, or ``is_management`` is false or missing.  No row is modified.
    """
    row, error = backend.select_one(settings.vendors_table, "user_id", caller_id)
    if error:
        logger.warning("Management check for %s failed: %s", caller_id, error.get("message"))
        raise Forbidden()
    if not row or not row.get("is_management"):
        logger.warning("User %s is not a management vendor", caller_id)
        raise Forbidden()
    return VendorRecord.model_validate(row)


def management_vendor(
    caller_id: str = Depends(get_caller_identity),
    backend: SupabaseBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
) -> VendorRecord:
    """Dependency form of :func:`require_management_privilege`.

    Use it via ``Depends(management_vendor)`` on every privileged route.
    """
    return require_management_privilege(caller_id, backend, settings)
