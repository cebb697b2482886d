"""
Error taxonomy for the account management operations.

Services raise these exceptions; the handlers registered in
``main.create_app`` turn them into JSON responses of the form
``{"error": "<message>", ...}`` with the status code carried by the
exception class.
"""

from typing import Any, Dict, Optional

from fastapi import status


class AccountError(Exception):
    """Base class for failures surfaced to the API caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra or {}
        self.headers = headers

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        body.update(self.extra)
        return body


class Unauthenticated(AccountError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AccountError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Not authorized - requires management role") -> None:
        super().__init__(message)


class NotFound(AccountError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidRequest(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class ProtectedResource(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class CredentialCreateFailed(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class VendorInsertFailed(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class DeleteFailed(AccountError):
    status_code = status.HTTP_400_BAD_REQUEST


class CredentialUpdateFailed(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class CredentialDeleteFailed(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
