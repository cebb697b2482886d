"""
Request bodies for the account management operations.

Field names on the wire follow the admin web client (``userData``,
``vendorId``, ``newPassword``, ``userId``).  Required values are
declared optional here and checked by the service so that a missing
value yields a 400 with a specific message rather than a generic
validation error.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from .vendor import VendorCreate


class CreateVendorAccountRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["vendor@example.com"])
    password: Optional[str] = Field(None, examples=["strongpassword"])
    user_data: Optional[VendorCreate] = Field(None, alias="userData")

    model_config = {"populate_by_name": True}


class DeleteVendorAccountRequest(BaseModel):
    vendor_id: Optional[Union[int, str]] = Field(None, alias="vendorId", examples=["42"])

    model_config = {"populate_by_name": True}


class ResetVendorPasswordRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["vendor@example.com"])
    new_password: Optional[str] = Field(None, alias="newPassword", examples=["newstrongpassword"])

    model_config = {"populate_by_name": True}


class DeleteUserRequest(BaseModel):
    """Body for removing a bare credential account by its id."""

    user_id: Optional[str] = Field(None, alias="userId")

    model_config = {"populate_by_name": True}
