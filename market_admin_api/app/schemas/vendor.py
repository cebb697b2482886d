"""
Pydantic models for vendor rows.

A vendor row lives in the record store's ``vendors`` table.  Its
``user_id`` column links it to the vendor's login account in the
credential service; it is ``None`` for vendors that cannot sign in.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class VendorBase(BaseModel):
    name: Optional[str] = Field(None, examples=["Green Valley Farm"])
    email: Optional[str] = Field(None, examples=["vendor@example.com"])
    region_id: Optional[Union[int, str]] = Field(None, examples=[3])
    phone: Optional[str] = Field(None, examples=["+1 555 0100"])
    address: Optional[str] = Field(None, examples=["12 Market Street"])
    is_active: bool = Field(True, examples=[True])
    is_management: bool = Field(False, examples=[False])
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class VendorCreate(VendorBase):
    """Vendor fields supplied when creating a vendor account.

    ``id`` and ``user_id`` are assigned by the service and ignored if
    sent.  When ``email`` is omitted the account email is used.
    Timestamps may be omitted to let the record store fill its defaults.
    """

    name: str = Field(..., min_length=1, examples=["Green Valley Farm"])

    def to_row(self, user_id: str, account_email: str) -> dict:
        row = self.model_dump(exclude_none=True)
        row.setdefault("email", account_email)
        row["user_id"] = user_id
        return row


class VendorRecord(VendorBase):
    """A vendor row as returned by the record store."""

    id: Union[int, str]
    user_id: Optional[str] = None

    # Unknown columns (e.g. embedded ``region``) are kept so rows can be
    # passed back to clients untouched.
    model_config = {
        "extra": "allow",
        "from_attributes": True,
    }
