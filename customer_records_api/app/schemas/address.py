"""
Pydantic schemas for customer addresses.

Addresses always belong to one customer.  The owning ``CustomerID`` is
part of the read schema but not of the update schema: an address can
have its line, city, state and pin code replaced, never its owner.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .text import ensure_utf8


class AddressUpdate(BaseModel):
    """Full replacement of the four mutable address fields."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    address_line: str = Field(..., alias="AddressLine", min_length=1, examples=["12 Main St"])
    city: str = Field(..., alias="City", min_length=1, examples=["Reno"])
    state: str = Field(..., alias="State", min_length=1, examples=["NV"])
    pin_code: str = Field(..., alias="PinCode", min_length=1, examples=["89501"])

    @field_validator("*")
    @classmethod
    def validate_text(cls, v):
        return ensure_utf8(v)


class AddressRead(BaseModel):
    """Schema for reading an address."""

    model_config = ConfigDict(populate_by_name=True)

    address_id: str = Field(..., alias="AddressID")
    customer_id: str = Field(..., alias="CustomerID")
    address_line: str = Field(..., alias="AddressLine")
    city: str = Field(..., alias="City")
    state: str = Field(..., alias="State")
    pin_code: str = Field(..., alias="PinCode")
