"""
Pydantic schemas for customers.

Field names follow Python conventions internally while the JSON
payloads use the PascalCase names clients send (``FirstName``,
``PinCode`` and so on).  Text fields are stripped and must not be
empty, so a blank value is rejected the same way as a missing one.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .text import ensure_utf8


class CustomerCreate(BaseModel):
    """Schema for creating a customer.  All six fields are required."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    first_name: str = Field(..., alias="FirstName", min_length=1, examples=["Ann"])
    last_name: str = Field(..., alias="LastName", min_length=1, examples=["Lee"])
    phone_number: str = Field(..., alias="PhoneNumber", min_length=1, examples=["555-0100"])
    city: str = Field(..., alias="City", min_length=1, examples=["Reno"])
    state: str = Field(..., alias="State", min_length=1, examples=["NV"])
    pin_code: str = Field(..., alias="PinCode", min_length=1, examples=["89501"])

    @field_validator("*")
    @classmethod
    def validate_text(cls, v):
        return ensure_utf8(v)


class CustomerUpdate(BaseModel):
    """Schema for updating a customer.

    Only the name and phone number can change after creation.  Sending
    any other field (``City``, ``State``, ``PinCode``, ``CustomerID``) is
    rejected instead of being silently dropped.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    first_name: str = Field(..., alias="FirstName", min_length=1)
    last_name: str = Field(..., alias="LastName", min_length=1)
    phone_number: str = Field(..., alias="PhoneNumber", min_length=1)

    @field_validator("*")
    @classmethod
    def validate_text(cls, v):
        return ensure_utf8(v)


class CustomerRead(BaseModel):
    """Schema for reading a customer."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(..., alias="CustomerID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")
    phone_number: str = Field(..., alias="PhoneNumber")
    city: str = Field(..., alias="City")
    state: str = Field(..., alias="State")
    pin_code: str = Field(..., alias="PinCode")


class CustomerSummary(BaseModel):
    """Identity and name of a customer, as returned by aggregate queries."""

    model_config = ConfigDict(populate_by_name=True)

    customer_id: str = Field(..., alias="CustomerID")
    first_name: str = Field(..., alias="FirstName")
    last_name: str = Field(..., alias="LastName")


class CustomerFilter(BaseModel):
    """Optional exact-match filters for customer search.

    ``None`` and empty strings both mean "no constraint on this field".
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    city: Optional[str] = Field(None, alias="City")
    state: Optional[str] = Field(None, alias="State")
    pin_code: Optional[str] = Field(None, alias="PinCode")

    @field_validator("*")
    @classmethod
    def validate_text(cls, v):
        return ensure_utf8(v)


class Message(BaseModel):
    """Plain confirmation message."""

    message: str
