"""Pydantic request/response schemas for the user API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterUserRequest(_CamelModel):
    email: EmailStr
    first_name: str = Field(..., alias="firstName", max_length=50)
    last_name: str = Field(..., alias="lastName", max_length=50)
    gender: str | None = Field(None, pattern="^(male|female|other)$")
    birth_date: str | None = Field(None, alias="birthDate")
    phone_number: str | None = Field(None, alias="phoneNumber", max_length=30)
    news_subscription: bool = Field(False, alias="newsSubscription")


class UpdatePersonalInfoRequest(_CamelModel):
    first_name: str | None = Field(None, alias="firstName", max_length=50)
    last_name: str | None = Field(None, alias="lastName", max_length=50)
    gender: str | None = Field(None, pattern="^(male|female|other)$")
    birth_date: str | None = Field(None, alias="birthDate")
    phone_number: str | None = Field(None, alias="phoneNumber", max_length=30)


class AddressRequest(_CamelModel):
    first_name: str = Field(..., alias="firstName", max_length=50)
    last_name: str = Field(..., alias="lastName", max_length=50)
    phone_number: str = Field(..., alias="phoneNumber", max_length=30)
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    home_number: str = Field(..., alias="homeNumber", max_length=20)
    post_code: str = Field(..., alias="postCode", max_length=20)
    add_info: str | None = Field(None, alias="addInfo", max_length=500)


class AddAddressRequest(AddressRequest):
    select: bool = False


class UpdateAddressRequest(_CamelModel):
    first_name: str | None = Field(None, alias="firstName", max_length=50)
    last_name: str | None = Field(None, alias="lastName", max_length=50)
    phone_number: str | None = Field(None, alias="phoneNumber", max_length=30)
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    home_number: str | None = Field(None, alias="homeNumber", max_length=20)
    post_code: str | None = Field(None, alias="postCode", max_length=20)
    add_info: str | None = Field(None, alias="addInfo", max_length=500)


class InvoiceAddressRequest(AddressRequest):
    invoice_delivery: str | None = Field(None, alias="invoiceDelivery", pattern="^(electronic|paper)$")


class UserIdResponse(_CamelModel):
    user_id: str = Field(..., alias="userId")


class AddressIdResponse(_CamelModel):
    address_id: str = Field(..., alias="addressId")
