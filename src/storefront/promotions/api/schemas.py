"""Pydantic request/response schemas for the promotions API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SubscriptionParams(BaseModel):
    """Payload carried inside the encoded ``data`` parameter of a subscribe link."""

    email: EmailStr


class TestCodeRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)


class TestCodeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    percent_discount: int = Field(..., alias="percentDiscount")


class InviteRequest(BaseModel):
    email: EmailStr


class MessageResponse(BaseModel):
    message: str
