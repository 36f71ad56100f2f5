"""Pydantic request schemas for the checkout endpoint."""

import json

from protean.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field


class TokenizationData(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str


class PaymentMethodData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tokenization_data: TokenizationData = Field(..., alias="tokenizationData")


class PaymentData(BaseModel):
    """Wallet payload; the token is a JSON document holding the processor source id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    payment_method_data: PaymentMethodData = Field(..., alias="paymentMethodData")

    @property
    def source(self) -> str:
        try:
            token = json.loads(self.payment_method_data.tokenization_data.token)
            source = token["id"]
        except (ValueError, TypeError, KeyError):
            raise ValidationError({"paymentData": ["Payment token is malformed"]}) from None

        if not isinstance(source, str) or not source:
            raise ValidationError({"paymentData": ["Payment token is malformed"]})
        return source


class ProcessPaymentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cart: dict
    payment_data: PaymentData = Field(..., alias="paymentData")
    idempotency_key: str | None = Field(None, alias="idempotencyKey", max_length=255)
