"""Pydantic schemas for API contracts."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .models import PaymentFlow


class GenerateQRRequest(BaseModel):
    bank_bin: str = Field(min_length=1, max_length=11, description="Acquirer/bank BIN, e.g. 970422")
    account_number: str = Field(min_length=1, max_length=19)
    amount: str | None = Field(default=None, description="Plain amount in VND; omitted when not positive")
    message: str | None = Field(default=None, max_length=83, description="Purpose of transaction (Tag 62/08), fits a two-digit length")
    one_time: bool = False
    render_image: bool = True


class GenerateQRResponse(BaseModel):
    payload: str
    crc: str
    init_method: str
    qr_png_base64: str | None = None


class DecodeRequest(BaseModel):
    payload: str | None = Field(default=None, description="Raw TLV payload string")
    url: str | None = Field(default=None, description="Deep link carrying the payload in its query")
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class TransactionResponse(BaseModel):
    amount: str
    currency: str
    full_url: str
    original_data: str
    tags: dict[str, str]
    flow: PaymentFlow


class DecodeResponse(TransactionResponse):
    crc_valid: bool


class ManualAmountRequest(BaseModel):
    amount: str = Field(min_length=1, max_length=20)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
