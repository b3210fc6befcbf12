"""
app/schemas/bank.py

Request/response models for the bank API (Plaid Link widget, transfers).
Access tokens never leave the server.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.bank_account import BankAccount


class LinkTokenResponse(BaseModel):
    link_token: str = Field(..., description="Token that opens Plaid Link")


class ExchangePublicTokenRequest(BaseModel):
    public_token: str = Field(..., min_length=1, description="Token returned by Plaid Link")

    @field_validator("public_token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        return v.strip()


class ExchangePublicTokenResponse(BaseModel):
    public_token_exchange: str


class BankAccountResponse(BaseModel):
    """Public view of a linked account."""

    id: str
    bank_id: str
    account_id: str
    sharable_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: BankAccount) -> "BankAccountResponse":
        return cls(
            id=account.id,
            bank_id=account.bank_id,
            account_id=account.account_id,
            sharable_id=account.sharable_id,
            created_at=account.created_at,
        )


class TransferRequest(BaseModel):
    source_bank_id: str = Field(..., description="Sender's bank account document id")
    sharable_id: str = Field(..., description="Receiver's shareable id")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="USD amount")


class TransferResponse(BaseModel):
    transfer_url: str
