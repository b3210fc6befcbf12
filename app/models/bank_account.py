"""
app/models/bank_account.py

Purpose: Linked bank account document model
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BankAccountFields(BaseModel):
    """Fields persisted when an account link completes."""

    user_id: str = Field(..., description="Profile document id of the owner")
    bank_id: str = Field(..., description="Aggregation API item id")
    account_id: str
    access_token: str
    funding_source_url: str
    sharable_id: str = Field(..., description="Obfuscated account id")


class BankAccount(BankAccountFields):
    """Document stored in the bank collection. Never updated in place."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "BankAccount":
        return cls.model_validate(document)
