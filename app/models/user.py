"""
app/models/user.py

Purpose: User profile document model

- Links the identity-backend account (user_id) to the payment-network customer
- Profile fields collected at sign-up
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Profile document stored in the user collection."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id", description="Document id")
    user_id: str = Field(..., description="Identity-backend account id")
    email: str
    first_name: str
    last_name: str
    address1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    date_of_birth: Optional[str] = None
    ssn: Optional[str] = None
    dwolla_customer_url: str
    dwolla_customer_id: str
    created_at: Optional[datetime] = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return cls.model_validate(document)
