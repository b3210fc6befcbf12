"""
app/api/bank.py

Bank API endpoints
==================

JSON endpoints called from the dashboard:
- POST /link-token              -> open Plaid Link
- POST /exchange-public-token   -> finish linking an account
- GET  /banks                   -> linked accounts
- POST /transfers               -> move funds to another linked account

All require a session. Action failures surface as 502 ErrorResponse bodies.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.actions.bank_actions import get_banks, transfer_funds
from app.actions.user_actions import create_link_token, exchange_public_token
from app.api.deps import require_user
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from app.models.user import User
from app.schemas.bank import (
    BankAccountResponse,
    ExchangePublicTokenRequest,
    ExchangePublicTokenResponse,
    LinkTokenResponse,
    TransferRequest,
    TransferResponse,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("/link-token", response_model=LinkTokenResponse)
async def link_token(user: User = Depends(require_user)) -> LinkTokenResponse:
    """Creates a Plaid Link token for the signed-in user."""
    result = await create_link_token(user)
    if result is None:
        raise ExternalServiceError("Could not create link token")
    return LinkTokenResponse(**result)


@router.post("/exchange-public-token", response_model=ExchangePublicTokenResponse)
async def exchange_token(
    request: ExchangePublicTokenRequest,
    user: User = Depends(require_user),
) -> ExchangePublicTokenResponse:
    """Links the account behind a Plaid public token."""
    result = await exchange_public_token(request.public_token, user)
    if result is None:
        raise ExternalServiceError("Could not link bank account")
    return ExchangePublicTokenResponse(**result)


@router.get("/banks", response_model=List[BankAccountResponse])
async def list_banks(user: User = Depends(require_user)) -> List[BankAccountResponse]:
    banks = await get_banks(user.id)
    return [BankAccountResponse.from_account(bank) for bank in banks]


@router.post("/transfers", response_model=TransferResponse, status_code=201)
async def create_transfer(
    request: TransferRequest,
    user: User = Depends(require_user),
) -> TransferResponse:
    transfer_url = await transfer_funds(
        user,
        source_bank_id=request.source_bank_id,
        sharable_id=request.sharable_id,
        amount=request.amount,
    )
    if not transfer_url:
        raise ExternalServiceError("Transfer failed")
    return TransferResponse(transfer_url=transfer_url)
