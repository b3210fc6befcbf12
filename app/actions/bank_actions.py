"""
app/actions/bank_actions.py

Purpose: Linked-account reads and fund transfers

- get_banks: a profile's linked accounts (dashboard)
- get_bank_by_sharable_id: resolve a recipient from their shareable id
- transfer_funds: move money between two linked accounts
"""

from decimal import Decimal
from typing import List, Optional, Union

from app.actions.dwolla_actions import create_transfer
from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.models.bank_account import BankAccount
from app.models.user import User
from app.services.bank_service import (
    find_bank_by_account_id,
    find_bank_document,
    find_bank_documents,
)
from app.services.page_cache import revalidate_path
from utils.constants import ROOT_PATH
from utils.id_utils import decrypt_id

logger = get_logger(__name__)


async def get_banks(user_id: str) -> List[BankAccount]:
    """
    Linked accounts of a profile; [] on failure.
    """
    try:
        documents = await find_bank_documents(user_id)
        return [BankAccount.from_document(doc) for doc in documents]
    except Exception as e:
        logger.error(f"Fetching banks failed: {e}", extra={"user_id": user_id})
        return []


async def get_bank_by_sharable_id(sharable_id: str) -> Optional[BankAccount]:
    """
    Resolves a shareable id to the linked account it was issued for.
    """
    try:
        document = await find_bank_by_account_id(decrypt_id(sharable_id))
        return BankAccount.from_document(document) if document else None
    except Exception as e:
        logger.error(f"Resolving shareable id failed: {e}")
        return None


async def transfer_funds(
    user: User,
    source_bank_id: str,
    sharable_id: str,
    amount: Union[str, int, float, Decimal],
) -> Optional[str]:
    """
    Transfers `amount` from one of the user's linked accounts to the account
    behind `sharable_id`.

    Returns:
        Transfer URL, or None on failure
    """
    with LogContext(user_id=user.id, action="transfer_funds"):
        try:
            if Decimal(str(amount)) <= 0:
                raise ValidationError("Amount must be positive")

            source = await find_bank_document(source_bank_id)
            if not source or source.get("user_id") != user.id:
                raise ResourceNotFoundError("Source account not found")

            receiver = await get_bank_by_sharable_id(sharable_id)
            if receiver is None:
                raise ResourceNotFoundError("Receiver account not found")

            transfer_url = await create_transfer(
                source_funding_source_url=source["funding_source_url"],
                destination_funding_source_url=receiver.funding_source_url,
                amount=amount,
            )
            if not transfer_url:
                return None

            revalidate_path(ROOT_PATH)
            logger.info("Transfer created")
            return transfer_url

        except Exception as e:
            logger.error(f"Transfer failed: {e}")
            return None
