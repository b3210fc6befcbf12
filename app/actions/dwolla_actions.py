"""
app/actions/dwolla_actions.py

Purpose: Payment-network server actions

- Customer creation at sign-up
- Funding sources for linked bank accounts (via on-demand authorization)
- Transfers between funding sources

Each action logs and returns None on failure.
"""

from typing import Any, Dict, Optional, Union
from decimal import Decimal

from app.core.logging import get_logger, LogContext
from app.services.dwolla_service import get_dwolla_service
from utils.constants import DWOLLA_CURRENCY
from utils.format_utils import format_transfer_value

logger = get_logger(__name__)


CUSTOMER_FIELD_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "type": "type",
    "address1": "address1",
    "city": "city",
    "state": "state",
    "postal_code": "postalCode",
    "date_of_birth": "dateOfBirth",
    "ssn": "ssn",
}


def _customer_payload(new_customer: Dict[str, Any]) -> Dict[str, Any]:
    return {
        dwolla_name: new_customer[name]
        for name, dwolla_name in CUSTOMER_FIELD_NAMES.items()
        if new_customer.get(name) is not None
    }


async def create_funding_source(
    customer_id: str,
    funding_source_name: str,
    plaid_token: str,
    links: Dict[str, Any],
) -> Optional[str]:
    """
    Creates a funding source for a customer from a processor token.

    Returns:
        Funding source URL, or None on failure
    """
    try:
        return await get_dwolla_service().create_funding_source(
            customer_id,
            {"name": funding_source_name, "plaidToken": plaid_token, "_links": links},
        )
    except Exception as e:
        logger.error(f"Creating a Funding Source Failed: {e}")
        return None


async def create_on_demand_authorization() -> Optional[Dict[str, Any]]:
    """
    Returns the _links of a new on-demand authorization, or None.
    """
    try:
        return await get_dwolla_service().create_on_demand_authorization()
    except Exception as e:
        logger.error(f"Creating an On Demand Authorization Failed: {e}")
        return None


async def create_dwolla_customer(new_customer: Dict[str, Any]) -> Optional[str]:
    """
    Creates a payment-network customer.

    Args:
        new_customer: Profile fields in snake_case plus "type" ("personal")

    Returns:
        Customer URL, or None on failure
    """
    with LogContext(action="create_dwolla_customer"):
        try:
            return await get_dwolla_service().create_customer(_customer_payload(new_customer))
        except Exception as e:
            logger.error(f"Creating a Dwolla Customer Failed: {e}")
            return None


async def create_transfer(
    source_funding_source_url: str,
    destination_funding_source_url: str,
    amount: Union[str, int, float, Decimal],
) -> Optional[str]:
    """
    Moves `amount` USD between two funding sources.

    Returns:
        Transfer URL, or None on failure
    """
    try:
        payload = {
            "_links": {
                "source": {"href": source_funding_source_url},
                "destination": {"href": destination_funding_source_url},
            },
            "amount": {
                "currency": DWOLLA_CURRENCY,
                "value": format_transfer_value(amount),
            },
        }
        return await get_dwolla_service().create_transfer(payload)
    except Exception as e:
        logger.error(f"Transfer fund failed: {e}")
        return None


async def add_funding_source(
    dwolla_customer_id: str,
    processor_token: str,
    bank_name: str,
) -> Optional[str]:
    """
    Authorizes and attaches a linked bank account to a customer.

    Returns:
        Funding source URL, or None on failure
    """
    with LogContext(action="add_funding_source"):
        try:
            dwolla_auth_links = await create_on_demand_authorization()
            if dwolla_auth_links is None:
                raise RuntimeError("No on-demand authorization")

            return await create_funding_source(
                customer_id=dwolla_customer_id,
                funding_source_name=bank_name,
                plaid_token=processor_token,
                links=dwolla_auth_links,
            )
        except Exception as e:
            logger.error(f"Adding funding source failed: {e}")
            return None
