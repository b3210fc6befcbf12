"""
app/services/plaid_service.py

Purpose: Bank-data aggregation (Plaid) REST client

- Link token creation for the Plaid Link widget
- Public token -> access token exchange
- Account metadata
- Processor tokens for the payment network
"""

import httpx
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from utils.constants import (
    PLAID_COUNTRY_CODES,
    PLAID_LANGUAGE,
    PLAID_PROCESSOR,
    PLAID_PRODUCTS,
)

logger = get_logger(__name__)


class PlaidServiceError(ExternalServiceError):
    """Aggregation API returned an error object or could not be reached."""
    pass


class PlaidService:
    """Client for the Plaid endpoints used by the account-link flow."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.plaid_base_url
        self.client_id = settings.PLAID_CLIENT_ID
        self.secret = settings.PLAID_SECRET
        self._transport = transport
        self._timeout = settings.EXTERNAL_SERVICE_TIMEOUT

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = {"client_id": self.client_id, "secret": self.secret, **payload}

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}{path}", json=body)
        except httpx.TimeoutException:
            logger.error(f"Plaid timeout: {path}")
            raise PlaidServiceError("Aggregation API timed out")
        except httpx.RequestError as e:
            logger.error(f"Network error calling Plaid {path}: {e}")
            raise PlaidServiceError("Unable to reach aggregation API")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code != 200:
            logger.warning(
                f"Plaid error {response.status_code} on {path}: "
                f"{data.get('error_code')} {data.get('error_message')}"
            )
            raise PlaidServiceError(
                data.get("error_message") or f"Plaid returned status {response.status_code}",
                details={
                    "status": response.status_code,
                    "error_type": data.get("error_type"),
                    "error_code": data.get("error_code"),
                    "request_id": data.get("request_id"),
                },
            )

        return data

    async def link_token_create(self, client_user_id: str, client_name: str) -> Dict[str, Any]:
        return await self._post(
            "/link/token/create",
            {
                "user": {"client_user_id": client_user_id},
                "client_name": client_name,
                "products": PLAID_PRODUCTS,
                "language": PLAID_LANGUAGE,
                "country_codes": PLAID_COUNTRY_CODES,
            },
        )

    async def item_public_token_exchange(self, public_token: str) -> Dict[str, Any]:
        """Returns access_token and item_id."""
        return await self._post("/item/public_token/exchange", {"public_token": public_token})

    async def accounts_get(self, access_token: str) -> List[Dict[str, Any]]:
        data = await self._post("/accounts/get", {"access_token": access_token})
        return data.get("accounts", [])

    async def processor_token_create(
        self,
        access_token: str,
        account_id: str,
        processor: str = PLAID_PROCESSOR,
    ) -> str:
        data = await self._post(
            "/processor/token/create",
            {"access_token": access_token, "account_id": account_id, "processor": processor},
        )
        return data["processor_token"]


# Global Plaid client instance
_plaid_service: Optional[PlaidService] = None


def get_plaid_service() -> PlaidService:
    """Get or create the global Plaid client."""
    global _plaid_service
    if _plaid_service is None:
        _plaid_service = PlaidService()
    return _plaid_service
