"""
app/services/dwolla_service.py

Purpose: Payment network (Dwolla) REST client

- OAuth client-credentials token, cached until shortly before expiry
- Customers, on-demand authorizations, funding sources, transfers
- Created resources are identified by the Location header URL
"""

import time
import httpx
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from utils.constants import DWOLLA_MEDIA_TYPE

logger = get_logger(__name__)

# Refresh the token this many seconds before it expires
TOKEN_EXPIRY_MARGIN = 60


class DwollaServiceError(ExternalServiceError):
    """Payment network rejected a request or could not be reached."""
    pass


class DwollaService:
    """Client for the Dwolla API (HAL+JSON)."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.dwolla_base_url
        self.key = settings.DWOLLA_KEY
        self.secret = settings.DWOLLA_SECRET
        self._transport = transport
        self._timeout = settings.EXTERNAL_SERVICE_TIMEOUT
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

    async def _get_access_token(self, client: httpx.AsyncClient) -> str:
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        response = await client.post(
            f"{self.base_url}/token",
            data={"grant_type": "client_credentials"},
            auth=(self.key or "", self.secret or ""),
        )
        if response.status_code != 200:
            logger.error(f"Dwolla token request failed: {response.status_code}")
            raise DwollaServiceError(
                "Could not authenticate with payment network",
                details={"status": response.status_code},
            )

        data = response.json()
        self._access_token = data["access_token"]
        self._token_expires_at = time.monotonic() + int(data.get("expires_in", 3600)) - TOKEN_EXPIRY_MARGIN
        return self._access_token

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                token = await self._get_access_token(client)
                response = await client.post(
                    f"{self.base_url}/{path.lstrip('/')}",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Accept": DWOLLA_MEDIA_TYPE,
                        "Content-Type": DWOLLA_MEDIA_TYPE,
                    },
                )
        except httpx.TimeoutException:
            logger.error(f"Dwolla timeout: {path}")
            raise DwollaServiceError("Payment network timed out")
        except httpx.RequestError as e:
            logger.error(f"Network error calling Dwolla {path}: {e}")
            raise DwollaServiceError("Unable to reach payment network")

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            logger.warning(
                f"Dwolla error {response.status_code} on {path}: {body.get('code')} {body.get('message')}"
            )
            raise DwollaServiceError(
                body.get("message") or f"Dwolla returned status {response.status_code}",
                details={
                    "status": response.status_code,
                    "code": body.get("code"),
                    "errors": body.get("_embedded", {}).get("errors"),
                },
            )

        return response

    async def create_customer(self, customer: Dict[str, Any]) -> Optional[str]:
        """Returns the new customer's URL."""
        response = await self._post("customers", customer)
        return response.headers.get("location")

    async def create_on_demand_authorization(self) -> Dict[str, Any]:
        """Returns the authorization's _links (attached to funding sources)."""
        response = await self._post("on-demand-authorizations", {})
        return response.json().get("_links", {})

    async def create_funding_source(self, customer_id: str, payload: Dict[str, Any]) -> Optional[str]:
        """Returns the new funding source's URL."""
        response = await self._post(f"customers/{customer_id}/funding-sources", payload)
        return response.headers.get("location")

    async def create_transfer(self, payload: Dict[str, Any]) -> Optional[str]:
        """Returns the new transfer's URL."""
        response = await self._post("transfers", payload)
        return response.headers.get("location")


# Global Dwolla client instance (keeps the cached token)
_dwolla_service: Optional[DwollaService] = None


def get_dwolla_service() -> DwollaService:
    """Get or create the global Dwolla client."""
    global _dwolla_service
    if _dwolla_service is None:
        _dwolla_service = DwollaService()
    return _dwolla_service
