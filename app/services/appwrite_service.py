"""
app/services/appwrite_service.py

Purpose: Identity backend (Appwrite) REST client

- Admin client (API key): create accounts, open email/password sessions,
  delete users
- Session client (session secret from the cookie): read and close the
  current session
- Vendor errors surface as AppwriteServiceError
"""

import httpx
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ExternalServiceError
from app.core.logging import get_logger
from utils.constants import CURRENT_SESSION

logger = get_logger(__name__)


class AppwriteServiceError(ExternalServiceError):
    """Identity backend rejected a request or could not be reached."""
    pass


class AppwriteService:
    """
    Thin REST client for the Appwrite account and users APIs.
    One instance is either an admin client or a session client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        session_secret: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = settings.APPWRITE_ENDPOINT.rstrip("/")
        self.project = settings.APPWRITE_PROJECT
        self.api_key = api_key
        self.session_secret = session_secret
        self._transport = transport
        self._timeout = settings.EXTERNAL_SERVICE_TIMEOUT

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Appwrite-Response-Format": "1.5.0",
        }
        if self.project:
            headers["X-Appwrite-Project"] = self.project
        if self.api_key:
            headers["X-Appwrite-Key"] = self.api_key
        if self.session_secret:
            headers["X-Appwrite-Session"] = self.session_secret
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.endpoint}{path}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=payload, headers=self._headers())
        except httpx.TimeoutException:
            logger.error(f"Appwrite timeout: {method} {path}")
            raise AppwriteServiceError("Identity backend timed out")
        except httpx.RequestError as e:
            logger.error(f"Network error calling Appwrite {method} {path}: {e}")
            raise AppwriteServiceError("Unable to reach identity backend")

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {"message": response.text}
            logger.warning(
                f"Appwrite error {response.status_code} on {method} {path}: {body.get('message')}"
            )
            raise AppwriteServiceError(
                body.get("message") or f"Appwrite returned status {response.status_code}",
                details={
                    "status": response.status_code,
                    "type": body.get("type"),
                    "code": body.get("code"),
                },
            )

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    # ------------------------------------------------------------------
    # Account API
    # ------------------------------------------------------------------

    async def create_account(self, user_id: str, email: str, password: str, name: str) -> Dict[str, Any]:
        """Creates an identity account. Returns the account (with "$id")."""
        return await self._request(
            "POST",
            "/account",
            {"userId": user_id, "email": email, "password": password, "name": name},
        )

    async def create_email_password_session(self, email: str, password: str) -> Dict[str, Any]:
        """
        Opens a session. With an API key the response carries the
        session "secret" to store in the cookie.
        """
        return await self._request(
            "POST",
            "/account/sessions/email",
            {"email": email, "password": password},
        )

    async def get_account(self) -> Dict[str, Any]:
        """Account of the current session."""
        return await self._request("GET", "/account")

    async def delete_session(self, session_id: str = CURRENT_SESSION) -> None:
        await self._request("DELETE", f"/account/sessions/{session_id}")

    # ------------------------------------------------------------------
    # Users API (admin only)
    # ------------------------------------------------------------------

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")


def create_admin_client() -> AppwriteService:
    """Client authenticated with the server API key."""
    return AppwriteService(api_key=settings.APPWRITE_KEY)


def create_session_client(session_secret: Optional[str]) -> AppwriteService:
    """
    Client acting as the signed-in user.

    Raises:
        AuthenticationError: when there is no session secret
    """
    if not session_secret:
        raise AuthenticationError("No session")
    return AppwriteService(session_secret=session_secret)
