"""
app/core/cookies.py

Purpose: Session cookie handling

- Reads the identity-backend session secret from the request
- Records set/delete operations made by server actions
- Applies the recorded operations to whatever response the route returns
"""

from typing import List, Optional, Tuple

from fastapi import Request, Response

from app.core.config import settings
from utils.constants import SESSION_COOKIE_NAME


class SessionCookies:
    """
    Request-scoped view of the session cookie.

    Actions call set()/delete(); the route calls apply() on the response it
    returns (a redirect or a rendered page), so cookie changes survive
    whichever response type is chosen.
    """

    def __init__(self, value: Optional[str] = None):
        self._value = value
        self.operations: List[Tuple[str, Optional[str]]] = []

    @classmethod
    def from_request(cls, request: Request) -> "SessionCookies":
        return cls(request.cookies.get(SESSION_COOKIE_NAME))

    def get(self) -> Optional[str]:
        """Current session secret, reflecting changes made in this request."""
        return self._value

    def set(self, secret: str):
        self._value = secret
        self.operations.append(("set", secret))

    def delete(self):
        self._value = None
        self.operations.append(("delete", None))

    def apply(self, response: Response) -> Response:
        for op, secret in self.operations:
            if op == "set":
                response.set_cookie(
                    key=SESSION_COOKIE_NAME,
                    value=secret,
                    path="/",
                    httponly=True,
                    samesite="strict",
                    secure=settings.SESSION_COOKIE_SECURE,
                )
            else:
                response.delete_cookie(
                    key=SESSION_COOKIE_NAME,
                    path="/",
                    httponly=True,
                    samesite="strict",
                    secure=settings.SESSION_COOKIE_SECURE,
                )
        return response


def get_session_cookies(request: Request) -> SessionCookies:
    """FastAPI dependency."""
    return SessionCookies.from_request(request)
