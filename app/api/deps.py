"""
app/api/deps.py

Purpose: Shared route dependencies

- Session cookie jar for the request
- Current user's profile document (401 without a valid session)
"""

from typing import Optional

from fastapi import Depends

from app.actions.user_actions import get_logged_in_user, get_user_info
from app.core.cookies import SessionCookies, get_session_cookies
from app.core.exceptions import AuthenticationError
from app.models.user import User


async def load_current_user(cookies: SessionCookies) -> Optional[User]:
    """Profile of the signed-in account, or None."""
    account = await get_logged_in_user(cookies)
    if not account:
        return None
    return await get_user_info(account["$id"])


async def require_user(cookies: SessionCookies = Depends(get_session_cookies)) -> User:
    user = await load_current_user(cookies)
    if user is None:
        raise AuthenticationError("Sign in required")
    return user
