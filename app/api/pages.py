"""
app/api/pages.py

Purpose: Server-rendered pages

- "/"        dashboard (cached per user, revalidated after account links)
- "/sign-in" and "/sign-up" forms and their submissions
- "/logout"  clears the session

Form submissions call the auth actions; the session cookie changes they
record are applied to the response returned here.
"""

from typing import Dict, Literal, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from app.actions.bank_actions import get_banks
from app.actions.user_actions import logout_account, sign_in, sign_up
from app.api.deps import load_current_user
from app.core.config import settings
from app.core.cookies import SessionCookies, get_session_cookies
from app.core.logging import get_logger
from app.core.templates import render_template, render_to_string
from app.schemas.auth import auth_form_schema
from app.services.page_cache import get_page_cache
from app.views.components import doughnut_chart, field_errors, form_fields, header_box
from utils.constants import (
    AUTH_SUBTEXT,
    HOME_SUBTEXT,
    HOME_TITLE,
    ROOT_PATH,
    SIGN_IN_TITLE,
    SIGN_UP_TITLE,
)

logger = get_logger(__name__)
router = APIRouter()


def _render_auth_form(
    request: Request,
    mode: Literal["sign-in", "sign-up"],
    values: Optional[Dict[str, str]] = None,
    errors: Optional[Dict[str, str]] = None,
    status_code: int = 200,
):
    title = SIGN_IN_TITLE if mode == "sign-in" else SIGN_UP_TITLE
    return render_template(
        "pages/auth_form.html",
        {
            "mode": mode,
            "action": f"/{mode}",
            "header": header_box(title=title, subtext=AUTH_SUBTEXT),
            "fields": form_fields(mode, values, errors),
        },
        request,
        status_code=status_code,
    )


async def _form_values(request: Request) -> Dict[str, str]:
    form = await request.form()
    return {key: str(value) for key, value in form.items()}


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, cookies: SessionCookies = Depends(get_session_cookies)):
    user = await load_current_user(cookies)
    if user is None:
        return RedirectResponse(url="/sign-in", status_code=303)

    cache = get_page_cache()
    html = cache.get(ROOT_PATH, user.id)

    if html is None:
        banks = await get_banks(user.id)
        html = render_to_string(
            "pages/home.html",
            {
                "user": user,
                "banks": banks,
                "header": header_box(
                    type="greeting",
                    title=HOME_TITLE,
                    user=user.first_name or "Guest",
                    subtext=HOME_SUBTEXT,
                ),
                "chart": doughnut_chart(banks),
                "api_prefix": settings.API_PREFIX,
            },
            request,
        )
        cache.set(ROOT_PATH, user.id, html)

    return HTMLResponse(html)


@router.get("/sign-in", response_class=HTMLResponse)
async def sign_in_page(request: Request):
    return _render_auth_form(request, "sign-in")


@router.get("/sign-up", response_class=HTMLResponse)
async def sign_up_page(request: Request):
    return _render_auth_form(request, "sign-up")


@router.post("/sign-in", response_class=HTMLResponse)
async def sign_in_submit(request: Request, cookies: SessionCookies = Depends(get_session_cookies)):
    values = await _form_values(request)

    try:
        form = auth_form_schema("sign-in").model_validate(values)
    except PydanticValidationError as e:
        return _render_auth_form(request, "sign-in", values, field_errors(e), status_code=400)

    user = await sign_in(form.email, form.password, cookies)
    if user is None:
        # Cookie may already be set if only the profile lookup failed
        return cookies.apply(_render_auth_form(request, "sign-in", values))

    return cookies.apply(RedirectResponse(url="/", status_code=303))


@router.post("/sign-up", response_class=HTMLResponse)
async def sign_up_submit(request: Request, cookies: SessionCookies = Depends(get_session_cookies)):
    values = await _form_values(request)

    try:
        form = auth_form_schema("sign-up").model_validate(values)
    except PydanticValidationError as e:
        return _render_auth_form(request, "sign-up", values, field_errors(e), status_code=400)

    user = await sign_up(form.to_user_data(), form.password, cookies)
    if user is None:
        return _render_auth_form(request, "sign-up", values)

    return cookies.apply(RedirectResponse(url="/", status_code=303))


@router.post("/logout")
async def logout(cookies: SessionCookies = Depends(get_session_cookies)):
    await logout_account(cookies)
    return cookies.apply(RedirectResponse(url="/sign-in", status_code=303))
