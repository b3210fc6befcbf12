"""
Template rendering utilities
"""
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from utils.constants import AUTH_IMAGE, SITE_DESCRIPTION, SITE_ICON, SITE_TITLE
from utils.format_utils import format_amount
from app.views.components import SIDEBAR_LINKS

APP_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["amount"] = format_amount
templates.env.globals["sidebar_links"] = SIDEBAR_LINKS
templates.env.globals["metadata"] = {
    "title": SITE_TITLE,
    "description": SITE_DESCRIPTION,
    "icon": SITE_ICON,
    "auth_image": AUTH_IMAGE,
}


def render_template(template_name: str, context: dict, request: Request, status_code: int = 200):
    """Render template with context"""
    return templates.TemplateResponse(
        request,
        template_name,
        context,
        status_code=status_code,
    )


def render_to_string(template_name: str, context: dict, request: Request) -> str:
    """Render template to HTML text (for the page cache)"""
    template = templates.get_template(template_name)
    return template.render({"request": request, **context})
