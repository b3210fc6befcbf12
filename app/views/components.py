"""
app/views/components.py

Purpose: View component contexts

- header_box: page title, optional greeting with the user's name
- doughnut_chart: Chart.js config from sample values
- custom_input: form field bound to the sign-up schema
- sidebar / auth form field lists

Templates in app/templates/components render these dicts.
"""

import json
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from app.schemas.auth import auth_form_schema
from utils.constants import (
    DOUGHNUT_CHART_COLORS,
    DOUGHNUT_CHART_CUTOUT,
    DOUGHNUT_CHART_DATA,
    DOUGHNUT_CHART_LABEL,
    DOUGHNUT_CHART_LABELS,
)

# Field binding always uses the sign-up schema
FORM_SCHEMA = auth_form_schema("sign-up")

SIGN_UP_FIELDS = [
    ("first_name", "First Name", "Enter your first name"),
    ("last_name", "Last Name", "Enter your last name"),
    ("address1", "Address", "Enter your specific address"),
    ("city", "City", "Enter your city"),
    ("state", "State", "Example: NY"),
    ("postal_code", "Postal Code", "Example: 11101"),
    ("date_of_birth", "Date of Birth", "YYYY-MM-DD"),
    ("ssn", "SSN", "Example: 1234"),
    ("email", "Email", "Enter your email"),
    ("password", "Password", "Enter your password"),
]

SIGN_IN_FIELDS = [
    ("email", "Email", "Enter your email"),
    ("password", "Password", "Enter your password"),
]

SIDEBAR_LINKS = [
    {"label": "Home", "route": "/", "icon": "/static/icons/home.svg"},
]


def header_box(
    title: str,
    subtext: str,
    user: Optional[str] = None,
    type: Literal["title", "greeting"] = "title",
) -> Dict[str, Any]:
    return {
        "type": type,
        "title": title,
        "subtext": subtext,
        "user": user,
        "show_greeting": type == "greeting",
    }


def doughnut_chart(accounts: Sequence[Any]) -> Dict[str, Any]:
    """
    Chart config for the balance doughnut.

    The chart shows fixed sample values; `accounts` only sets how many
    linked accounts the caption reports.
    """
    data = {
        "datasets": [
            {
                "label": DOUGHNUT_CHART_LABEL,
                "data": DOUGHNUT_CHART_DATA,
                "backgroundColor": DOUGHNUT_CHART_COLORS,
            }
        ],
        "labels": DOUGHNUT_CHART_LABELS,
    }
    options = {
        "cutout": DOUGHNUT_CHART_CUTOUT,
        "plugins": {"legend": {"display": False}},
    }
    return {
        "data": data,
        "options": options,
        "config_json": json.dumps({"type": "doughnut", "data": data, "options": options}),
        "account_count": len(accounts),
    }


def custom_input(
    name: str,
    label: str,
    placeholder: str,
    value: str = "",
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Raises:
        ValueError: if `name` is not a field of the form schema
    """
    if name not in FORM_SCHEMA.model_fields:
        raise ValueError(f"Unknown form field: {name}")

    return {
        "name": name,
        "label": label,
        "placeholder": placeholder,
        "type": "password" if name == "password" else "text",
        # Passwords are never echoed back into the page
        "value": "" if name == "password" else value,
        "error": error,
    }


def form_fields(
    mode: Literal["sign-in", "sign-up"],
    values: Optional[Dict[str, str]] = None,
    errors: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    values = values or {}
    errors = errors or {}
    fields = SIGN_UP_FIELDS if mode == "sign-up" else SIGN_IN_FIELDS
    return [
        custom_input(name, label, placeholder, values.get(name, ""), errors.get(name))
        for name, label, placeholder in fields
    ]


def field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """First validation message per field, for FormMessage slots."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        if not err.get("loc"):
            continue
        name = str(err["loc"][0])
        errors.setdefault(name, err["msg"])
    return errors
