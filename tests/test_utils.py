import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.schemas.auth import SignInForm, SignUpForm, auth_form_schema
from app.views.components import (
    custom_input,
    doughnut_chart,
    field_errors,
    form_fields,
    header_box,
)
from utils.format_utils import format_amount, format_transfer_value, parse_stringify
from utils.id_utils import decrypt_id, encrypt_id, extract_customer_id_from_url, generate_id
from utils.validation_utils import sanitize_input, validate_email, validate_postal_code

SIGN_UP_VALUES = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address1": "1 Analytical Way",
    "city": "London",
    "state": "ny",
    "postal_code": "10001",
    "date_of_birth": "1815-12-10",
    "ssn": "1234",
    "email": "Ada@Example.com",
    "password": "password123",
}


# ============================================================================
# Identifiers and formatting
# ============================================================================

def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(i) == 20 for i in ids)


def test_sharable_id_hides_account_id():
    sharable = encrypt_id("acc-1")
    assert sharable != "acc-1"
    assert decrypt_id(sharable) == "acc-1"


@pytest.mark.parametrize("url", [
    "https://api-sandbox.dwolla.com/customers/ab12-cd34",
    "https://api-sandbox.dwolla.com/customers/ab12-cd34/",
])
def test_extract_customer_id_from_url(url):
    assert extract_customer_id_from_url(url) == "ab12-cd34"


def test_parse_stringify_makes_json_safe():
    value = {"created": datetime(2026, 1, 1, tzinfo=timezone.utc), "n": 1}
    result = parse_stringify(value)
    assert result["n"] == 1
    assert isinstance(result["created"], str)
    json.dumps(result)


@pytest.mark.parametrize("amount, expected", [
    (1234.5, "$1,234.50"),
    ("0", "$0.00"),
    (Decimal("-12.5"), "-$12.50"),
])
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_format_transfer_value():
    assert format_transfer_value(5) == "5.00"
    assert format_transfer_value("12.5") == "12.50"


# ============================================================================
# Validation
# ============================================================================

def test_validate_email():
    assert validate_email("ada@example.com")
    assert not validate_email("ada@example")
    assert not validate_email("")


def test_validate_postal_code():
    assert validate_postal_code("10001")
    assert not validate_postal_code("12")
    assert not validate_postal_code("1234567")


def test_sanitize_input_strips_markup():
    assert sanitize_input("  <b>Ada</b>   Lovelace ") == "bAda/b Lovelace"


# ============================================================================
# Auth form schemas
# ============================================================================

def test_auth_form_schema_by_mode():
    assert auth_form_schema("sign-in") is SignInForm
    assert auth_form_schema("sign-up") is SignUpForm
    with pytest.raises(ValueError):
        auth_form_schema("reset-password")


def test_sign_in_only_needs_credentials():
    form = SignInForm.model_validate({"email": "ada@example.com", "password": "password123"})
    assert form.email == "ada@example.com"


def test_sign_up_form_normalizes_fields():
    form = SignUpForm.model_validate(SIGN_UP_VALUES)
    assert form.email == "ada@example.com"
    assert form.state == "NY"

    user_data = form.to_user_data()
    assert "password" not in user_data.model_dump()


@pytest.mark.parametrize("field, value", [
    ("first_name", "Al"),
    ("state", "NYC"),
    ("postal_code", "12"),
    ("postal_code", "12-34"),
    ("first_name", "<a>"),
    ("last_name", "{{}}x"),
    ("password", "short"),
    ("email", "not-an-email"),
])
def test_sign_up_form_rejects(field, value):
    with pytest.raises(ValidationError) as exc_info:
        SignUpForm.model_validate({**SIGN_UP_VALUES, field: value})

    assert field in field_errors(exc_info.value)


def test_sign_up_form_checks_lengths_after_sanitizing():
    form = SignUpForm.model_validate({
        **SIGN_UP_VALUES,
        "first_name": "<Ada>",
        "city": "[" * 10 + "L" * 50,
    })

    assert form.first_name == "Ada"
    assert form.city == "L" * 50


# ============================================================================
# View components
# ============================================================================

def test_custom_input_password_is_masked():
    field = custom_input("password", "Password", "Enter your password", value="secret")
    assert field["type"] == "password"
    assert field["value"] == ""


def test_custom_input_unknown_field():
    with pytest.raises(ValueError):
        custom_input("nickname", "Nickname", "")


def test_form_fields_by_mode():
    assert [f["name"] for f in form_fields("sign-in")] == ["email", "password"]
    sign_up = form_fields("sign-up", values={"city": "London"}, errors={"city": "Too long"})
    assert len(sign_up) == 10
    city = next(f for f in sign_up if f["name"] == "city")
    assert city["value"] == "London"
    assert city["error"] == "Too long"


def test_header_box_greeting():
    assert header_box("Welcome", "Hi", user="Ada", type="greeting")["show_greeting"] is True
    assert header_box("Sign In", "Hi")["show_greeting"] is False


def test_doughnut_chart_uses_sample_values():
    chart = doughnut_chart(["a", "b"])
    assert chart["account_count"] == 2
    assert chart["data"]["datasets"][0]["data"] == [1250, 3240, 5432]
    assert chart["data"]["labels"] == ["Kaspi Bank", "Swiss Bank", "American Bank"]
    assert json.loads(chart["config_json"])["type"] == "doughnut"
