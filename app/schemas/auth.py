"""
app/schemas/auth.py

Pydantic form schemas for the sign-in / sign-up pages.
auth_form_schema(mode) picks the schema, sign-in only needs credentials.
"""

from typing import Literal, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.validation_utils import (
    normalize_state,
    sanitize_input,
    validate_email,
    validate_postal_code,
)


AuthMode = Literal["sign-in", "sign-up"]


class SignInForm(BaseModel):
    """Credentials submitted from the sign-in page."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    email: str = Field(..., description="Account email")
    password: str = Field(..., min_length=8, description="Account password")

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        if not validate_email(v):
            raise ValueError("Invalid email address")
        return v.lower()


class NewUserParams(BaseModel):
    """Profile fields of a new user (everything but the password)."""

    first_name: str
    last_name: str
    address1: str
    city: str
    state: str
    postal_code: str
    date_of_birth: str
    ssn: str
    email: str


class SignUpForm(SignInForm):
    """Full onboarding form."""

    first_name: str = Field(..., min_length=3)
    last_name: str = Field(..., min_length=3)
    address1: str = Field(..., max_length=50)
    city: str = Field(..., max_length=50)
    state: str = Field(..., min_length=2, max_length=2)
    postal_code: str = Field(..., min_length=3, max_length=6)
    date_of_birth: str = Field(..., min_length=3)
    ssn: str = Field(..., min_length=3)

    # Sanitized before the length constraints are checked
    @field_validator("first_name", "last_name", "address1", "city", mode="before")
    @classmethod
    def clean_text(cls, v):
        return sanitize_input(v) if isinstance(v, str) else v

    @field_validator("postal_code")
    @classmethod
    def check_postal_code(cls, v: str) -> str:
        if not validate_postal_code(v):
            raise ValueError("Postal code must be 3 to 6 letters or digits")
        return v

    @field_validator("state")
    @classmethod
    def upper_state(cls, v: str) -> str:
        return normalize_state(v)

    def to_user_data(self) -> NewUserParams:
        return NewUserParams(**self.model_dump(exclude={"password"}))


def auth_form_schema(mode: AuthMode) -> Type[Union[SignInForm, SignUpForm]]:
    """
    Returns the form schema for the given page mode.

    Raises:
        ValueError: for an unknown mode
    """
    if mode == "sign-in":
        return SignInForm
    if mode == "sign-up":
        return SignUpForm
    raise ValueError(f"Unknown auth form mode: {mode}")
