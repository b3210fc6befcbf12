"""
utils/validation_utils.py

Purpose: Input validation

- Email format check
- US state code and postal code checks
- Input sanitization for form fields
"""

import re


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


def validate_email(email: str) -> bool:
    """
    Validates email format.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks like local@domain.tld
    """
    if not email:
        return False

    return bool(EMAIL_PATTERN.match(email.strip()))


def normalize_state(state: str) -> str:
    """
    Uppercases a two-letter state code ("ny" -> "NY").
    """
    return state.strip().upper() if state else ""


def validate_postal_code(postal_code: str) -> bool:
    """
    Postal codes are 3 to 6 characters, digits and letters only.
    """
    if not postal_code:
        return False

    return bool(re.match(r"^[A-Za-z0-9]{3,6}$", postal_code.strip()))


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitizes free-text form input.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]

    # Drop markup characters
    text = re.sub(r"[<>{}\[\]]", "", text)

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()
