"""
utils/id_utils.py

Purpose: Identifier helpers

- Document id generation
- Shareable id obfuscation (base64, not encryption in the security sense)
- Customer id extraction from payment-network resource URLs
"""

import base64
import uuid
from urllib.parse import urlparse


def generate_id() -> str:
    """
    Returns a new unique document id (20 hex chars, like Appwrite's ID.unique()).
    """
    return uuid.uuid4().hex[:20]


def encrypt_id(id: str) -> str:
    """
    Obfuscates an id for sharing (e.g. in a transfer form).
    """
    return base64.b64encode(id.encode("utf-8")).decode("ascii")


def decrypt_id(id: str) -> str:
    """
    Reverses encrypt_id().
    """
    return base64.b64decode(id.encode("ascii")).decode("utf-8")


def extract_customer_id_from_url(url: str) -> str:
    """
    Returns the last path segment of a customer resource URL.

    Example:
        https://api-sandbox.dwolla.com/customers/ab12-cd34 -> ab12-cd34
    """
    path = urlparse(url).path or url
    return path.rstrip("/").split("/")[-1]
