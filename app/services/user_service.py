"""
app/services/user_service.py

Purpose: User profile documents

- Create profile documents at sign-up
- Look up profiles by identity-backend account id
- Remove a profile written by a sign-up that did not complete
"""

from app.db.mongo import get_users_collection
from app.core.logging import get_logger, LogContext
from datetime import datetime, timezone
from typing import Dict, Any, List
from utils.id_utils import generate_id

logger = get_logger(__name__)


async def create_user_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Persists a new profile document.

    Args:
        data: Profile fields (user_id, names, address, dwolla customer url/id...)

    Returns:
        The stored document, including its generated _id
    """
    with LogContext(user_id=data.get("user_id")):
        users = get_users_collection()

        document = {
            "_id": generate_id(),
            **data,
            "created_at": datetime.now(timezone.utc),
        }

        await users.insert_one(document)
        logger.info("Profile document created", extra={"user_id": data.get("user_id")})

        return document


async def find_user_documents(user_id: str, limit: int = 2) -> List[Dict[str, Any]]:
    """
    Returns profile documents whose user_id matches.

    Args:
        user_id: Identity-backend account id
        limit: Upper bound on documents fetched; two is enough to tell
            "exactly one" from "ambiguous"

    Returns:
        List of matching documents (possibly empty)
    """
    users = get_users_collection()
    return await users.find({"user_id": user_id}).to_list(length=limit)


async def delete_user_document(document_id: str) -> bool:
    """
    Removes a profile document (sign-up rollback).

    Returns:
        True if a document was deleted
    """
    users = get_users_collection()
    result = await users.delete_one({"_id": document_id})
    return result.deleted_count == 1
