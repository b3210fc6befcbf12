"""
app/actions/user_actions.py

Purpose: Auth and bank-link server actions

- sign_in / sign_up / logout_account / get_logged_in_user
- create_link_token / exchange_public_token / create_bank_account
- get_user_info

Every action is a single-shot sequence of vendor calls: failures are logged
and reported to the caller as None. sign_up additionally deletes a
half-created identity account.
"""

from typing import Any, Dict, Optional

from app.actions.dwolla_actions import add_funding_source, create_dwolla_customer
from app.core.cookies import SessionCookies
from app.core.exceptions import AdvancedBankError, ExternalServiceError
from app.core.logging import get_logger, LogContext
from app.models.bank_account import BankAccount, BankAccountFields
from app.models.user import User
from app.schemas.auth import NewUserParams
from app.services.appwrite_service import create_admin_client, create_session_client
from app.services.bank_service import create_bank_document
from app.services.page_cache import revalidate_path
from app.services.plaid_service import get_plaid_service
from app.services.user_service import (
    create_user_document,
    delete_user_document,
    find_user_documents,
)
from utils.constants import (
    CURRENT_SESSION,
    DWOLLA_CUSTOMER_TYPE,
    PUBLIC_TOKEN_EXCHANGE_COMPLETE,
    ROOT_PATH,
)
from utils.format_utils import parse_stringify
from utils.id_utils import encrypt_id, extract_customer_id_from_url, generate_id

logger = get_logger(__name__)


class FundingSourceError(ExternalServiceError):
    """Funding-source creation produced no URL."""
    pass


# ============================================================================
# AUTH
# ============================================================================

async def sign_in(email: str, password: str, cookies: SessionCookies) -> Optional[User]:
    """
    Opens a session, stores its secret in the session cookie and returns the
    user's profile document.

    Returns:
        User profile, or None on any failure
    """
    with LogContext(action="sign_in"):
        try:
            admin = create_admin_client()
            session = await admin.create_email_password_session(email, password)

            cookies.set(session["secret"])

            return await get_user_info(session["userId"])
        except Exception as e:
            logger.error(f"Sign-in failed: {e}")
            return None


async def sign_up(user_data: NewUserParams, password: str, cookies: SessionCookies) -> Optional[User]:
    """
    Creates the identity account, the payment-network customer and the
    profile document, then signs the new user in.

    If anything fails after the identity account exists, that account is
    deleted again, together with the profile document if one was written.

    Returns:
        New user profile, or None on failure
    """
    new_user_account: Optional[Dict[str, Any]] = None
    new_user: Optional[Dict[str, Any]] = None

    with LogContext(action="sign_up"):
        try:
            admin = create_admin_client()
            new_user_account = await admin.create_account(
                generate_id(),
                user_data.email,
                password,
                f"{user_data.first_name} {user_data.last_name}",
            )

            if not new_user_account:
                raise AdvancedBankError("Error creating user")

            dwolla_customer_url = await create_dwolla_customer({
                **user_data.model_dump(),
                "type": DWOLLA_CUSTOMER_TYPE,
            })

            if not dwolla_customer_url:
                raise ExternalServiceError("Error creating dwolla customer")

            dwolla_customer_id = extract_customer_id_from_url(dwolla_customer_url)

            new_user = await create_user_document({
                **user_data.model_dump(),
                "user_id": new_user_account["$id"],
                "dwolla_customer_url": dwolla_customer_url,
                "dwolla_customer_id": dwolla_customer_id,
            })

            session = await admin.create_email_password_session(user_data.email, password)

            cookies.set(session["secret"])

            logger.info("User signed up", extra={"user_id": new_user_account["$id"]})
            return User.from_document(new_user)

        except Exception as e:
            logger.error(f"Sign-up failed: {e}")

            if new_user is not None:
                try:
                    await delete_user_document(new_user["_id"])
                    logger.info("Deleted partially created profile", extra={"user_id": new_user["user_id"]})
                except Exception as cleanup_error:
                    logger.error(
                        f"Could not delete partially created profile {new_user['_id']}: {cleanup_error}"
                    )

            account_id = (new_user_account or {}).get("$id")
            if account_id:
                try:
                    await create_admin_client().delete_user(account_id)
                    logger.info("Deleted partially created account", extra={"user_id": account_id})
                except Exception as cleanup_error:
                    logger.error(
                        f"Could not delete partially created account {account_id}: {cleanup_error}"
                    )

            return None


async def get_logged_in_user(cookies: SessionCookies) -> Optional[Dict[str, Any]]:
    """
    Returns the identity account of the current session, or None when there
    is no session or the backend rejects it.
    """
    try:
        client = create_session_client(cookies.get())
        account = await client.get_account()
        return parse_stringify(account)
    except Exception as e:
        logger.debug(f"No logged-in user: {e}")
        return None


async def logout_account(cookies: SessionCookies) -> Optional[bool]:
    """
    Clears the session cookie, then deletes the remote session.

    The cookie is cleared even when the remote deletion fails.

    Returns:
        True on success, None on failure
    """
    session_secret = cookies.get()
    cookies.delete()

    try:
        client = create_session_client(session_secret)
        await client.delete_session(CURRENT_SESSION)
        return True
    except Exception as e:
        logger.warning(f"Logout failed: {e}")
        return None


# ============================================================================
# PROFILE / BANK DOCUMENTS
# ============================================================================

async def get_user_info(user_id: str) -> Optional[User]:
    """
    Looks up the profile document of an identity account.

    Returns:
        The document when exactly one matches, otherwise None
    """
    try:
        documents = await find_user_documents(user_id)

        if len(documents) != 1:
            if documents:
                logger.warning(
                    f"Ambiguous profile lookup: {len(documents)}+ documents",
                    extra={"user_id": user_id}
                )
            return None

        return User.from_document(documents[0])
    except Exception as e:
        logger.error(f"Fetching user info failed: {e}", extra={"user_id": user_id})
        return None


async def create_bank_account(fields: BankAccountFields) -> Optional[BankAccount]:
    """
    Persists a bank account document.

    Returns:
        The stored account, or None on failure
    """
    try:
        document = await create_bank_document(fields.model_dump())
        return BankAccount.from_document(document)
    except Exception as e:
        logger.error(f"Creating bank account document failed: {e}")
        return None


# ============================================================================
# BANK LINKING
# ============================================================================

async def create_link_token(user: User) -> Optional[Dict[str, str]]:
    """
    Requests a Plaid Link token scoped to the user.

    Returns:
        {"link_token": ...}, or None on failure
    """
    with LogContext(user_id=user.id, action="create_link_token"):
        try:
            response = await get_plaid_service().link_token_create(
                client_user_id=user.id,
                client_name=user.first_name + user.last_name,
            )
            return {"link_token": response["link_token"]}
        except Exception as e:
            logger.error(f"An error occurred while creating a link token: {e}")
            return None


async def exchange_public_token(public_token: str, user: User) -> Optional[Dict[str, str]]:
    """
    Completes an account link.

    Steps, in order, each awaited before the next:
    1. public token -> access token + item id
    2. first account of the item
    3. processor token for the payment network
    4. funding source on the user's customer
    5. bank account document (shareable id = encrypted account id)
    6. revalidate the dashboard

    Returns:
        {"public_token_exchange": ...}, or None if any step fails
    """
    with LogContext(user_id=user.id, action="exchange_public_token"):
        try:
            plaid = get_plaid_service()

            exchange = await plaid.item_public_token_exchange(public_token)
            access_token = exchange["access_token"]
            item_id = exchange["item_id"]

            accounts = await plaid.accounts_get(access_token)
            if not accounts:
                raise ExternalServiceError("Item has no accounts")
            account_data = accounts[0]

            processor_token = await plaid.processor_token_create(
                access_token=access_token,
                account_id=account_data["account_id"],
            )

            funding_source_url = await add_funding_source(
                dwolla_customer_id=user.dwolla_customer_id,
                processor_token=processor_token,
                bank_name=account_data["name"],
            )

            if not funding_source_url:
                raise FundingSourceError("Funding source creation returned no URL")

            bank_account = await create_bank_account(BankAccountFields(
                user_id=user.id,
                bank_id=item_id,
                account_id=account_data["account_id"],
                access_token=access_token,
                funding_source_url=funding_source_url,
                sharable_id=encrypt_id(account_data["account_id"]),
            ))

            if bank_account is None:
                raise AdvancedBankError("Bank account document was not created")

            revalidate_path(ROOT_PATH)

            logger.info("Bank account linked", extra={"item_id": item_id})
            return {"public_token_exchange": PUBLIC_TOKEN_EXCHANGE_COMPLETE}

        except Exception as e:
            logger.error(f"An error occurred while exchanging the public token: {e}")
            return None
