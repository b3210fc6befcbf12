from datetime import datetime, timezone

import pytest

from app.actions import bank_actions, user_actions
from app.services.plaid_service import PlaidServiceError
from utils.id_utils import decrypt_id, encrypt_id

FUNDING_SOURCE_URL = "https://api-sandbox.dwolla.com/funding-sources/fs-1"


class FakePlaid:
    def __init__(self, calls):
        self.calls = calls
        self.fail = {}
        self.accounts = [{"account_id": "acc-1", "name": "Plaid Checking"}]

    def _record(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    async def link_token_create(self, client_user_id, client_name):
        self._record("link_token_create")
        self.link_request = (client_user_id, client_name)
        return {"link_token": "link-sandbox-1", "expiration": "2026-10-19T12:00:00Z"}

    async def item_public_token_exchange(self, public_token):
        self._record("item_public_token_exchange")
        return {"access_token": "access-sandbox-1", "item_id": "item-1"}

    async def accounts_get(self, access_token):
        self._record("accounts_get")
        return self.accounts

    async def processor_token_create(self, access_token, account_id):
        self._record("processor_token_create")
        self.processor_request = (access_token, account_id)
        return "processor-sandbox-1"


@pytest.fixture
def plaid(monkeypatch, calls):
    fake = FakePlaid(calls)
    monkeypatch.setattr(user_actions, "get_plaid_service", lambda: fake)
    return fake


@pytest.fixture
def funding_source(monkeypatch, calls):
    class Stub:
        url = FUNDING_SOURCE_URL
        requests = []

    async def add(dwolla_customer_id, processor_token, bank_name):
        calls.append("add_funding_source")
        Stub.requests.append((dwolla_customer_id, processor_token, bank_name))
        return Stub.url

    Stub.requests = []
    monkeypatch.setattr(user_actions, "add_funding_source", add)
    return Stub


@pytest.fixture
def revalidated(monkeypatch, calls):
    paths = []

    def revalidate(path):
        calls.append("revalidate_path")
        paths.append(path)
        return 0

    monkeypatch.setattr(user_actions, "revalidate_path", revalidate)
    monkeypatch.setattr(bank_actions, "revalidate_path", revalidate)
    return paths


def _bank_document(doc_id, user_id, account_id, created_at=None):
    return {
        "_id": doc_id,
        "user_id": user_id,
        "bank_id": f"item-{doc_id}",
        "account_id": account_id,
        "access_token": f"access-{doc_id}",
        "funding_source_url": f"https://api-sandbox.dwolla.com/funding-sources/{doc_id}",
        "sharable_id": encrypt_id(account_id),
        "created_at": created_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
    }


# ============================================================================
# Link token
# ============================================================================

@pytest.mark.asyncio
async def test_create_link_token(plaid, user):
    result = await user_actions.create_link_token(user)

    assert result == {"link_token": "link-sandbox-1"}
    assert plaid.link_request == ("doc_1", "AdaLovelace")


@pytest.mark.asyncio
async def test_create_link_token_failure(plaid, user):
    plaid.fail["link_token_create"] = PlaidServiceError("INVALID_API_KEYS")

    assert await user_actions.create_link_token(user) is None


# ============================================================================
# Public token exchange
# ============================================================================

@pytest.mark.asyncio
async def test_exchange_public_token_runs_steps_in_order(
    plaid, funding_source, revalidated, banks_collection, user, calls
):
    result = await user_actions.exchange_public_token("public-sandbox-1", user)

    assert result == {"public_token_exchange": "Public Token Exchange complete!"}
    assert calls == [
        "item_public_token_exchange",
        "accounts_get",
        "processor_token_create",
        "add_funding_source",
        "revalidate_path",
    ]
    assert plaid.processor_request == ("access-sandbox-1", "acc-1")
    assert funding_source.requests == [("cust-1", "processor-sandbox-1", "Plaid Checking")]
    assert revalidated == ["/"]

    [document] = banks_collection.documents
    assert document["user_id"] == "doc_1"
    assert document["bank_id"] == "item-1"
    assert document["account_id"] == "acc-1"
    assert document["access_token"] == "access-sandbox-1"
    assert document["funding_source_url"] == FUNDING_SOURCE_URL
    assert decrypt_id(document["sharable_id"]) == "acc-1"


@pytest.mark.asyncio
async def test_exchange_public_token_stops_without_funding_source(
    plaid, funding_source, revalidated, banks_collection, user, calls
):
    funding_source.url = None

    result = await user_actions.exchange_public_token("public-sandbox-1", user)

    assert result is None
    assert calls[-1] == "add_funding_source"
    assert banks_collection.documents == []
    assert revalidated == []


@pytest.mark.asyncio
async def test_exchange_public_token_item_without_accounts(
    plaid, funding_source, revalidated, banks_collection, user, calls
):
    plaid.accounts = []

    assert await user_actions.exchange_public_token("public-sandbox-1", user) is None
    assert "processor_token_create" not in calls
    assert banks_collection.documents == []


@pytest.mark.asyncio
async def test_exchange_public_token_document_write_failure(
    plaid, funding_source, revalidated, banks_collection, user
):
    banks_collection.fail_with = RuntimeError("not primary")

    assert await user_actions.exchange_public_token("public-sandbox-1", user) is None
    assert revalidated == []


# ============================================================================
# Linked accounts
# ============================================================================

@pytest.mark.asyncio
async def test_get_banks_newest_first(banks_collection):
    banks_collection.documents.extend([
        _bank_document("b1", "doc_1", "acc-1", datetime(2026, 1, 1, tzinfo=timezone.utc)),
        _bank_document("b2", "doc_1", "acc-2", datetime(2026, 2, 1, tzinfo=timezone.utc)),
        _bank_document("b3", "doc_2", "acc-3"),
    ])

    banks = await bank_actions.get_banks("doc_1")

    assert [bank.id for bank in banks] == ["b2", "b1"]


@pytest.mark.asyncio
async def test_get_banks_store_error_returns_empty(banks_collection):
    banks_collection.fail_with = RuntimeError("connection reset")

    assert await bank_actions.get_banks("doc_1") == []


@pytest.mark.asyncio
async def test_get_bank_by_sharable_id(banks_collection):
    banks_collection.documents.append(_bank_document("b9", "doc_2", "acc-9"))

    bank = await bank_actions.get_bank_by_sharable_id(encrypt_id("acc-9"))

    assert bank.id == "b9"
    assert await bank_actions.get_bank_by_sharable_id(encrypt_id("acc-unknown")) is None


# ============================================================================
# Transfers
# ============================================================================

@pytest.fixture
def transfer(monkeypatch):
    requests = []

    async def create(source_funding_source_url, destination_funding_source_url, amount):
        requests.append((source_funding_source_url, destination_funding_source_url, amount))
        return "https://api-sandbox.dwolla.com/transfers/tr-1"

    monkeypatch.setattr(bank_actions, "create_transfer", create)
    return requests


@pytest.mark.asyncio
async def test_transfer_funds(banks_collection, transfer, revalidated, user):
    banks_collection.documents.extend([
        _bank_document("b1", "doc_1", "acc-1"),
        _bank_document("b9", "doc_2", "acc-9"),
    ])

    url = await bank_actions.transfer_funds(user, "b1", encrypt_id("acc-9"), "25.00")

    assert url == "https://api-sandbox.dwolla.com/transfers/tr-1"
    assert transfer == [(
        "https://api-sandbox.dwolla.com/funding-sources/b1",
        "https://api-sandbox.dwolla.com/funding-sources/b9",
        "25.00",
    )]
    assert revalidated == ["/"]


@pytest.mark.asyncio
async def test_transfer_funds_rejects_foreign_source(banks_collection, transfer, revalidated, user):
    banks_collection.documents.extend([
        _bank_document("b5", "doc_2", "acc-5"),
        _bank_document("b9", "doc_2", "acc-9"),
    ])

    assert await bank_actions.transfer_funds(user, "b5", encrypt_id("acc-9"), 10) is None
    assert transfer == []


@pytest.mark.asyncio
async def test_transfer_funds_rejects_non_positive_amount(banks_collection, transfer, revalidated, user):
    banks_collection.documents.append(_bank_document("b1", "doc_1", "acc-1"))

    assert await bank_actions.transfer_funds(user, "b1", encrypt_id("acc-1"), 0) is None
    assert transfer == []


@pytest.mark.asyncio
async def test_transfer_funds_unknown_receiver(banks_collection, transfer, revalidated, user):
    banks_collection.documents.append(_bank_document("b1", "doc_1", "acc-1"))

    assert await bank_actions.transfer_funds(user, "b1", encrypt_id("acc-missing"), 5) is None
    assert transfer == []
    assert revalidated == []
