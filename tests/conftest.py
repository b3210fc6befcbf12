"""
Pytest configuration and fixtures

In-memory stand-ins for the Motor collections and the identity backend, so
actions and routes run without MongoDB or vendor accounts.
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from app.core.cookies import SessionCookies
from app.models.user import User


# ============================================================================
# Document store
# ============================================================================

def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = sorted(
            self._documents,
            key=lambda doc: doc.get(key) or 0,
            reverse=direction < 0,
        )
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        if length is None:
            return list(self._documents)
        return list(self._documents[:length])


class FakeCollection:
    """The subset of AsyncIOMotorCollection the services use."""

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def insert_one(self, document: Dict[str, Any]):
        self._check()
        self.documents.append(dict(document))

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self._check()
        return FakeCursor([doc for doc in self.documents if _matches(doc, query)])

    async def find_one(self, query: Dict[str, Any], sort=None) -> Optional[Dict[str, Any]]:
        self._check()
        matches = [doc for doc in self.documents if _matches(doc, query)]
        if sort:
            key, direction = sort[0]
            matches.sort(key=lambda doc: doc.get(key) or 0, reverse=direction < 0)
        return matches[0] if matches else None

    async def delete_one(self, query: Dict[str, Any]) -> SimpleNamespace:
        self._check()
        for index, doc in enumerate(self.documents):
            if _matches(doc, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def users_collection(monkeypatch) -> FakeCollection:
    collection = FakeCollection()
    monkeypatch.setattr("app.services.user_service.get_users_collection", lambda: collection)
    return collection


@pytest.fixture
def banks_collection(monkeypatch) -> FakeCollection:
    collection = FakeCollection()
    monkeypatch.setattr("app.services.bank_service.get_banks_collection", lambda: collection)
    return collection


# ============================================================================
# Identity backend
# ============================================================================

class FakeAppwrite:
    """Records every call; `fail` maps method name -> exception to raise."""

    def __init__(self, calls: List[str]):
        self.calls = calls
        self.fail: Dict[str, Exception] = {}
        self.account = {"$id": "acct_1", "email": "ada@example.com", "name": "Ada Lovelace"}
        self.deleted_users: List[str] = []

    def _record(self, name: str):
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    async def create_account(self, user_id, email, password, name):
        self._record("create_account")
        return {**self.account, "email": email, "name": name}

    async def create_email_password_session(self, email, password):
        self._record("create_session")
        return {"$id": "sess_1", "userId": self.account["$id"], "secret": "secret-123"}

    async def get_account(self):
        self._record("get_account")
        return self.account

    async def delete_session(self, session_id="current"):
        self._record("delete_session")

    async def delete_user(self, user_id):
        self._record("delete_user")
        self.deleted_users.append(user_id)


@pytest.fixture
def calls() -> List[str]:
    return []


@pytest.fixture
def appwrite(monkeypatch, calls) -> FakeAppwrite:
    fake = FakeAppwrite(calls)
    monkeypatch.setattr("app.actions.user_actions.create_admin_client", lambda: fake)

    def session_client(secret):
        from app.core.exceptions import AuthenticationError
        if not secret:
            raise AuthenticationError("No session")
        return fake

    monkeypatch.setattr("app.actions.user_actions.create_session_client", session_client)
    return fake


# ============================================================================
# Domain objects
# ============================================================================

@pytest.fixture
def cookies() -> SessionCookies:
    return SessionCookies()


@pytest.fixture
def user_document() -> Dict[str, Any]:
    return {
        "_id": "doc_1",
        "user_id": "acct_1",
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": "1 Analytical Way",
        "city": "London",
        "state": "NY",
        "postal_code": "10001",
        "date_of_birth": "1815-12-10",
        "ssn": "1234",
        "dwolla_customer_url": "https://api-sandbox.dwolla.com/customers/cust-1",
        "dwolla_customer_id": "cust-1",
    }


@pytest.fixture
def user(user_document) -> User:
    return User.from_document(user_document)
