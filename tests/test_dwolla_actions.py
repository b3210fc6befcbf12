import pytest

from app.actions import dwolla_actions
from app.services.dwolla_service import DwollaServiceError

BASE = "https://api-sandbox.dwolla.com"


class FakeDwolla:
    def __init__(self):
        self.requests = []
        self.fail = {}

    def _record(self, name, *args):
        self.requests.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    async def create_customer(self, customer):
        self._record("create_customer", customer)
        return f"{BASE}/customers/cust-1"

    async def create_on_demand_authorization(self):
        self._record("create_on_demand_authorization")
        return {"self": {"href": f"{BASE}/on-demand-authorizations/auth-1"}}

    async def create_funding_source(self, customer_id, payload):
        self._record("create_funding_source", customer_id, payload)
        return f"{BASE}/funding-sources/fs-1"

    async def create_transfer(self, payload):
        self._record("create_transfer", payload)
        return f"{BASE}/transfers/tr-1"


@pytest.fixture
def dwolla(monkeypatch):
    fake = FakeDwolla()
    monkeypatch.setattr(dwolla_actions, "get_dwolla_service", lambda: fake)
    return fake


@pytest.mark.asyncio
async def test_create_dwolla_customer_maps_field_names(dwolla):
    url = await dwolla_actions.create_dwolla_customer({
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "type": "personal",
        "address1": "1 Analytical Way",
        "city": "London",
        "state": "NY",
        "postal_code": "10001",
        "date_of_birth": "1815-12-10",
        "ssn": "1234",
    })

    assert url == f"{BASE}/customers/cust-1"
    _, payload = dwolla.requests[0]
    assert payload["firstName"] == "Ada"
    assert payload["postalCode"] == "10001"
    assert payload["dateOfBirth"] == "1815-12-10"
    assert "first_name" not in payload


@pytest.mark.asyncio
async def test_create_dwolla_customer_failure_returns_none(dwolla):
    dwolla.fail["create_customer"] = DwollaServiceError("Duplicate customer")

    assert await dwolla_actions.create_dwolla_customer({"email": "ada@example.com"}) is None


@pytest.mark.asyncio
async def test_add_funding_source_authorizes_then_attaches(dwolla):
    url = await dwolla_actions.add_funding_source(
        dwolla_customer_id="cust-1",
        processor_token="processor-sandbox-1",
        bank_name="Plaid Checking",
    )

    assert url == f"{BASE}/funding-sources/fs-1"
    assert [r[0] for r in dwolla.requests] == ["create_on_demand_authorization", "create_funding_source"]

    _, customer_id, payload = dwolla.requests[1]
    assert customer_id == "cust-1"
    assert payload["name"] == "Plaid Checking"
    assert payload["plaidToken"] == "processor-sandbox-1"
    assert payload["_links"]["self"]["href"].endswith("auth-1")


@pytest.mark.asyncio
async def test_add_funding_source_stops_without_authorization(dwolla):
    dwolla.fail["create_on_demand_authorization"] = DwollaServiceError("Forbidden")

    url = await dwolla_actions.add_funding_source("cust-1", "processor-sandbox-1", "Plaid Checking")

    assert url is None
    assert [r[0] for r in dwolla.requests] == ["create_on_demand_authorization"]


@pytest.mark.asyncio
async def test_create_funding_source_failure_returns_none(dwolla):
    dwolla.fail["create_funding_source"] = DwollaServiceError("Duplicate resource")

    assert await dwolla_actions.add_funding_source("cust-1", "token", "Bank") is None


@pytest.mark.asyncio
async def test_create_transfer_payload(dwolla):
    url = await dwolla_actions.create_transfer(
        f"{BASE}/funding-sources/src",
        f"{BASE}/funding-sources/dst",
        12.5,
    )

    assert url == f"{BASE}/transfers/tr-1"
    _, payload = dwolla.requests[0]
    assert payload["amount"] == {"currency": "USD", "value": "12.50"}
    assert payload["_links"]["source"]["href"].endswith("/src")
    assert payload["_links"]["destination"]["href"].endswith("/dst")
