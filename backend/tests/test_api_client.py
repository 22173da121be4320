import pytest

import sweetshop_client
from sweetshop_client import ApiError, SweetShopApiClient, make_client_from_env


class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or str(payload)

    def json(self):
        return self._payload


class FakeRequests:
    """Records calls and replays queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)

    def request(self, method, url, **kwargs):
        return self._next(method, url, kwargs)


@pytest.fixture()
def client():
    return SweetShopApiClient(base_url="http://shop.test/api/", email="sam@example.com", password="pw")


def test_login_then_purchase(monkeypatch, client):
    fake = FakeRequests(
        FakeResponse(200, {"access_token": "tok-1", "token_type": "bearer"}),
        FakeResponse(200, {"message": "Purchase successful", "item": {"quantity": 4}}),
    )
    monkeypatch.setattr(sweetshop_client, "requests", fake)

    result = client.purchase("abc", 2)

    assert result["item"]["quantity"] == 4
    login_call, purchase_call = fake.calls
    assert login_call[1] == "http://shop.test/api/auth/jwt/login"
    assert login_call[2]["data"] == {"username": "sam@example.com", "password": "pw"}
    assert purchase_call[0] == "POST"
    assert purchase_call[1] == "http://shop.test/api/inventory/sweets/abc/purchase"
    assert purchase_call[2]["json"] == {"quantity": 2}
    assert purchase_call[2]["headers"]["Authorization"] == "Bearer tok-1"


def test_expired_token_relogs_once(monkeypatch, client):
    client.token = "stale"
    fake = FakeRequests(
        FakeResponse(401, {"detail": "Unauthorized"}),
        FakeResponse(200, {"access_token": "fresh"}),
        FakeResponse(200, [{"id": "1", "name": "Fudge"}]),
    )
    monkeypatch.setattr(sweetshop_client, "requests", fake)

    assert client.list_sweets() == [{"id": "1", "name": "Fudge"}]
    assert client.token == "fresh"
    assert fake.calls[2][2]["headers"]["Authorization"] == "Bearer fresh"


def test_forbidden_restock_raises_without_relogin(monkeypatch, client):
    client.token = "tok"
    fake = FakeRequests(FakeResponse(403, {"detail": "Admin access required"}, text='{"detail":"Admin access required"}'))
    monkeypatch.setattr(sweetshop_client, "requests", fake)

    with pytest.raises(ApiError) as exc:
        client.restock("abc", 5)

    assert exc.value.status_code == 403
    assert "Admin access required" in str(exc.value)
    assert len(fake.calls) == 1


def test_search_only_sends_given_filters(monkeypatch, client):
    client.token = "tok"
    fake = FakeRequests(FakeResponse(200, []))
    monkeypatch.setattr(sweetshop_client, "requests", fake)

    client.search_sweets(name="choc", max_price=2.5)

    method, url, kwargs = fake.calls[0]
    assert (method, url) == ("GET", "http://shop.test/api/sweets/search")
    assert kwargs["params"] == {"name": "choc", "max_price": 2.5}


def test_login_failure_raises(monkeypatch, client):
    fake = FakeRequests(FakeResponse(400, {"detail": "LOGIN_BAD_CREDENTIALS"}))
    monkeypatch.setattr(sweetshop_client, "requests", fake)

    with pytest.raises(ApiError) as exc:
        client.login()
    assert exc.value.status_code == 400


def test_make_client_from_env(monkeypatch):
    monkeypatch.setenv("SWEETSHOP_API_URL", "http://shop.test")
    monkeypatch.setenv("SWEETSHOP_API_EMAIL", "bot@example.com")
    monkeypatch.setenv("SWEETSHOP_API_PASSWORD", "pw")
    monkeypatch.delenv("SWEETSHOP_API_TOKEN", raising=False)

    c = make_client_from_env()
    assert (c.base_url, c.email, c.token) == ("http://shop.test", "bot@example.com", None)

    monkeypatch.delenv("SWEETSHOP_API_URL")
    with pytest.raises(RuntimeError, match="SWEETSHOP_API_URL"):
        make_client_from_env()
