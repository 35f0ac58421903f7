"""inventory_client against stubbed HTTP responses."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

import inventory_client
from inventory_client import ApiError, InventoryApiClient, make_client_from_env


def _response(status_code=200, json_data=None, text=""):
    return SimpleNamespace(status_code=status_code, json=lambda: json_data, text=text)


@pytest.fixture
def http(monkeypatch):
    calls = []
    queue = []

    def fake_post(url, **kwargs):
        calls.append(("POST-login", url, kwargs))
        return _response(json_data={"access_token": f"token-{len(calls)}"})

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        return queue.pop(0)

    monkeypatch.setattr(inventory_client.requests, "post", fake_post)
    monkeypatch.setattr(inventory_client.requests, "request", fake_request)
    return SimpleNamespace(calls=calls, queue=queue)


def test_logs_in_lazily_and_sends_bearer_token(http) -> None:
    http.queue.append(_response(json_data={"items": [], "total_pages": 1}))
    client = InventoryApiClient(base_url="http://api/", email="a@example.com", password="pw")

    client.view(search="an")

    login, request = http.calls
    assert login[1] == "http://api/auth/jwt/login"
    assert request[0] == "GET"
    assert request[1] == "http://api/inventory/"
    assert request[2]["params"] == {"search": "an"}
    assert request[2]["headers"]["Authorization"] == "Bearer token-1"


def test_retries_once_after_401(http) -> None:
    http.queue.extend([_response(401), _response(json_data={"items": []})])
    client = InventoryApiClient(base_url="http://api", email="a", password="b", token="stale")

    assert client.add_item("Apples") == {"items": []}
    assert [c[0] for c in http.calls] == ["POST", "POST-login", "POST"]
    assert http.calls[-1][2]["headers"]["Authorization"] == "Bearer token-2"


def test_item_names_are_url_quoted(http) -> None:
    http.queue.append(_response(json_data={}))
    client = InventoryApiClient(base_url="http://api", email="a", password="b", token="t")
    client.remove_item("olive oil/extra")
    assert http.calls[0][1] == "http://api/inventory/items/olive%20oil%2Fextra/decrement"


def test_errors_raise_api_error(http) -> None:
    http.queue.append(_response(400, text="Invalid inventory data"))
    client = InventoryApiClient(base_url="http://api", email="a", password="b", token="t")
    with pytest.raises(ApiError):
        client.export_csv([{"name": "x"}])


def test_export_collects_every_page(http) -> None:
    http.queue.extend(
        [
            _response(json_data={"items": [{"name": "a", "quantity": 1}], "total_pages": 2}),
            _response(json_data={"items": [{"name": "b", "quantity": 2}], "total_pages": 2}),
            _response(text="name,quantity\na,1\nb,2\n"),
        ]
    )
    client = InventoryApiClient(base_url="http://api", email="a", password="b", token="t")

    assert client.export_csv() == "name,quantity\na,1\nb,2\n"
    assert http.calls[-1][2]["json"] == [{"name": "a", "quantity": 1}, {"name": "b", "quantity": 2}]


def test_make_client_requires_url(monkeypatch) -> None:
    monkeypatch.delenv("INVENTORY_API_URL", raising=False)
    with pytest.raises(RuntimeError):
        make_client_from_env()


def test_logout_closes_the_inventory_session_and_drops_the_token(http) -> None:
    http.queue.append(_response(204))
    client = InventoryApiClient(base_url="http://api", email="a", password="b", token="t")

    client.logout()

    method, url, _ = http.calls[0]
    assert (method, url) == ("POST", "http://api/session/logout")
    assert client.token is None
