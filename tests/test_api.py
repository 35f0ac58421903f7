"""HTTP surface with a fake store and vision client behind dependency overrides."""

from __future__ import annotations


PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_health(api) -> None:
    assert api.get("/health").json() == {"status": "ok"}


def test_view_paginates_and_searches(api, store) -> None:
    store.records.update({"apples": 1, "bananas": 2, "oranges": 3})

    first = api.get("/inventory/").json()
    assert first["total_pages"] == 2
    assert first["items"] == [{"name": "apples", "quantity": 1}, {"name": "bananas", "quantity": 2}]

    second = api.post("/inventory/page/next").json()
    assert second["page"] == 2
    assert second["items"] == [{"name": "oranges", "quantity": 3}]

    searched = api.get("/inventory/", params={"search": "an"}).json()
    assert searched["items"] == [{"name": "bananas", "quantity": 2}, {"name": "oranges", "quantity": 3}]
    assert searched["page"] == 1
    assert searched["total_pages"] == 1


def test_view_clamps_requested_page(api, store) -> None:
    store.records.update({"apples": 1})
    body = api.get("/inventory/", params={"page": 9}).json()
    assert body["page"] == 1


def test_add_remove_and_delete_items(api, store) -> None:
    assert api.post("/inventory/items", json={"name": " Apples "}).status_code == 200
    assert api.post("/inventory/items", json={"name": "apples"}).status_code == 200
    assert store.records == {"apples": 2}

    body = api.post("/inventory/items/apples/decrement").json()
    assert body["items"] == [{"name": "apples", "quantity": 1}]

    body = api.post("/inventory/items/Apples/decrement").json()
    assert body["items"] == []
    assert store.records == {}

    api.post("/inventory/items", json={"name": "milk"})
    api.post("/inventory/items", json={"name": "milk"})
    body = api.delete("/inventory/items/milk").json()
    assert body["write_back"]["deleted"] == ["milk"]
    assert store.records == {}


def test_names_with_slashes_can_be_removed_and_deleted(api, store) -> None:
    api.post("/inventory/items", json={"name": "Salt/Pepper"})
    api.post("/inventory/items", json={"name": "salt/pepper"})
    api.post("/inventory/items", json={"name": "1/2 gallon milk"})
    assert store.records == {"salt/pepper": 2, "1/2 gallon milk": 1}

    resp = api.post("/inventory/items/salt%2Fpepper/decrement")
    assert resp.status_code == 200
    assert store.records["salt/pepper"] == 1

    resp = api.delete("/inventory/items/1%2F2%20gallon%20milk")
    assert resp.status_code == 200
    assert resp.json()["write_back"]["deleted"] == ["1/2 gallon milk"]
    assert store.records == {"salt/pepper": 1}


def test_add_blank_name_is_rejected(api, store) -> None:
    assert api.post("/inventory/items", json={"name": "   "}).status_code == 422
    assert store.records == {}


def test_failed_write_is_reported(api, store) -> None:
    store.fail_on.add("apples")
    resp = api.post("/inventory/items", json={"name": "apples"})
    assert resp.status_code == 500
    assert "apples" in resp.json()["detail"]["failed"]


def test_scan_then_confirm(api, store, vision) -> None:
    store.records.update({"apples": 2, "bananas": 1})
    vision.result = {"Apples": 1, "Oranges": 3}

    resp = api.post("/inventory/scan", files={"file": ("shelf.png", PNG, "image/png")})
    assert resp.status_code == 200
    assert resp.json() == {
        "inventory": [
            {"name": "apples", "quantity": 1, "selected": True},
            {"name": "oranges", "quantity": 3, "selected": True},
        ]
    }
    assert store.records == {"apples": 2, "bananas": 1}

    body = api.post("/inventory/scan/confirm").json()
    assert store.records == {"apples": 3, "bananas": 1, "oranges": 3}
    assert body["write_back"]["failed"] == {}
    assert api.get("/inventory/scan").json() == {"inventory": []}


def test_scan_items_can_be_edited_and_deselected(api, store, vision) -> None:
    vision.result = {"Eggs": 6, "Milk": 1}
    api.post("/inventory/scan", files={"file": ("fridge.jpg", PNG, "image/jpeg")})

    edited = api.patch("/inventory/scan/0", json={"quantity": -12}).json()
    assert edited == {"name": "eggs", "quantity": 12, "selected": True}
    toggled = api.post("/inventory/scan/1/toggle").json()
    assert toggled["selected"] is False
    assert api.patch("/inventory/scan/5", json={"selected": False}).status_code == 404

    api.post("/inventory/scan/confirm")
    assert store.records == {"eggs": 12}


def test_scan_cancel_leaves_inventory_untouched(api, store, vision) -> None:
    store.records.update({"apples": 1})
    vision.result = {"Apples": 4}
    api.post("/inventory/scan", files={"file": ("a.png", PNG, "image/png")})

    assert api.delete("/inventory/scan").status_code == 204
    assert api.post("/inventory/scan/confirm").status_code == 400
    assert store.records == {"apples": 1}


def test_scan_without_file_is_400(api, vision) -> None:
    resp = api.post("/inventory/scan", data={"note": "no file"})
    assert resp.status_code == 400
    assert vision.calls == []


def test_scan_rejects_non_images(api, vision) -> None:
    resp = api.post("/inventory/scan", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert vision.calls == []


def test_scan_failure_is_500_and_keeps_previous_scan(api, store, vision) -> None:
    vision.result = {"Milk": 1}
    api.post("/inventory/scan", files={"file": ("a.png", PNG, "image/png")})

    vision.error = "model timed out"
    resp = api.post("/inventory/scan", files={"file": ("b.png", PNG, "image/png")})
    assert resp.status_code == 500
    assert api.get("/inventory/scan").json()["inventory"] == [{"name": "milk", "quantity": 1, "selected": True}]
    assert store.records == {}


def test_export_returns_csv_attachment(api) -> None:
    resp = api.post("/inventory/export", json=[{"name": "apples", "quantity": 3}])
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.headers["content-disposition"] == "attachment; filename=inventory.csv"
    assert resp.text == "name,quantity\napples,3\n"


def test_export_rejects_malformed_payload(api) -> None:
    assert api.post("/inventory/export", json={"name": "apples"}).status_code == 400
    assert api.post("/inventory/export", json=[{"name": "apples", "quantity": "x"}]).status_code == 400
    assert api.post("/inventory/export", content=b"{not json", headers={"content-type": "application/json"}).status_code == 400


def test_export_wrong_method_is_405(api) -> None:
    assert api.get("/inventory/export").status_code == 405


def test_logout_discards_session_state(api, store, vision) -> None:
    from main import app

    store.records.update({"apples": 1, "bananas": 1, "oranges": 1})
    api.get("/inventory/", params={"search": "an"})
    vision.result = {"Milk": 1}
    api.post("/inventory/scan", files={"file": ("a.png", PNG, "image/png")})
    assert len(app.state.sessions) == 1

    assert api.post("/session/logout").status_code == 204
    assert len(app.state.sessions) == 0

    body = api.get("/inventory/").json()
    assert body["search"] == ""
    assert api.get("/inventory/scan").json() == {"inventory": []}
