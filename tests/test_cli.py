# tests/test_cli.py
import io

import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient
from rich.console import Console
from rich.prompt import Confirm

import cli
from catalog_api.main import app
from catalog_sdk.client import CatalogClient


class RecordingClient(CatalogClient):
    """Talks to the dev backend and remembers every request."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls = []

    def call(self, endpoint, method="GET", data=None):
        self.calls.append((method, endpoint, data))
        return super().call(endpoint, method, data)


@pytest.fixture
def panel(monkeypatch):
    http = TestClient(app)
    http.post("/reset")
    client = RecordingClient(base_url="http://testserver/api", session=http)
    monkeypatch.setattr(cli, "c", client)
    monkeypatch.setattr(cli, "console", Console(file=io.StringIO(), width=200))
    monkeypatch.setattr(cli, "categories", [])
    monkeypatch.setattr(cli, "products", [])
    cli.reset_category_form()
    cli.reset_product_form()
    return client


def output():
    return cli.console.file.getvalue()


def seed(client):
    cat = client.add_category("Phones", "")
    prod = client.add_product("Pixel", 1500000, "128 GB", cat["id"])
    client.calls.clear()
    return cat, prod


def test_empty_category_name_makes_no_request(panel):
    cli.add_category("   ", "desc")
    assert panel.calls == []
    assert cli.status_message == "Please enter a category name!"


def test_add_category_refetches_categories(panel):
    cli.category_form.update(name="Phones", description="x")
    cli.add_category("  Phones ", " mobile ")

    assert [(m, e) for m, e, _ in panel.calls] == [("POST", "/CategoryApi"), ("GET", "/CategoryApi")]
    assert panel.calls[0][2] == {"name": "Phones", "description": "mobile"}
    assert [c["name"] for c in cli.categories] == ["Phones"]
    assert cli.category_form == {"name": "", "description": ""}
    assert cli.status_message == "Category added successfully!"


@pytest.mark.parametrize("name,price,category_id", [
    ("", "100", "1"),
    ("Pixel", "", "1"),
    ("Pixel", "abc", "1"),
    ("Pixel", "0", "1"),
    ("Pixel", "-5", "1"),
    ("Pixel", "100", ""),
    ("Pixel", "100", "x"),
])
def test_incomplete_product_form_makes_no_request(panel, name, price, category_id):
    cli.add_product(name, price, "", category_id)
    assert panel.calls == []
    assert cli.status_message == "Please fill in all product fields!"


def test_add_product_refetches_products_only(panel):
    cat, _ = seed(panel)
    cli.add_product(" Galaxy ", "990000.5", "", str(cat["id"]))

    assert [(m, e) for m, e, _ in panel.calls] == [("POST", "/ProductApi"), ("GET", "/ProductApi")]
    assert panel.calls[0][2] == {"name": "Galaxy", "price": 990000.5, "description": "", "categoryId": cat["id"]}
    assert [p["name"] for p in cli.products] == ["Pixel", "Galaxy"]


def test_delete_category_refetches_both(panel, monkeypatch):
    cat, _ = seed(panel)
    cli.load_categories()
    cli.load_products()
    panel.calls.clear()
    monkeypatch.setattr(Confirm, "ask", lambda *a, **k: True)

    cli.delete_category(cat["id"])

    assert [(m, e) for m, e, _ in panel.calls] == [
        ("DELETE", f"/CategoryApi/{cat['id']}"),
        ("GET", "/CategoryApi"),
        ("GET", "/ProductApi"),
    ]
    assert cli.categories == []
    assert cli.category_name(cli.products[0]["categoryId"]) == "N/A"
    assert "N/A" in output()


def test_declined_delete_does_nothing(panel, monkeypatch):
    _, prod = seed(panel)
    monkeypatch.setattr(Confirm, "ask", lambda *a, **k: False)
    cli.delete_product(prod["id"])
    cli.delete_category(prod["categoryId"])
    assert panel.calls == []


def test_delete_failure_alerts(panel, monkeypatch):
    monkeypatch.setattr(Confirm, "ask", lambda *a, **k: True)
    cli.delete_product(42)
    assert cli.status_message == "Failed to delete product: HTTP 404"


def test_edit_then_update_product(panel):
    cat, prod = seed(panel)
    cli.load_categories()
    cli.load_products()
    panel.calls.clear()

    cli.edit_product(prod["id"])
    assert cli.product_form == {
        "name": "Pixel", "price": "1500000.0", "description": "128 GB",
        "category_id": str(cat["id"]), "editing_id": prod["id"],
    }
    assert cli.status_message == "Editing: Pixel"
    assert panel.calls == []

    cli.update_product(prod["id"], "Pixel 9", "1990000", "", str(cat["id"]))
    assert panel.calls[0] == ("PUT", f"/ProductApi/{prod['id']}", {
        "id": prod["id"], "name": "Pixel 9", "price": 1990000.0,
        "description": "", "categoryId": cat["id"],
    })
    assert panel.calls[1][:2] == ("GET", "/ProductApi")
    assert cli.product_form["editing_id"] is None
    assert cli.products[0]["name"] == "Pixel 9"


def test_edit_unknown_product_is_noop(panel):
    cli.edit_product(123)
    assert cli.product_form["editing_id"] is None


def test_failed_update_keeps_edit_mode(panel):
    cat, prod = seed(panel)
    cli.load_products()
    cli.edit_product(prod["id"])
    cli.update_product(prod["id"], "Pixel", "10", "", "999")
    assert cli.product_form["editing_id"] == prod["id"]
    assert cli.status_message == "Failed to update product: HTTP 400"


def test_submit_product_form_routes_to_update(panel, monkeypatch):
    cat, prod = seed(panel)
    cli.load_categories()
    cli.load_products()
    cli.edit_product(prod["id"])
    panel.calls.clear()

    answers = iter(["Pixel Pro", "2500000", "", "phones"])
    monkeypatch.setattr(cli, "prompt_with_autocomplete", lambda *a, **k: next(answers))
    cli.submit_product_form()

    assert panel.calls[0][0] == "PUT"
    assert panel.calls[0][2]["categoryId"] == cat["id"]
    assert cli.products[0]["name"] == "Pixel Pro"


def test_load_failure_shows_error_row_and_keeps_cache(panel, monkeypatch):
    monkeypatch.setattr(cli, "categories", [{"id": 1, "name": "Cached"}])
    panel.base_url = "http://testserver/nowhere"
    cli.load_categories()
    assert cli.categories == [{"id": 1, "name": "Cached"}]
    assert "Error: HTTP 404" in output()


def test_empty_tables(panel):
    cli.load_categories()
    cli.load_products()
    text = output()
    assert "No categories yet" in text
    assert "No products yet" in text


def test_product_row_rendering(panel):
    seed(panel)
    cli.load_categories()
    cli.load_products()
    text = output()
    assert "1.500.000" in text
    assert "Phones" in text


def test_category_chooser(panel):
    cached = [{"id": 3, "name": "Phones"}, {"id": 7, "name": "Laptops"}]
    cli.categories[:] = cached
    assert cli.category_options() == [(None, "Select category"), (3, "Phones"), (7, "Laptops")]
    assert cli.resolve_category("laptops") == 7
    assert cli.resolve_category(" 3 ") == 3
    assert cli.resolve_category("") is None
    assert cli.resolve_category("unknown") is None
    assert set(cli.category_completer().words) == {"Phones", "3", "Laptops", "7"}


def test_format_currency():
    assert cli.format_currency(1500000) == "1.500.000\u00a0₫"
    assert cli.format_currency(999.5) == "1.000\u00a0₫"
    assert cli.format_currency(0) == "0\u00a0₫"
    assert cli.format_currency(-25000) == "-25.000\u00a0₫"


def test_non_json_response_shows_error_row(panel, monkeypatch):
    odd = FastAPI()

    @odd.get("/api/CategoryApi")
    async def html_page():
        return PlainTextResponse("<html>proxy login</html>")

    monkeypatch.setattr(cli, "c", CatalogClient(base_url="http://testserver/api", session=TestClient(odd)))
    cli.load_categories()
    assert cli.categories == []
    assert "Error: Invalid JSON response" in output()


def test_parse_id():
    assert cli.parse_id(" 12 ") == 12
    assert cli.parse_id("") is None
    assert cli.parse_id(None) is None
    assert cli.parse_id("1.5") is None
