"""Tests for the Python client: API wrapper, drag reorder and explorer state."""

from unittest.mock import MagicMock

import httpx
import pytest

from moneybox.client import ApiError, CatalogClient, ExplorerState, move_item, reorder_command


@pytest.fixture
def api(client):
    return CatalogClient(base_url="http://testserver/api", http=client)


def _items(*ids):
    return [{"id": i, "order": n} for n, i in enumerate(ids, start=1)]


# ── move_item ───────────────────────────────────

def test_move_item_down_inserts_before_drop_row():
    result = move_item(_items("a", "b", "c", "d"), 0, 2)

    assert [i["id"] for i in result] == ["b", "a", "c", "d"]
    assert [i["order"] for i in result] == [1, 2, 3, 4]


def test_move_item_up():
    result = move_item(_items("a", "b", "c", "d"), 3, 1)

    assert [i["id"] for i in result] == ["a", "d", "b", "c"]
    assert reorder_command(result) == [
        {"id": "a", "order": 1}, {"id": "d", "order": 2},
        {"id": "b", "order": 3}, {"id": "c", "order": 4},
    ]


def test_move_item_does_not_mutate_input():
    items = _items("a", "b")
    move_item(items, 1, 0)
    assert items == _items("a", "b")


def test_move_item_out_of_range():
    with pytest.raises(IndexError):
        move_item(_items("a"), 0, 3)


# ── CatalogClient ───────────────────────────────

def test_client_round_trip(api):
    category = api.create_category("Investing", description="Grow money")
    product = api.create_product(category["id"], "Stocks & Shares ISA", icon="📈")
    api.update_product(product["id"], "S&S ISA")

    fetched = api.get_category(category["id"])
    assert fetched["products"][0]["name"] == "S&S ISA"
    assert api.health_check()["status"] == "OK"

    result = api.bulk_operation("delete", [product["id"]])
    assert result["processed"] == 1

    assert api.delete_category(category["id"]) is None
    assert category["id"] not in [c["id"] for c in api.get_categories()["categories"]]


def test_client_raises_api_error(api):
    with pytest.raises(ApiError) as exc_info:
        api.create_product("missing", "Orphan")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Category not found"


def test_client_validation_error_details(api):
    with pytest.raises(ApiError) as exc_info:
        api.create_category("")

    assert exc_info.value.status_code == 400
    assert exc_info.value.details


def test_client_image_calls(api):
    uploaded = api.upload_image(
        "data:image/gif;base64,R0lGODlhAQABAAAAACw=", name="dot.gif", type="image/gif"
    )
    assert api.get_images()["total"] == 1
    assert api.get_image(uploaded["filename"]).startswith(b"GIF89a")
    api.delete_image(uploaded["filename"])
    assert api.get_images()["images"] == []


# ── ExplorerState ───────────────────────────────

@pytest.fixture
def explorer(api):
    for name in ["Investing", "Pensions", "Property"]:
        api.create_category(name)
    state = ExplorerState(client=api)
    assert state.load()
    return state


def test_product_cards_toggle_independently(explorer):
    assert explorer.toggle_product("cash-isa") is True
    assert explorer.toggle_product("other") is True
    assert explorer.is_expanded("cash-isa") and explorer.is_expanded("other")

    assert explorer.toggle_product("cash-isa") is False
    assert explorer.is_expanded("other")


def test_carousel_wraps_both_ways(explorer):
    names = lambda: [c["name"] for c in explorer.visible_categories()]

    assert names() == ["Savings", "Investing", "Pensions"]
    explorer.next_category()
    explorer.next_category()
    explorer.next_category()
    assert names() == ["Property", "Savings", "Investing"]
    explorer.prev_category()
    assert names() == ["Pensions", "Property", "Savings"]


def test_carousel_shows_all_when_three_or_fewer(api):
    api.create_category("Investing")
    state = ExplorerState(client=api)
    state.load()

    assert len(state.visible_categories()) == 2
    state.next_category()
    assert len(state.visible_categories()) == 2


def test_selection_and_drag_are_exclusive(explorer):
    explorer.toggle_admin()
    assert explorer.drag_enabled

    explorer.enter_selection_mode()
    explorer.set_selected("cash-isa", True)
    assert not explorer.drag_enabled
    assert explorer.drop_product("savings", 0, 0) is False

    explorer.toggle_selection_mode()
    assert explorer.drag_enabled
    assert explorer.selected == []


def test_drop_product_pushes_reorder(explorer, api):
    first = api.create_product("savings", "Easy Access")["id"]
    explorer.load()
    explorer.toggle_admin()

    assert explorer.drop_product("savings", 1, 0)

    products = explorer._category("savings")["products"]
    assert [p["id"] for p in products] == [first, "cash-isa"]
    assert [p["order"] for p in products] == [1, 2]
    assert explorer.message == "Products reordered"


def test_bulk_move_selected(explorer):
    target = explorer.categories[1]["id"]
    explorer.toggle_admin()
    explorer.enter_selection_mode()
    explorer.select_all("savings")

    assert explorer.bulk_move(target)

    assert explorer.selected == []
    assert explorer._category("savings")["products"] == []
    assert explorer._category(target)["products"][0]["id"] == "cash-isa"
    assert explorer.message == "1 processed, 0 failed"


def test_failed_mutation_sets_message_without_retry(explorer):
    explorer.client = MagicMock(wraps=explorer.client)
    explorer.client.bulk_operation.side_effect = ApiError(404, "Target category not found")
    explorer.toggle_admin()
    explorer.enter_selection_mode()
    explorer.set_selected("cash-isa", True)

    assert explorer.bulk_move("missing") is False

    assert explorer.message == "Target category not found"
    assert explorer.client.bulk_operation.call_count == 1
    assert explorer.selected == ["cash-isa"]


def test_load_failure_sets_error_and_retry_recovers():
    client = MagicMock()
    client.get_categories.side_effect = [
        httpx.ConnectError("down"),
        {"categories": [{"id": "savings", "name": "Savings", "order": 1, "products": []}],
         "metadata": {}},
    ]
    state = ExplorerState(client=client)

    assert state.load() is False
    assert state.error

    assert state.retry() is True
    assert state.error is None
    assert state.categories[0]["id"] == "savings"
