"""Tests for the JSON file storage and the service's write path."""

import asyncio
import json
from unittest.mock import patch

import pytest

from moneybox.core.errors import NotFoundError, RevisionConflictError, StorageError
from moneybox.schemas.catalog import CategoryCreate
from moneybox.services.catalog import CatalogService, find_product, new_id
from moneybox.storage.json_file import JsonFileStorage


@pytest.fixture
def storage(tmp_path):
    return JsonFileStorage(tmp_path / "products.json")


def test_load_seeds_missing_file(storage):
    catalog = storage.load()

    assert storage.path.exists()
    assert catalog.categories[0].id == "savings"
    assert catalog.metadata.revision == 0
    raw = json.loads(storage.path.read_text(encoding="utf-8"))
    assert raw["metadata"]["lastUpdated"]
    assert "updatedAt" not in raw["categories"][0]


def test_save_increments_revision(storage):
    catalog = storage.load()
    catalog.categories[0].name = "Saving"

    saved = storage.save(catalog)

    assert saved.metadata.revision == 1
    assert storage.load().categories[0].name == "Saving"
    assert catalog.metadata.revision == 0


def test_stale_save_is_rejected(storage):
    first = storage.load()
    second = storage.load()
    first.categories[0].name = "First writer"
    storage.save(first)

    second.categories[0].name = "Second writer"
    with pytest.raises(RevisionConflictError):
        storage.save(second)

    assert storage.load().categories[0].name == "First writer"


def test_save_leaves_no_temp_files(storage):
    storage.save(storage.load())

    assert [p.name for p in storage.path.parent.iterdir()] == ["products.json"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"categories": "nope"}'])
def test_unreadable_file_raises_storage_error(storage, content):
    storage.path.write_text(content, encoding="utf-8")

    with pytest.raises(StorageError):
        storage.load()


def test_corrupt_file_is_a_500_with_generic_message(client, settings):
    settings.DATA_FILE.parent.mkdir(parents=True, exist_ok=True)
    settings.DATA_FILE.write_text("{broken", encoding="utf-8")

    r = client.get("/api/categories")

    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_conflict_from_another_writer_is_409(client, settings):
    client.get("/api/categories")
    raw = json.loads(settings.DATA_FILE.read_text(encoding="utf-8"))

    original_load = JsonFileStorage.load

    def stale_load(self):
        catalog = original_load(self)
        # another process writes between our load and save
        raw["metadata"]["revision"] = catalog.metadata.revision + 1
        self.path.write_text(json.dumps(raw), encoding="utf-8")
        return catalog

    with patch.object(JsonFileStorage, "load", stale_load):
        r = client.post("/api/categories", json={"name": "Lost?"})

    assert r.status_code == 409


def test_unknown_keys_survive_an_update(client, settings):
    settings.DATA_FILE.parent.mkdir(parents=True, exist_ok=True)
    settings.DATA_FILE.write_text(json.dumps({
        "categories": [{
            "id": "savings",
            "name": "Savings",
            "order": 1,
            "color": "#0a7",
            "products": [{
                "id": "cash-isa",
                "name": "Cash ISA",
                "description": "",
                "icon": "💰",
                "order": 1,
                "features": ["tax-free"],
            }],
        }],
        "metadata": {"version": "1.0.0", "revision": 4, "author": "ops"},
    }), encoding="utf-8")

    r = client.put("/api/products/cash-isa", json={"name": "Cash ISA 2"})

    assert r.status_code == 200
    assert r.json()["features"] == ["tax-free"]
    raw = json.loads(settings.DATA_FILE.read_text(encoding="utf-8"))
    category = raw["categories"][0]
    assert category["color"] == "#0a7"
    assert category["products"][0]["name"] == "Cash ISA 2"
    assert category["products"][0]["features"] == ["tax-free"]
    assert raw["metadata"]["author"] == "ops"
    assert raw["metadata"]["revision"] == 5


def test_find_product_scans_categories_in_order(storage):
    catalog = storage.load()

    category, index = find_product(catalog, "cash-isa")

    assert category.id == "savings"
    assert index == 0
    assert find_product(catalog, "missing") is None


def test_new_id_skips_taken_stamps(storage, monkeypatch):
    catalog = storage.load()
    monkeypatch.setattr("moneybox.services.catalog.epoch_ms", lambda: 1000)
    catalog.categories[0].id = "category-1000"

    assert new_id(catalog, "category") == "category-1001"


@pytest.mark.asyncio
async def test_service_serialises_concurrent_writes(storage):
    service = CatalogService(storage)

    created = await asyncio.gather(
        *(service.create_category(CategoryCreate(name=f"C{i}")) for i in range(5))
    )

    catalog = await service.get_catalog()
    assert len({c.id for c in created}) == 5
    assert [c.order for c in catalog.categories] == [1, 2, 3, 4, 5, 6]
    assert catalog.metadata.revision == 5


@pytest.mark.asyncio
async def test_service_get_category_not_found(storage):
    with pytest.raises(NotFoundError):
        await CatalogService(storage).get_category("missing")
