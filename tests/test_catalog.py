import json

import pytest
from pydantic import ValidationError

from airouter.catalog import (
    DEFAULT_CATALOG,
    Catalog,
    ToolCategory,
    catalog,
    load_catalog,
    parse_catalog,
)
from tests.conftest import make_model


class TestCatalog:
    def test_preserves_insertion_order(self):
        store = Catalog([
            ToolCategory(category="B", models=[]),
            ToolCategory(category="A", models=[]),
            ToolCategory(category="C", models=[]),
        ])
        assert store.names() == ["B", "A", "C"]
        assert [c.category for c in store.categories()] == ["B", "A", "C"]

    def test_duplicate_category_rejected(self):
        with pytest.raises(ValueError, match="Duplicate category"):
            Catalog([ToolCategory(category="A"), ToolCategory(category="A")])

    def test_get_unknown_returns_none(self):
        assert Catalog([]).get("Nope") is None

    def test_contains_and_len(self):
        store = Catalog([ToolCategory(category="A")])
        assert "A" in store
        assert "B" not in store
        assert len(store) == 1

    def test_find_model(self):
        model = make_model(name="Alpha")
        store = Catalog([ToolCategory(category="Text", models=[model])])
        assert store.find_model("Text", "Alpha") is model
        assert store.find_model("Text", "Beta") is None
        assert store.find_model("Image", "Alpha") is None


class TestModelInfo:
    def test_routing_fields_not_serialized(self):
        dumped = make_model().model_dump()
        assert "provider" not in dumped
        assert "providerModel" not in dumped
        assert "kind" not in dumped
        assert set(dumped) == {"name", "logo", "pros", "cons", "pricePerToken", "price", "description"}

    def test_immutable(self):
        model = make_model()
        with pytest.raises(ValidationError):
            model.name = "changed"


class TestDefaultCatalog:
    def test_categories_unique(self):
        names = [entry["category"] for entry in DEFAULT_CATALOG]
        assert len(names) == len(set(names))

    def test_singleton_matches_default(self):
        assert catalog.names() == [entry["category"] for entry in DEFAULT_CATALOG]

    def test_every_model_routes_to_known_provider(self):
        from airouter.llm import PROVIDERS

        for entry in catalog.categories():
            for model in entry.models:
                assert model.provider in PROVIDERS, f"{model.name} has unknown provider"
                assert model.providerModel
                assert model.kind in ("text", "image")


class TestLoadCatalog:
    def test_parse_list(self):
        store = parse_catalog([{"category": "A", "models": [make_model().model_dump()]}])
        assert store.names() == ["A"]
        assert store.get("A").models[0].name == "Test Model"

    def test_parse_mapping(self):
        store = parse_catalog({"A": [], "B": [make_model().model_dump()]})
        assert store.names() == ["A", "B"]
        assert len(store.get("B").models) == 1

    def test_parse_rejects_other_shapes(self):
        with pytest.raises(ValueError):
            parse_catalog("not a catalog")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"category": "Video Generation", "models": []}]))
        store = load_catalog(str(path))
        assert store.names() == ["Video Generation"]

    def test_load_default_without_path(self):
        store = load_catalog()
        assert store.names() == catalog.names()
