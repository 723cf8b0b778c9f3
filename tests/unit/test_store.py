"""Unit tests for the in-memory template store."""

import pytest

from blockdoc.core.errors import NotFoundError, ValidationError
from blockdoc.models.template import TemplateDocument
from blockdoc.strategies.stores import InMemoryTemplateStore


@pytest.fixture
def store():
    return InMemoryTemplateStore()


class TestInMemoryTemplateStore:
    """Test suite for InMemoryTemplateStore."""

    def test_put_and_get(self, store, resume_template):
        """Test storing and reading a document."""
        store.put("resume", resume_template.to_document())
        restored = TemplateDocument.from_document(store.get("resume"))
        assert restored == resume_template

    def test_get_returns_copy(self, store):
        """Test that get returns a copy."""
        store.put("doc", {"page": {"size": "A4"}})
        fetched = store.get("doc")
        fetched["page"]["size"] = "Letter"
        assert store.get("doc")["page"]["size"] == "A4"

    def test_put_stores_copy(self, store):
        """Test that put stores a copy."""
        document = {"page": {"size": "A4"}}
        store.put("doc", document)
        document["page"]["size"] = "Legal"
        assert store.get("doc")["page"]["size"] == "A4"

    def test_put_replaces(self, store):
        """Test that put replaces an existing document."""
        store.put("doc", {"version": "1.0"})
        store.put("doc", {"version": "2.0"})
        assert store.get("doc") == {"version": "2.0"}
        assert len(store) == 1

    def test_get_missing(self, store):
        """Test that reading an unknown key raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.get("missing")

    def test_delete(self, store):
        """Test deleting a document."""
        store.put("doc", {})
        store.delete("doc")
        assert "doc" not in store

    def test_delete_missing(self, store):
        """Test that deleting an unknown key raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.delete("missing")

    def test_blank_key_rejected(self, store):
        """Test that blank keys are rejected."""
        with pytest.raises(ValidationError):
            store.put("  ", {})

    def test_query_by_equality(self, store):
        """Test querying by dotted-key equality."""
        store.put("b", {"schemaVersion": "builder-v1", "page": {"size": "A4"}})
        store.put("a", {"schemaVersion": "builder-v1", "page": {"size": "Letter"}})
        store.put("c", {"schemaVersion": "legacy", "page": {"size": "A4"}})

        assert [key for key, _ in store.query(schemaVersion="builder-v1")] == ["a", "b"]
        assert [key for key, _ in store.query(**{"page.size": "A4"})] == ["b", "c"]
        assert [
            key for key, _ in store.query(**{"schemaVersion": "builder-v1", "page.size": "A4"})
        ] == ["b"]

    def test_query_missing_key_never_matches(self, store):
        """Test that a missing key never matches."""
        store.put("doc", {"page": {}})
        assert store.query(**{"page.size": None}) == []

    def test_query_without_filters_returns_all(self, store):
        """Test that a query without filters returns every document."""
        store.put("x", {})
        store.put("y", {})
        assert [key for key, _ in store.query()] == ["x", "y"]

    def test_initial_documents(self):
        """Test seeding the store with documents."""
        store = InMemoryTemplateStore({"seed": {"version": "1.0"}})
        assert store.get("seed") == {"version": "1.0"}
