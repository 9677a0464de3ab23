"""
Unit Tests for Document Stores

Tests JSONDocumentStore against a temp directory and InMemoryDocumentStore
through the same operations.

PATTERNS:
---------
1. Every test builds its own store on tmp_path - no shared state
2. Corrupt/missing files are written by hand to exercise recovery
3. Write failures are injected with monkeypatch
"""

import json
import logging
import threading

import numpy as np
import pytest

from semantic_corpus.config import CorpusConfig
from semantic_corpus.core.errors import DimensionMismatch, StorageError, ValidationError
from semantic_corpus.core.protocols import DocumentStore
from semantic_corpus.storage.store import (
    InMemoryDocumentStore,
    JSONDocumentStore,
    get_document_store,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "documents.json"


@pytest.fixture
def store(store_path):
    return JSONDocumentStore(store_path)


@pytest.fixture(params=["json", "memory"])
def any_store(request, tmp_path):
    """Run a test against both implementations."""
    if request.param == "json":
        return JSONDocumentStore(tmp_path / "documents.json")
    return InMemoryDocumentStore()


def legacy_record(doc_id, text, embedding, category=None):
    """A document in the unversioned format (bare array on disk)."""
    metadata = {"createdAt": "2024-05-01T10:00:00.000Z", "length": len(text)}
    if category:
        metadata["category"] = category
    return {"id": doc_id, "text": text, "embedding": embedding, "metadata": metadata}


# ---------------------------------------------------------------------------
# INITIALIZATION
# ---------------------------------------------------------------------------


class TestInitialization:
    """Test file creation on construction."""

    def test_creates_directory_and_empty_collection(self, store_path):
        JSONDocumentStore(store_path)

        assert store_path.exists()
        data = json.loads(store_path.read_text())
        assert data == {"version": 1, "next_id": 1, "dimension": None, "documents": []}

    def test_existing_file_is_not_overwritten(self, store_path):
        first = JSONDocumentStore(store_path)
        first.add_document("hello", [1.0, 0.0])

        second = JSONDocumentStore(store_path)

        assert len(second.get_all_documents()) == 1

    def test_path_property(self, store, store_path):
        assert store.path == store_path


# ---------------------------------------------------------------------------
# ADD / READ
# ---------------------------------------------------------------------------


class TestAddDocument:
    """Test insertion and round trip."""

    def test_round_trip(self, any_store):
        """add then read gives exactly one new entry with the same text and embedding."""
        before = any_store.get_all_documents()

        doc = any_store.add_document("The quick brown fox", [0.1, 0.2, 0.3], {"category": "animals"})
        after = any_store.get_all_documents()

        assert len(after) == len(before) + 1
        new = [d for d in after if d.id not in {b.id for b in before}]
        assert len(new) == 1
        assert new[0].id == doc.id
        assert new[0].text == "The quick brown fox"
        assert new[0].embedding == [0.1, 0.2, 0.3]

    def test_metadata_captured(self, any_store):
        doc = any_store.add_document("héllo wörld", [1.0, 0.0], {"category": "greeting"})

        assert doc.metadata.length == len("héllo wörld")
        assert doc.metadata.category == "greeting"
        assert doc.metadata.created_at.endswith("Z")
        assert "T" in doc.metadata.created_at

    def test_category_optional(self, any_store):
        doc = any_store.add_document("no category", [1.0])

        assert doc.metadata.category is None

    def test_ids_unique_and_sequential(self, any_store):
        ids = [any_store.add_document(f"doc {i}", [1.0, float(i)]).id for i in range(5)]

        assert len(set(ids)) == 5
        assert ids == ["doc-1", "doc-2", "doc-3", "doc-4", "doc-5"]

    def test_insertion_order_preserved(self, any_store):
        for text in ["first", "second", "third"]:
            any_store.add_document(text, [1.0, 0.0])

        assert [d.text for d in any_store.get_all_documents()] == ["first", "second", "third"]

    def test_reads_are_idempotent(self, any_store):
        any_store.add_document("a", [1.0, 0.0])
        any_store.add_document("b", [0.0, 1.0])

        assert any_store.get_all_documents() == any_store.get_all_documents()

    def test_persists_across_instances(self, store_path):
        JSONDocumentStore(store_path).add_document("durable", [0.5, 0.5], {"category": "x"})

        reopened = JSONDocumentStore(store_path)
        docs = reopened.get_all_documents()

        assert len(docs) == 1
        assert docs[0].text == "durable"
        assert docs[0].metadata.category == "x"
        assert reopened.dimension == 2

    def test_ids_never_reused_across_instances(self, store_path):
        first = JSONDocumentStore(store_path).add_document("one", [1.0])
        second = JSONDocumentStore(store_path).add_document("two", [1.0])

        assert first.id != second.id

    def test_get_document(self, any_store):
        doc = any_store.add_document("find me", [1.0])

        assert any_store.get_document(doc.id) == doc
        assert any_store.get_document("doc-999") is None

    def test_read_snapshot(self, any_store):
        any_store.add_document("a", [1.0, 0.0])
        any_store.add_document("b", [0.0, 1.0])

        documents, dimension = any_store.read_snapshot()

        assert [d.text for d in documents] == ["a", "b"]
        assert dimension == 2

    def test_numpy_embedding_accepted(self, any_store):
        doc = any_store.add_document("array", np.array([0.25, 0.75], dtype=np.float32))

        assert doc.embedding == [0.25, 0.75]

    def test_concurrent_writers_do_not_lose_updates(self, store):
        def worker(n):
            for i in range(5):
                store.add_document(f"worker {n} doc {i}", [1.0, float(i)])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        docs = store.get_all_documents()
        assert len(docs) == 20
        assert len({d.id for d in docs}) == 20


# ---------------------------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------------------------


class TestValidation:
    """Invalid input raises and persists nothing."""

    @pytest.mark.parametrize("text", ["", "   ", None, 42])
    def test_invalid_text_rejected(self, any_store, text):
        any_store.add_document("existing", [1.0, 0.0])

        with pytest.raises(ValidationError):
            any_store.add_document(text, [1.0, 0.0])

        assert any_store.get_stats().total_documents == 1

    @pytest.mark.parametrize(
        "embedding",
        [None, [], "abc", [1.0, "x"], [1.0, float("nan")], [float("inf"), 1.0], [True, 1.0], {"a": 1.0}, 3.0],
    )
    def test_invalid_embedding_rejected(self, any_store, embedding):
        with pytest.raises(ValidationError):
            any_store.add_document("text", embedding)

        assert any_store.get_all_documents() == []

    def test_non_string_category_rejected(self, any_store):
        with pytest.raises(ValidationError):
            any_store.add_document("text", [1.0], {"category": 7})

    def test_dimension_recorded_on_first_insert(self, any_store):
        assert any_store.dimension is None

        any_store.add_document("first", [1.0, 2.0, 3.0])

        assert any_store.dimension == 3

    def test_dimension_mismatch_rejected(self, any_store):
        any_store.add_document("first", [1.0, 2.0, 3.0])

        with pytest.raises(DimensionMismatch) as exc_info:
            any_store.add_document("second", [1.0, 2.0])

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert len(any_store.get_all_documents()) == 1


# ---------------------------------------------------------------------------
# STATS
# ---------------------------------------------------------------------------


class TestStats:
    """Test derived statistics."""

    def test_empty_corpus(self, any_store):
        stats = any_store.get_stats()

        assert stats.total_documents == 0
        assert stats.total_vectors == 0
        assert stats.average_text_length == 0
        assert stats.categories == []
        assert stats.dimension is None

    def test_populated_corpus(self, any_store):
        any_store.add_document("ab", [1.0, 0.0], {"category": "x"})
        any_store.add_document("abcd", [1.0, 0.0])
        any_store.add_document("abcdef", [1.0, 0.0], {"category": "y"})
        any_store.add_document("abcdefgh", [1.0, 0.0], {"category": "x"})

        stats = any_store.get_stats()

        assert stats.total_documents == 4
        assert stats.total_vectors == 4
        assert stats.average_text_length == 5.0
        assert stats.categories == ["x", "y"]
        assert stats.dimension == 2

    def test_to_dict_uses_wire_keys(self, any_store):
        any_store.add_document("abc", [1.0], {"category": "x"})

        data = any_store.get_stats().to_dict()

        assert data["totalDocuments"] == 1
        assert data["averageTextLength"] == 3.0
        assert data["categories"] == ["x"]


# ---------------------------------------------------------------------------
# RECOVERY
# ---------------------------------------------------------------------------


class TestRecovery:
    """Missing or corrupt storage reads as an empty corpus, with a signal."""

    def test_missing_file_reads_empty_without_recovery_signal(self, store, store_path):
        store_path.unlink()

        assert store.get_all_documents() == []
        assert store.recovery_count == 0

    def test_corrupt_file_reads_empty_and_warns(self, store, store_path, caplog):
        store_path.write_text("{not valid json")

        with caplog.at_level(logging.WARNING, logger="semantic_corpus.storage.store"):
            docs = store.get_all_documents()

        assert docs == []
        assert store.recovery_count == 1
        assert any("unreadable or malformed" in r.getMessage() for r in caplog.records)

    def test_malformed_structure_reads_empty(self, store, store_path):
        store_path.write_text(json.dumps({"version": 1, "documents": [{"id": 5}]}))

        assert store.get_all_documents() == []
        assert store.recovery_count == 1

    def test_stats_on_corrupt_file(self, store, store_path):
        store_path.write_text("garbage")

        assert store.get_stats().total_documents == 0

    def test_write_after_corruption_preserves_corrupt_image(self, store, store_path):
        store_path.write_text("garbage that was once data")

        doc = store.add_document("fresh start", [1.0, 0.0])

        backups = list(store_path.parent.glob("documents.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text() == "garbage that was once data"
        assert [d.id for d in store.get_all_documents()] == [doc.id]

    def test_future_version_is_unreadable(self, store, store_path):
        newer = {"version": 2, "next_id": 4, "dimension": 2, "documents": []}
        store_path.write_text(json.dumps(newer))

        assert store.get_all_documents() == []
        assert store.recovery_count == 1

    def test_future_version_backed_up_before_write(self, store, store_path):
        newer = json.dumps({"version": 2, "next_id": 4, "dimension": 2, "documents": []})
        store_path.write_text(newer)

        store.add_document("current format", [1.0, 0.0])

        backups = list(store_path.parent.glob("documents.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text() == newer
        assert json.loads(store_path.read_text())["version"] == 1

    def test_snapshot_reads_corrupt_file_once(self, store, store_path):
        store_path.write_text("{not valid json")

        documents, dimension = store.read_snapshot()

        assert documents == []
        assert dimension is None
        assert store.recovery_count == 1


# ---------------------------------------------------------------------------
# LEGACY FORMAT
# ---------------------------------------------------------------------------


class TestLegacyFormat:
    """Bare-array files from the unversioned format."""

    def test_reads_bare_array(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([
            legacy_record("1714557600000abc123xyz", "old one", [1.0, 0.0], "legacy"),
            legacy_record("1714557600001def456uvw", "old two", [0.0, 1.0]),
        ]))

        store = JSONDocumentStore(store_path)
        docs = store.get_all_documents()

        assert [d.text for d in docs] == ["old one", "old two"]
        assert docs[0].metadata.category == "legacy"
        assert docs[1].metadata.category is None
        assert store.dimension == 2

    def test_write_upgrades_to_versioned_format(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([legacy_record("old-id", "old", [1.0, 0.0])]))

        store = JSONDocumentStore(store_path)
        store.add_document("new", [0.0, 1.0])

        data = json.loads(store_path.read_text())
        assert data["version"] == 1
        assert data["dimension"] == 2
        assert [d["id"] for d in data["documents"]] == ["old-id", "doc-2"]

    def test_new_ids_skip_existing_ids(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([legacy_record("doc-2", "taken", [1.0])]))

        store = JSONDocumentStore(store_path)
        doc = store.add_document("new", [1.0])

        assert doc.id == "doc-3"


# ---------------------------------------------------------------------------
# WRITE FAILURES
# ---------------------------------------------------------------------------


class TestWriteFailures:
    """A failed write raises StorageError and leaves the previous image intact."""

    def test_failed_replace_raises_storage_error(self, store, store_path, monkeypatch):
        store.add_document("kept", [1.0, 0.0])
        before = store_path.read_text()

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("semantic_corpus.storage.store.os.replace", fail_replace)

        with pytest.raises(StorageError) as exc_info:
            store.add_document("lost", [0.0, 1.0])

        assert "disk full" in exc_info.value.message
        assert store_path.read_text() == before
        assert list(store_path.parent.glob("*.tmp")) == []

    def test_failure_does_not_consume_an_id(self, store, monkeypatch):
        def fail_replace(src, dst):
            raise OSError("read-only")

        with monkeypatch.context() as m:
            m.setattr("semantic_corpus.storage.store.os.replace", fail_replace)
            with pytest.raises(StorageError):
                store.add_document("lost", [1.0])

        assert store.add_document("saved", [1.0]).id == "doc-1"


# ---------------------------------------------------------------------------
# FACTORY / PROTOCOL
# ---------------------------------------------------------------------------


class TestGetDocumentStore:
    """Test the get_document_store factory function."""

    def test_memory_store_when_no_path(self):
        store = get_document_store(CorpusConfig(data_path=None))

        assert isinstance(store, InMemoryDocumentStore)

    def test_json_store_for_path(self, store_path):
        store = get_document_store(CorpusConfig(data_path=store_path))

        assert isinstance(store, JSONDocumentStore)
        assert store.path == store_path


class TestProtocolCompliance:
    """Both stores implement the DocumentStore protocol."""

    def test_json_store(self, store):
        assert isinstance(store, DocumentStore)

    def test_memory_store(self):
        assert isinstance(InMemoryDocumentStore(), DocumentStore)
