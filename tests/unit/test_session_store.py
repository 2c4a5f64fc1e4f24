"""
Unit Tests for the Session Store.

Test Coverage:
- in-memory store isolation (values are copied in and out)
- versioned estimate snapshot: save, load, unknown versions
- Firestore-backed store: lazy document load, merge writes, deletes, errors
- backend selection from settings
"""

from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore

from jamb_estimate.config.errors import ErrorCode, SessionStoreError
from jamb_estimate.config.settings import settings
from jamb_estimate.models.estimate import EstimateTotals
from jamb_estimate.models.session import SNAPSHOT_SCHEMA_VERSION, EstimateSnapshot
from jamb_estimate.services.selection_state import SelectionState
from jamb_estimate.services.session_store import (
    FirestoreSessionStore,
    InMemorySessionStore,
    SessionKeys,
    create_session_store,
)


class TestInMemorySessionStore:
    """Tests for the dict-backed store."""

    def test_get_set_remove(self, memory_store):
        memory_store.set(SessionKeys.ZIPCODE, "10006")
        assert memory_store.get(SessionKeys.ZIPCODE) == "10006"
        assert memory_store.keys() == ["zipcode"]

        memory_store.remove(SessionKeys.ZIPCODE)
        memory_store.remove(SessionKeys.ZIPCODE)
        assert memory_store.get(SessionKeys.ZIPCODE, "none") == "none"

    def test_values_are_copied(self, memory_store):
        photos = ["a.jpg"]
        memory_store.set(SessionKeys.PHOTOS, photos)
        photos.append("b.jpg")
        memory_store.get(SessionKeys.PHOTOS).append("c.jpg")
        assert memory_store.get(SessionKeys.PHOTOS) == ["a.jpg"]

    def test_clear(self):
        store = InMemorySessionStore({"zipcode": "10006", "state": "NY"})
        store.clear()
        assert store.keys() == []

    def test_selection_key_per_flow(self):
        assert SessionKeys.selection("rooms") == "selection:rooms"


class TestSnapshot:
    """Tests for the estimate snapshot hand-off."""

    def test_missing_snapshot_is_none(self, memory_store):
        assert memory_store.load_snapshot() is None

    def test_save_and_load(self, memory_store):
        snapshot = EstimateSnapshot(
            selection={"default": {"4-1-1": 20.0}},
            totals=EstimateTotals(labor_subtotal=100, final_labor=100, final_total=115),
            estimate_number="NY-10006-20250701-0905",
        )
        memory_store.save_snapshot(snapshot)

        assert memory_store.load_snapshot() == snapshot
        assert memory_store.get(SessionKeys.TOTALS)["final_total"] == 115

    def test_unknown_version_is_rejected(self, memory_store):
        memory_store.set(SessionKeys.SNAPSHOT, {"schema_version": SNAPSHOT_SCHEMA_VERSION + 1})
        with pytest.raises(SessionStoreError) as exc_info:
            memory_store.load_snapshot()
        assert exc_info.value.code == ErrorCode.SESSION_SNAPSHOT_VERSION
        assert exc_info.value.key == SessionKeys.SNAPSHOT

    def test_unversioned_value_is_rejected(self, memory_store):
        memory_store.set(SessionKeys.SNAPSHOT, "legacy")
        with pytest.raises(SessionStoreError) as exc_info:
            memory_store.load_snapshot()
        assert exc_info.value.code == ErrorCode.SESSION_SNAPSHOT_VERSION

    def test_invalid_snapshot_is_rejected(self, memory_store):
        memory_store.set(SessionKeys.SNAPSHOT, {"schema_version": SNAPSHOT_SCHEMA_VERSION, "totals": "n/a"})
        with pytest.raises(SessionStoreError) as exc_info:
            memory_store.load_snapshot()
        assert exc_info.value.code == ErrorCode.SESSION_STORE_ERROR


class TestFirestoreSessionStore:
    """Tests for the Firestore-backed store."""

    def _document(self, client):
        return client.collection.return_value.document.return_value

    def test_document_is_loaded_once(self, mock_firestore_client):
        store = FirestoreSessionStore("session-1", collection="estimateSessions", db=mock_firestore_client)

        assert store.get(SessionKeys.ZIPCODE) == "10006"
        assert store.get(SessionKeys.STATE) is None
        mock_firestore_client.collection.assert_called_with("estimateSessions")
        mock_firestore_client.collection.return_value.document.assert_called_with("session-1")
        assert self._document(mock_firestore_client).get.call_count == 1

    def test_set_is_a_merge_write(self, mock_firestore_client):
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        store.set(SessionKeys.STATE, "NY")

        self._document(mock_firestore_client).set.assert_called_once_with({"state": "NY"}, merge=True)
        assert store.get(SessionKeys.STATE) == "NY"

    def test_remove_deletes_field(self, mock_firestore_client):
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        store.remove(SessionKeys.ZIPCODE)
        store.remove(SessionKeys.CITY)

        self._document(mock_firestore_client).update.assert_called_once_with(
            {"zipcode": firestore.DELETE_FIELD}
        )
        assert store.get(SessionKeys.ZIPCODE) is None

    def test_clear_deletes_document(self, mock_firestore_client):
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        store.clear()
        self._document(mock_firestore_client).delete.assert_called_once()
        assert store.keys() == []

    def test_missing_document_is_empty(self, mock_firestore_client):
        self._document(mock_firestore_client).get.return_value = MagicMock(exists=False)
        store = FirestoreSessionStore("session-2", db=mock_firestore_client)
        assert store.keys() == []

    def test_write_failure_raises_store_error(self, mock_firestore_client):
        self._document(mock_firestore_client).set.side_effect = Exception("unavailable")
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        with pytest.raises(SessionStoreError) as exc_info:
            store.set(SessionKeys.STATE, "NY")
        assert exc_info.value.key == "state"
        assert store.get(SessionKeys.STATE) is None

    def test_load_failure_raises_store_error(self, mock_firestore_client):
        self._document(mock_firestore_client).get.side_effect = Exception("permission denied")
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        with pytest.raises(SessionStoreError):
            store.get(SessionKeys.ZIPCODE)

    def test_selection_restores_from_document(self, mock_firestore_client, catalog):
        store = FirestoreSessionStore("session-1", db=mock_firestore_client)
        state = SelectionState(catalog, store)
        assert state.quantity("4-1-1") == 20.0


class TestBackendSelection:
    """Tests for create_session_store."""

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "session_backend", "memory")
        assert isinstance(create_session_store("s"), InMemorySessionStore)

    def test_firestore_backend(self, monkeypatch):
        monkeypatch.setattr(settings, "session_backend", "firestore")
        store = create_session_store("s")
        assert isinstance(store, FirestoreSessionStore)
        assert store.session_id == "s"
        assert store.collection == settings.session_collection
