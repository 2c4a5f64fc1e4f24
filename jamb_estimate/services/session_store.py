"""Session store for JAMB Estimate.

Per-session key-value bus shared by every step of the estimate flow
(selection -> estimate -> checkout). Values are JSON-serializable. The
estimate step also writes one versioned ``EstimateSnapshot`` that checkout
reads back instead of recomputing.

Writes are last-writer-wins: a session belongs to a single user.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import structlog
from firebase_admin import firestore
from pydantic import ValidationError as PydanticValidationError

from jamb_estimate.config.errors import ErrorCode, SessionStoreError
from jamb_estimate.config.settings import settings
from jamb_estimate.models.session import SNAPSHOT_SCHEMA_VERSION, EstimateSnapshot

logger = structlog.get_logger(__name__)


class SessionKeys:
    """Names of every key written to the session store."""

    # Selection maps, one per flow prefix
    SELECTION_PREFIX = "selection"
    FINISHING_SELECTIONS = "finishingSelections"
    CUSTOMER_SUPPLIED = "customerSuppliedMaterials"
    CALCULATION_RESULTS = "calculationResults"

    # Scheduling
    SELECTED_TIME = "selectedTime"
    TIME_COEFFICIENT = "timeCoefficient"

    # Address / job details
    ZIPCODE = "zipcode"
    STATE = "state"
    CITY = "city"
    COUNTRY = "country"
    ADDRESS = "fullAddress"
    DESCRIPTION = "description"
    PHOTOS = "photos"

    # Last computed totals, written by the estimate step
    TOTALS = "totals"
    SNAPSHOT = "estimateSnapshot"

    @classmethod
    def selection(cls, flow: str) -> str:
        """Selection key for a flow, e.g. ``selection:rooms``."""
        return f"{cls.SELECTION_PREFIX}:{flow}"


class SessionStore(ABC):
    """Abstract per-session key-value store."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Value for key, or default when absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key (no-op when absent)."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every key of the session."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Keys currently set."""

    def save_snapshot(self, snapshot: EstimateSnapshot) -> None:
        """Write the estimate hand-off snapshot and its totals."""
        self.set(SessionKeys.SNAPSHOT, snapshot.model_dump(mode="json"))
        self.set(SessionKeys.TOTALS, snapshot.totals.to_session_dict())
        logger.info(
            "snapshot_saved",
            schema_version=snapshot.schema_version,
            services=sum(len(group) for group in snapshot.selection.values()),
            final_total=snapshot.totals.final_total,
        )

    def load_snapshot(self) -> Optional[EstimateSnapshot]:
        """Read the snapshot back.

        Returns:
            The snapshot, or None when the estimate step has not written one.

        Raises:
            SessionStoreError: If the stored snapshot has an unknown schema
                version or does not parse.
        """
        raw = self.get(SessionKeys.SNAPSHOT)
        if raw is None:
            return None

        version = raw.get("schema_version") if isinstance(raw, dict) else None
        if version != SNAPSHOT_SCHEMA_VERSION:
            raise SessionStoreError(
                f"Unsupported estimate snapshot version: {version!r}",
                key=SessionKeys.SNAPSHOT,
                code=ErrorCode.SESSION_SNAPSHOT_VERSION,
            )

        try:
            return EstimateSnapshot.model_validate(raw)
        except PydanticValidationError as e:
            logger.error("snapshot_parse_failed", error=str(e))
            raise SessionStoreError(
                f"Stored estimate snapshot is invalid: {e.error_count()} error(s)",
                key=SessionKeys.SNAPSHOT,
            )


class InMemorySessionStore(SessionStore):
    """Dict-backed store for a single process (tests, local runs)."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)


class FirestoreSessionStore(SessionStore):
    """One Firestore document per session.

    The document is read once on first access and cached; every write is a
    merge write of the changed key so concurrent steps only overwrite what
    they touch.
    """

    def __init__(self, session_id: str, collection: Optional[str] = None, db=None):
        """Initialize FirestoreSessionStore.

        Args:
            session_id: Document id of the session.
            collection: Collection name. Defaults to settings.session_collection.
            db: Optional Firestore client. If not provided, uses default.
        """
        self.session_id = session_id
        self.collection = collection or settings.session_collection
        self._db = db
        self._cache: Optional[Dict[str, Any]] = None

    @property
    def db(self):
        """Get Firestore client (lazy initialization)."""
        if self._db is None:
            self._db = firestore.client()
        return self._db

    def _doc_ref(self):
        return self.db.collection(self.collection).document(self.session_id)

    def _load(self) -> Dict[str, Any]:
        if self._cache is not None:
            return self._cache
        try:
            doc = self._doc_ref().get()
            self._cache = dict(doc.to_dict() or {}) if doc.exists else {}
        except Exception as e:
            logger.error("session_load_failed", session_id=self.session_id, error=str(e))
            raise SessionStoreError(f"Failed to load session: {str(e)}")
        return self._cache

    def get(self, key: str, default: Any = None) -> Any:
        data = self._load()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        try:
            self._doc_ref().set({key: value}, merge=True)
        except Exception as e:
            logger.error("session_write_failed", session_id=self.session_id, key=key, error=str(e))
            raise SessionStoreError(f"Failed to write session key: {str(e)}", key=key)
        data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        try:
            self._doc_ref().update({key: firestore.DELETE_FIELD})
        except Exception as e:
            logger.error("session_write_failed", session_id=self.session_id, key=key, error=str(e))
            raise SessionStoreError(f"Failed to remove session key: {str(e)}", key=key)
        data.pop(key, None)

    def clear(self) -> None:
        try:
            self._doc_ref().delete()
        except Exception as e:
            logger.error("session_clear_failed", session_id=self.session_id, error=str(e))
            raise SessionStoreError(f"Failed to clear session: {str(e)}")
        self._cache = {}

    def keys(self) -> List[str]:
        return list(self._load())


def create_session_store(session_id: str) -> SessionStore:
    """Session store for the configured backend."""
    if settings.uses_firestore_sessions:
        return FirestoreSessionStore(session_id)
    return InMemorySessionStore()
