"""
FitForge Workout Store
Saved-workout persistence behind a small store interface.
In-memory by default; MongoDB (PyMongo) when MONGODB_URI is configured.
"""
import threading
from datetime import datetime
from typing import Optional, Protocol
from pymongo import MongoClient, DESCENDING
from pymongo.collection import Collection

from config import settings
from models import Workout
from metabolic_signature import calculate_metabolic_signature


class WorkoutStore(Protocol):
    """Storage contract used by the route handlers."""

    def get(self, workout_id: str) -> Optional[Workout]: ...

    def save(self, workout: Workout) -> Workout: ...

    def list(self) -> list[Workout]: ...

    def latest(self) -> Optional[Workout]: ...


def prepare_for_save(workout: Workout) -> Workout:
    """Stamp the workout and recompute its metabolic signature."""
    return workout.model_copy(update={
        "metabolic_signature": calculate_metabolic_signature(workout),
        "saved_at": datetime.utcnow(),
    })


# ============================================================
# In-memory store
# ============================================================

class InMemoryWorkoutStore:
    """Process-lifetime store keyed by workout id."""

    def __init__(self):
        self._workouts: dict[str, Workout] = {}
        self._lock = threading.Lock()

    def get(self, workout_id: str) -> Optional[Workout]:
        with self._lock:
            return self._workouts.get(workout_id)

    def save(self, workout: Workout) -> Workout:
        saved = prepare_for_save(workout)
        with self._lock:
            # Re-saving moves the workout to the end (most recent)
            self._workouts.pop(saved.id, None)
            self._workouts[saved.id] = saved
        return saved

    def list(self) -> list[Workout]:
        with self._lock:
            return list(self._workouts.values())

    def latest(self) -> Optional[Workout]:
        with self._lock:
            if not self._workouts:
                return None
            return next(reversed(self._workouts.values()))


# ============================================================
# MongoDB store
# ============================================================

class MongoWorkoutStore:
    """Store backed by a MongoDB collection; documents use the workout id as _id."""

    def __init__(self, collection: Collection):
        self.collection = collection

    @classmethod
    def from_settings(cls) -> "MongoWorkoutStore":
        client = MongoClient(settings.MONGODB_URI)
        db = client.get_database(settings.MONGODB_DB_NAME)
        db.workouts.create_index([("saved_at", DESCENDING)])
        return cls(db.get_collection("workouts"))

    @staticmethod
    def _to_workout(doc: dict) -> Workout:
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return Workout(**doc)

    def get(self, workout_id: str) -> Optional[Workout]:
        doc = self.collection.find_one({"_id": workout_id})
        return self._to_workout(doc) if doc else None

    def save(self, workout: Workout) -> Workout:
        saved = prepare_for_save(workout)
        doc = saved.model_dump(exclude={"id"})
        doc["_id"] = saved.id
        self.collection.replace_one({"_id": saved.id}, doc, upsert=True)
        return saved

    def list(self) -> list[Workout]:
        cursor = self.collection.find({}).sort("saved_at", 1)
        return [self._to_workout(doc) for doc in cursor]

    def latest(self) -> Optional[Workout]:
        doc = self.collection.find_one({}, sort=[("saved_at", DESCENDING)])
        return self._to_workout(doc) if doc else None


# ============================================================
# Store selection
# ============================================================

_store: Optional[WorkoutStore] = None


def get_workout_store() -> WorkoutStore:
    """Get the configured workout store (singleton)."""
    global _store
    if _store is None:
        if settings.MONGODB_URI:
            _store = MongoWorkoutStore.from_settings()
            print("[Store] Using MongoDB workout store")
        else:
            _store = InMemoryWorkoutStore()
            print("[Store] Using in-memory workout store")
    return _store


def close_store():
    """Drop the store (and its Mongo connection, if any)."""
    global _store
    if isinstance(_store, MongoWorkoutStore):
        _store.collection.database.client.close()
    _store = None
