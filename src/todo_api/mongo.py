from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument, monitoring
from pymongo.collection import Collection
from pymongo.server_type import SERVER_TYPE

from .models import SortOrder, TodoEntity
from .repositories import ListQuery, Repository
from .settings import Settings
from .utils import to_utc

logger = logging.getLogger(__name__)


class ServerEventLogger(monitoring.ServerListener):
    """Log connection state changes of each MongoDB server."""

    def opened(self, event: monitoring.ServerOpeningEvent) -> None:
        logger.debug("Opening connection to %s", event.server_address)

    def description_changed(self, event: monitoring.ServerDescriptionChangedEvent) -> None:
        was_known = event.previous_description.server_type != SERVER_TYPE.Unknown
        is_known = event.new_description.server_type != SERVER_TYPE.Unknown
        if is_known and not was_known:
            logger.info("Connected to MongoDB at %s", event.server_address)
        elif was_known and not is_known:
            logger.error("MongoDB at %s is disconnected", event.server_address)

    def closed(self, event: monitoring.ServerClosedEvent) -> None:
        logger.info("Connection to MongoDB at %s closed", event.server_address)


class HeartbeatFailureLogger(monitoring.ServerHeartbeatListener):
    """Report failed server heartbeats, which signal a lost or refused connection."""

    def started(self, event: monitoring.ServerHeartbeatStartedEvent) -> None:
        pass

    def succeeded(self, event: monitoring.ServerHeartbeatSucceededEvent) -> None:
        pass

    def failed(self, event: monitoring.ServerHeartbeatFailedEvent) -> None:
        logger.warning("MongoDB heartbeat to %s failed: %s", event.connection_id, event.reply)


def _object_id(todo_id: str) -> Optional[ObjectId]:
    # Malformed ids cannot match any stored document
    if not ObjectId.is_valid(todo_id):
        return None
    return ObjectId(todo_id)


def _to_entity(document: Mapping[str, Any]) -> TodoEntity:
    created_at = document.get("created_at")
    return {
        "id": str(document["_id"]),
        "description": document.get("description"),  # type: ignore[typeddict-item]
        "created_at": to_utc(created_at) if created_at is not None else None,
        "completed": document.get("completed"),
        "priority": document.get("priority"),
    }


class MongoRepository(Repository):
    """
    Repository storing todos as documents in a single MongoDB collection.

    The collection is injected so tests can pass a mongomock collection.
    When built through from_settings the repository owns the client and
    closes it on close().
    """

    name = "mongo"

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        self._collection = collection
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoRepository":
        client: MongoClient = MongoClient(
            settings.mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
            event_listeners=[ServerEventLogger(), HeartbeatFailureLogger()],
        )
        collection = client[settings.mongodb_database][settings.mongodb_collection]
        return cls(collection, client=client)

    def create(self, document: Dict[str, Any]) -> TodoEntity:
        doc = dict(document)
        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _to_entity(doc)

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        oid = _object_id(todo_id)
        if oid is None:
            return None
        doc = self._collection.find_one({"_id": oid})
        return _to_entity(doc) if doc else None

    def update(self, todo_id: str, changes: Dict[str, Any]) -> Optional[TodoEntity]:
        oid = _object_id(todo_id)
        if oid is None:
            return None
        doc = self._collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return _to_entity(doc) if doc else None

    def delete(self, todo_id: str) -> bool:
        oid = _object_id(todo_id)
        if oid is None:
            return False
        result = self._collection.delete_one({"_id": oid})
        return result.deleted_count == 1

    def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        q = query or ListQuery()
        filter_: Dict[str, Any] = {}
        if q.completed is not None:
            filter_["completed"] = q.completed

        cursor = self._collection.find(filter_)
        if q.sort_by is not None:
            direction = DESCENDING if q.order is SortOrder.DESC else ASCENDING
            cursor = cursor.sort(q.sort_by.key, direction)
        return [_to_entity(doc) for doc in cursor]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
