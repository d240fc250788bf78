"""MongoDB-backed callback result store.

Drop-in replacement for :class:`emailspy.storage.ResultStore` when several
processes serve the same deployment.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, List

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from emailspy import database
from emailspy.storage import completed, pending

_LOGGER = logging.getLogger(__name__)


class MongoResultStore:
    """Callback results kept in the ``email_results`` collection."""

    def __init__(
        self,
        ttl_seconds: float = 0,
        grace_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.grace_seconds = grace_seconds
        self._clock = clock

    def _collection(self) -> Collection:
        return database.get_database()[database.RESULTS_COLLECTION]

    def deposit(self, callback_id: str, payload: Any) -> None:
        """
        Store ``payload`` under ``callback_id``, replacing any earlier result.

        Args:
            callback_id: Correlation id minted when the check was submitted
            payload: JSON result posted by the workflow engine
        """
        document = {
            "callback_id": callback_id,
            "data": payload,
            "received_at": self._clock(),
            "consumed_at": None,
            "created_at": datetime.utcnow(),
        }
        try:
            self._collection().update_one(
                {"callback_id": callback_id},
                {"$set": document},
                upsert=True,
            )
        except PyMongoError:
            _LOGGER.exception("Failed to store result %s", callback_id)
            raise

    def fetch(self, callback_id: str) -> Dict[str, Any]:
        """
        Return the stored result for ``callback_id`` or a pending status.

        Without a grace period the document is deleted in the same round trip
        it is read in, so concurrent pollers see it at most once.
        """
        collection = self._collection()
        try:
            if not self.grace_seconds:
                document = collection.find_one_and_delete({"callback_id": callback_id})
                return completed(document["data"]) if document else pending()

            now = self._clock()
            document = collection.find_one_and_update(
                {"callback_id": callback_id, "consumed_at": None},
                {"$set": {"consumed_at": now}},
            )
            if document:
                return completed(document["data"])

            document = collection.find_one({"callback_id": callback_id})
            if document is None:
                return pending()
            # A deposit between the two reads makes this a fresh, unread result.
            if document["consumed_at"] is None:
                return completed(document["data"])
            if now - document["consumed_at"] > self.grace_seconds:
                collection.delete_one({"_id": document["_id"]})
                return pending()
            return completed(document["data"])
        except PyMongoError:
            _LOGGER.exception("Failed to fetch result %s", callback_id)
            raise

    def prune(self) -> int:
        """Delete consumed results past their grace period and, with a TTL, stale unread ones."""
        now = self._clock()
        clauses: List[Dict[str, Any]] = [
            {"consumed_at": {"$ne": None, "$lt": now - self.grace_seconds}},
        ]
        if self.ttl_seconds:
            clauses.append(
                {"consumed_at": None, "received_at": {"$lt": now - self.ttl_seconds}}
            )

        result = self._collection().delete_many({"$or": clauses})
        return result.deleted_count

    def __len__(self) -> int:
        return self._collection().count_documents({})

    def __contains__(self, callback_id: object) -> bool:
        return self._collection().find_one({"callback_id": callback_id}) is not None
