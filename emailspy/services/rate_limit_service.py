"""MongoDB-backed session rate limiter."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo.collection import Collection

from emailspy import database
from emailspy.utils.rate_limit import RateLimitRecord, SessionRateLimiter


class MongoSessionRateLimiter(SessionRateLimiter):
    """Keeps rate-limit records in the ``rate_limits`` collection.

    The read-modify-write in ``check`` is not a transaction, so simultaneous
    requests from one session on different processes can slip slightly past
    the ceiling.
    """

    def _collection(self) -> Collection:
        return database.get_database()[database.RATE_LIMITS_COLLECTION]

    def _load_record(self, session_id: str) -> Optional[RateLimitRecord]:
        document = self._collection().find_one({"session_id": session_id})
        if not document:
            return None
        return RateLimitRecord(count=document["count"], window_start=document["window_start"])

    def _store_record(self, session_id: str, record: RateLimitRecord) -> None:
        self._collection().update_one(
            {"session_id": session_id},
            {
                "$set": {
                    "session_id": session_id,
                    "count": record.count,
                    "window_start": record.window_start,
                    "updated_at": datetime.utcnow(),
                }
            },
            upsert=True,
        )

    def sweep(self) -> int:
        cutoff = self._clock() - self.window_seconds
        result = self._collection().delete_many({"window_start": {"$lt": cutoff}})
        return result.deleted_count

    def __len__(self) -> int:
        return self._collection().count_documents({})

    def __contains__(self, session_id: object) -> bool:
        return self._collection().find_one({"session_id": session_id}) is not None
