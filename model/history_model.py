from datetime import datetime
from typing import List
from pymongo import DESCENDING
from common.config import Config
from common.db import MongoDB
from common.logging import logger
from common.models import QueryHistoryEntry


def _to_entry(doc: dict) -> QueryHistoryEntry:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return QueryHistoryEntry(**doc)


async def save_query_history(entry: QueryHistoryEntry) -> str:
    """Store one answered query with its three result sections."""
    document = entry.model_dump(exclude={"id"}, mode="json")
    document["timestamp"] = datetime.utcnow()
    inserted = MongoDB.collection(MongoDB.HISTORY).insert_one(document)
    logger.info(f"Stored query history for user {entry.user_id}")
    return str(inserted.inserted_id)


async def get_user_history(user_id: str, limit: int = None) -> List[QueryHistoryEntry]:
    """Most recent queries first."""
    cursor = (MongoDB.collection(MongoDB.HISTORY)
              .find({"user_id": user_id})
              .sort("timestamp", DESCENDING)
              .limit(limit or Config.HISTORY_LIMIT))
    return [_to_entry(doc) for doc in cursor]
