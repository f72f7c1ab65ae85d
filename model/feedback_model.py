from datetime import datetime
from typing import List
from pymongo import DESCENDING
from common.db import MongoDB
from common.logging import logger
from common.models import FeedbackItem


def _to_item(doc: dict) -> FeedbackItem:
    return FeedbackItem(
        id=str(doc["_id"]),
        query_id=doc["query_id"],
        user_id=doc["user_id"],
        section=doc["section"],
        rating=doc["rating"],
        comments=doc.get("comments"),
        timestamp=doc.get("timestamp"),
    )


async def save_feedback(item: FeedbackItem) -> str:
    """Persist a validated feedback item and return its id. Errors propagate."""
    try:
        document = item.model_dump(exclude={"id", "timestamp"}, mode="json")
        document["timestamp"] = datetime.utcnow()
        inserted = MongoDB.collection(MongoDB.FEEDBACK).insert_one(document)
        return str(inserted.inserted_id)
    except Exception as e:
        logger.error(f"Error saving feedback: {e}")
        raise


async def get_feedback_by_query_id(query_id: str) -> List[FeedbackItem]:
    try:
        cursor = MongoDB.collection(MongoDB.FEEDBACK).find(
            {"query_id": query_id}).sort("timestamp", DESCENDING)
        return [_to_item(doc) for doc in cursor]
    except Exception as e:
        logger.error(f"Error getting feedback: {e}")
        raise


async def get_user_feedback(user_id: str) -> List[FeedbackItem]:
    try:
        cursor = MongoDB.collection(MongoDB.FEEDBACK).find(
            {"user_id": user_id}).sort("timestamp", DESCENDING)
        return [_to_item(doc) for doc in cursor]
    except Exception as e:
        logger.error(f"Error getting user feedback: {e}")
        raise
