from datetime import datetime
from typing import List
from pymongo import ASCENDING
from common.db import MongoDB
from common.logging import logger
from common.models import AddDocumentOutput


async def get_library_documents(user_id: str) -> List[str]:
    """Texts of the user's custom library, oldest first."""
    cursor = MongoDB.collection(MongoDB.LIBRARY).find(
        {"user_id": user_id}).sort("timestamp", ASCENDING)
    return [doc["text"] for doc in cursor]


async def add_document_to_custom_library(user_id: str, document_text: str) -> AddDocumentOutput:
    if not document_text.strip():
        raise ValueError("Document is empty")

    collection = MongoDB.collection(MongoDB.LIBRARY)
    collection.insert_one({
        "user_id": user_id,
        "text": document_text,
        "timestamp": datetime.utcnow()
    })
    library_size = collection.count_documents({"user_id": user_id})
    logger.info(f"Added document to custom library of user {user_id} ({library_size} documents)")
    return AddDocumentOutput(message="Document added to your library.", library_size=library_size)
