from pymongo import MongoClient
from common.config import Config
from common.logging import logger


class MongoDB:
    _client = None
    _db = None

    HISTORY = "query_history"
    FEEDBACK = "feedback"
    LIBRARY = "custom_library"

    @classmethod
    def get_client(cls):
        if cls._client is None:
            cls._client = MongoClient(Config.MONGO_URI)
            logger.info("MongoDB connected")
        return cls._client

    @classmethod
    def get_db(cls):
        if cls._db is None:
            cls._db = cls.get_client()[Config.DATABASE_NAME]
        return cls._db

    @classmethod
    def collection(cls, name: str):
        return cls.get_db()[name]

    @classmethod
    def close(cls):
        if cls._client is not None:
            cls._client.close()
            logger.info("MongoDB connection closed")
        cls._client = None
        cls._db = None
