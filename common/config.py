import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai_api")
    MODEL_NAME = os.getenv("LLM_MODEL", "gpt-4o-mini")
    TEMPERATURE = float(os.getenv("TEMPERATURE", 0.2))
    API_KEY = os.getenv("OPENAI_API_KEY")
    API_BASE_URL = os.getenv("API_BASE_URL", "https://api.openai.com/v1")
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", 60))
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "nyai")
    LOG_DIR = os.getenv("LOG_DIR", "./logs/")
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", 24))
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
    CLOUDFLARE_ACCOUNT_ID = os.getenv("CLOUDFLARE_ACCOUNT_ID")
    CLOUDFLARE_AUTORAG_NAME = os.getenv("CLOUDFLARE_AUTORAG_NAME")
    CLOUDFLARE_API_TOKEN = os.getenv("CLOUDFLARE_API_TOKEN")
    CLOUDFLARE_BASE_URL = os.getenv(
        "CLOUDFLARE_BASE_URL", "https://api.cloudflare.com/client/v4/")
    AUTORAG_TIMEOUT = float(os.getenv("AUTORAG_TIMEOUT", 30))
    CITATION_BATCH_SIZE = int(os.getenv("CITATION_BATCH_SIZE", 5))
    # 0 keeps every resolved citation for the life of the process
    CITATION_CACHE_MAX_ENTRIES = int(os.getenv("CITATION_CACHE_MAX_ENTRIES", 0))
    DEFAULT_JURISDICTION = os.getenv("DEFAULT_JURISDICTION", "India")
    HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", 50))
