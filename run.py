import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from view.api_view import router as api_router
from common.db import MongoDB
from common.logging import logger
from common.config import Config


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("NyAI Legal Assistant starting")
    yield
    MongoDB.close()


app = FastAPI(
    title="NyAI Legal Assistant",
    version="1.0.0",
    description="Applicable laws, precedents with enhanced citations, and procedural checklists for Indian legal queries",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[Config.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "message": "NyAI Legal Assistant API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "NyAI Legal Assistant", "version": "1.0.0"}


def main():
    uvicorn.run("run:app", host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    main()
