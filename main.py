"""
Health Document Summarizer API

Upload a document, get a summary in the patient's language.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import (
    GEMINI_API_KEY,
    LLAMAPARSE_API_KEY,
    CORS_ALLOW_ORIGINS,
    SERVER_HOST,
    SERVER_PORT,
    validate_api_keys,
)
from documents import router as documents_router
from logs.logging_config import setup_llm_logging
from summarization import router as summarization_router
from summarization.llm_client import close_session as close_summarization_session
from text_extractor import router as text_extractor_router, close_orchestrator

logger = setup_llm_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_api_keys()
    logger.info("[STARTUP] Parser API configured")
    logger.info("[STARTUP] Summarization API configured")
    yield
    # Shutdown
    await close_orchestrator()
    await close_summarization_session()
    logger.info("[SHUTDOWN] HTTP sessions closed")


app = FastAPI(title="Health Document Summarizer", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router)
app.include_router(text_extractor_router)
app.include_router(summarization_router)


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "geminiConfigured": bool(GEMINI_API_KEY),
        "llamaparseConfigured": bool(LLAMAPARSE_API_KEY),
        "server": "running"
    }


@app.get("/api/test")
async def connectivity_test():
    """Verify server connectivity."""
    return {
        "message": "Server is working!",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


if __name__ == "__main__":
    uvicorn.run("main:app", host=SERVER_HOST, port=SERVER_PORT)
