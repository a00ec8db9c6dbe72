"""
MnemoNotes FastAPI Application

A REST API server for the MnemoNotes knowledge base.
Provides endpoints for managing notes, asking questions over them,
and triggering confidence decay.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.config import Config
from src.models.note import NoteCreate, NoteUpdate
from src.models.query import QueryRequest, QueryResponse
from src.services.note_engine import NoteEngine
from src.utils.exceptions import (
    MnemoNotesError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.utils.logger import get_logger, setup_logging

# Global engine instance
engine: NoteEngine | None = None
logger = get_logger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    UnauthorizedError: 401,
    NotFoundError: 404,
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    engine_initialized: bool
    note_store: str
    llm: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global engine

    # Fails fast when MNEMO_DATABASE_URL is missing
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting MnemoNotes server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model} "
        f"(configured={config.llm.is_configured}), decay_rate={config.decay.rate_per_day}"
    )

    engine = NoteEngine.from_config(config)
    await engine.initialize()
    logger.info("MnemoNotes engine initialized")

    yield

    # Cleanup
    logger.info("Shutting down MnemoNotes server")
    await engine.close()
    engine = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="MnemoNotes API",
    description="Personal knowledge base with summarization, confidence decay and Q&A",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handling
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Schema failures are client errors (400), not 422."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")} for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid payload", "details": errors})


@app.exception_handler(MnemoNotesError)
async def domain_error_handler(request: Request, exc: MnemoNotesError):
    """Map domain errors to HTTP status codes."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            content: dict[str, Any] = {"error": exc.message}
            if isinstance(exc, ValidationError) and exc.context.get("errors"):
                content["details"] = [
                    {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                    for error in exc.context["errors"]
                ]
            return JSONResponse(status_code=status_code, content=content)

    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Anything else is a generic server error."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def get_engine() -> NoteEngine:
    """Dependency returning the initialized engine."""
    if not engine:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if engine else "initializing",
        engine_initialized=engine is not None,
        note_store=type(engine.store).__name__ if engine else "unavailable",
        llm=engine.llm_description if engine else "unavailable",
    )


# Note endpoints
@app.get("/notes")
async def list_notes(
    limit: int = Query(default=50, description="Max notes"),
    kb: NoteEngine = Depends(get_engine),
):
    """List notes, most recently updated first."""
    notes = await kb.notes.list_notes(limit)
    return {"notes": [note.to_response() for note in notes]}


@app.post("/notes", status_code=201)
async def create_note(request: NoteCreate, kb: NoteEngine = Depends(get_engine)):
    """
    Create a note.

    The note is summarized and tagged before it is stored. Suggested tags
    are merged with the tags supplied in the request.
    """
    note = await kb.notes.create_note(request)
    return {"note": note.to_response()}


@app.get("/notes/{note_id}")
async def get_note(note_id: str, kb: NoteEngine = Depends(get_engine)):
    """
    Retrieve a note by ID.

    Reading a note stamps its last access time, which resets its decay clock.
    """
    note = await kb.notes.get_note(note_id)
    return {"note": note.to_response()}


@app.put("/notes/{note_id}")
async def update_note(
    note_id: str, request: NoteUpdate, kb: NoteEngine = Depends(get_engine)
):
    """
    Partially update a note.

    Changing title, content or insights re-derives the summary and merges
    newly suggested tags.
    """
    note = await kb.notes.update_note(note_id, request)
    return {"note": note.to_response()}


@app.delete("/notes/{note_id}")
async def delete_note(note_id: str, kb: NoteEngine = Depends(get_engine)):
    """Delete a note."""
    await kb.notes.delete_note(note_id)
    return {"ok": True}


@app.get("/public/notes")
async def list_public_notes(
    limit: int = Query(default=50, description="Max notes"),
    kb: NoteEngine = Depends(get_engine),
):
    """Reduced projection of recent notes for unauthenticated consumers."""
    return {"notes": await kb.notes.list_public(limit)}


# Question answering
@app.post("/query", response_model=QueryResponse)
async def query_notes(request: QueryRequest, kb: NoteEngine = Depends(get_engine)):
    """
    Answer a question from the knowledge base.

    Up to eight relevant notes are retrieved and passed to the language
    model; without a model a local answer is returned instead.
    """
    return await kb.query.answer(request)


# Maintenance
@app.post("/decay")
async def run_decay(
    x_cron_secret: str | None = Header(default=None),
    kb: NoteEngine = Depends(get_engine),
):
    """
    Run the confidence decay job once.

    Requires the x-cron-secret header when a decay secret is configured.
    """
    kb.decay.authorize(x_cron_secret)
    report = await kb.decay.run()
    return report.model_dump(by_alias=True)


# Statistics endpoint
@app.get("/stats")
async def get_stats(kb: NoteEngine = Depends(get_engine)):
    """Return note count and active configuration."""
    return await kb.get_statistics()


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "MnemoNotes API",
        "version": "1.0.0",
        "description": "Personal knowledge base with summarization, confidence decay and Q&A",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
