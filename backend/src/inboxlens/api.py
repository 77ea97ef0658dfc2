"""FastAPI application serving conversations and analytics."""

import logging
from contextlib import asynccontextmanager, contextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from inboxlens import __version__
from inboxlens.config import configure_logging, settings
from inboxlens.db import Database
from inboxlens.errors import (
    DatabaseNotConfiguredError,
    InboxLensError,
    MissingParameterError,
    QueryFailedError,
    TraceNotFoundError,
)
from inboxlens.models import HealthResponse, ReceiverListResponse
from inboxlens.services.analytics import compute_analytics
from inboxlens.services.conversations import build_threads
from inboxlens.services.debug_trace import lookup_debug_trace
from inboxlens.services.search import ThreadSort, filter_threads
from models import AnalyticsSummary, ConversationThread, DebugTrace

logger = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database pool for the lifetime of the process."""
    configure_logging()
    db = Database(settings)
    await db.connect()
    app.state.db = db
    try:
        yield
    finally:
        await db.disconnect()


app = FastAPI(
    title="InboxLens API",
    description="Conversation threads and usage analytics for logged Instagram webhook interactions",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def no_store(request: Request, call_next):
    """Every response is computed fresh from the database."""
    response = await call_next(request)
    response.headers.update(NO_STORE_HEADERS)
    return response


@app.exception_handler(InboxLensError)
async def handle_inboxlens_error(request: Request, exc: InboxLensError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def get_db(request: Request) -> Database:
    """Database handle created by the lifespan."""
    db: Database = request.app.state.db
    db.require_configured()
    return db


@contextmanager
def failure_as(error: str):
    """Report unexpected failures as a 500 with the given message."""
    try:
        yield
    except (DatabaseNotConfiguredError, MissingParameterError, TraceNotFoundError):
        raise
    except Exception as e:
        logger.error(f"{error}: {e}", exc_info=True)
        logger.error(f"Database URL preview: {settings.database_url_preview}")
        raise QueryFailedError(error, str(e)) from e


# ============= Health =============


@app.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check endpoint."""
    db: Database | None = getattr(request.app.state, "db", None)
    return HealthResponse(database_configured=bool(db and db.configured))


# ============= Conversation Endpoints =============


@app.get("/api/conversations", response_model=list[ConversationThread])
async def list_conversations(
    receiver_id: str | None = None,
    search: str | None = None,
    sort: ThreadSort = "sender",
    db: Database = Depends(get_db),
):
    """List every conversation thread.

    Args:
        receiver_id: Only threads for this receiver
        search: Case-insensitive match on sender ID or message text
        sort: "sender" (default) or "recent"
    """
    with failure_as("Failed to fetch conversations"):
        records = await db.list_interactions()
        threads = build_threads(records)
        return filter_threads(threads, receiver_id=receiver_id or None, search=search, sort=sort)


@app.get("/api/receivers", response_model=ReceiverListResponse)
async def list_receivers(db: Database = Depends(get_db)):
    """List the distinct receiver IDs seen in the interaction log."""
    with failure_as("Failed to fetch receivers"):
        receiver_ids = await db.list_receiver_ids()
    return ReceiverListResponse(receiver_ids=receiver_ids, total=len(receiver_ids))


# ============= Analytics Endpoints =============


@app.get("/api/analytics", response_model=AnalyticsSummary)
async def get_analytics(
    receiver_id: str | None = None,
    db: Database = Depends(get_db),
):
    """Usage statistics, optionally for a single receiver."""
    with failure_as("Failed to fetch analytics"):
        records = await db.list_interactions()
        threads = build_threads(records)
        return compute_analytics(threads, receiver_id=receiver_id or None)


# ============= Debug Endpoints =============


@app.get("/api/debug", response_model=DebugTrace)
async def get_debug_trace(
    sender_id: str | None = None,
    input_query: str | None = None,
    db: Database = Depends(get_db),
):
    """LLM diagnostics for the interaction with this sender and exact input query."""
    if not sender_id or not input_query:
        raise MissingParameterError("sender_id", "input_query")

    with failure_as("Failed to fetch debug data"):
        return await lookup_debug_trace(db, sender_id, input_query)


# ============= Run =============


def run():
    """Run the application."""
    import uvicorn

    uvicorn.run(
        "inboxlens.api:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
