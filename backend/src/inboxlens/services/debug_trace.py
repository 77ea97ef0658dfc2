"""Look up LLM diagnostics for a logged interaction."""

import logging

from models import DebugTrace
from inboxlens.db import Database
from inboxlens.errors import TraceNotFoundError

logger = logging.getLogger(__name__)


async def lookup_debug_trace(db: Database, sender_id: str, input_query: str) -> DebugTrace:
    """Follow interaction -> llm_analytics -> llm_calls for one message.

    Raises:
        TraceNotFoundError: if any step of the chain finds nothing
    """
    trace_id = await db.find_trace_id(sender_id, input_query)
    if trace_id is None:
        raise TraceNotFoundError("No trace_id found for the given sender_id and input_query")

    analytics = await db.get_llm_analytics(trace_id)
    if analytics is None:
        raise TraceNotFoundError("No analytics data found for the given trace_id")

    calls = await db.list_llm_calls(analytics["id"])
    if not calls:
        raise TraceNotFoundError("No LLM calls found for the given analytics id")

    logger.info(f"Resolved trace {trace_id} to {len(calls)} LLM calls")
    return DebugTrace(input=analytics, output=calls)
