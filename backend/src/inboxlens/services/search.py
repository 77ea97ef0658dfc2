"""Thread search, filtering and ordering for the conversation list."""

from datetime import timezone
from typing import Iterable, Literal

from models import ConversationThread, Message
from inboxlens.services.payloads import parse_response_items

ThreadSort = Literal["sender", "recent"]


def _contains(text: object, query: str) -> bool:
    return isinstance(text, str) and query in text.lower()


def message_matches(msg: Message, query: str) -> bool:
    """Check one message against an already lower-cased query."""
    if msg.role == "user":
        if not isinstance(msg.payload, dict):
            return False
        return _contains(msg.payload.get("input_query"), query)
    return any(
        _contains(text, query)
        for item in parse_response_items(msg.payload)
        for text in item.texts()
    )


def thread_matches(thread: ConversationThread, query: str) -> bool:
    """True if the sender ID or any message text contains the query.

    Matching is case-insensitive; a blank query matches every thread.
    """
    query = query.strip().lower()
    if not query:
        return True
    if query in thread.sender_id.lower():
        return True
    return any(message_matches(msg, query) for msg in thread.conversation)


def _recency_key(thread: ConversationThread) -> float:
    latest = thread.latest_ts
    if latest is None:
        return float("-inf")
    if latest.tzinfo is None:
        latest = latest.replace(tzinfo=timezone.utc)
    return latest.timestamp()


def filter_threads(
    threads: Iterable[ConversationThread],
    receiver_id: str | None = None,
    search: str | None = None,
    sort: ThreadSort = "sender",
) -> list[ConversationThread]:
    """Apply the conversation list's receiver filter, search and ordering.

    Args:
        threads: Threads in sender order, as built by ``build_threads``
        receiver_id: Keep only threads for this receiver (exact match)
        search: Free-text query, see ``thread_matches``
        sort: "sender" keeps the input order, "recent" puts the most
            recently active threads first
    """
    result = [
        thread
        for thread in threads
        if (receiver_id is None or thread.receiver_id == receiver_id)
        and (not search or thread_matches(thread, search))
    ]
    if sort == "recent":
        result.sort(key=_recency_key, reverse=True)
    return result

