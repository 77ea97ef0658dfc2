"""Reconstruct per-user conversation threads from logged interactions.

Each interaction row becomes a user message and, when the row has a
response, an assistant message with the same timestamp. Messages are grouped
by (sender_id, receiver_id) and ordered by timestamp, the user message
first when a row's two messages tie.
"""

import copy
import json
import logging
from typing import Any, Iterable

from models import ConversationThread, InteractionRecord, Message
from inboxlens.errors import MalformedResponseError
from inboxlens.services.payloads import summarize_assistant_payload

logger = logging.getLogger(__name__)

# Sort rank within equal timestamps
ROLE_ORDER = {"user": 1, "assistant": 2}


def decode_response(record: InteractionRecord) -> Any:
    """Return the record's response as parsed JSON.

    Text columns are decoded; values the driver already decoded are copied
    so threads never share state with the records they came from.
    """
    raw = record.response
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedResponseError(record.sender_id, record.created_at, str(e)) from e
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except ValueError as e:
            raise MalformedResponseError(record.sender_id, record.created_at, str(e)) from e
    return copy.deepcopy(raw)


def record_messages(record: InteractionRecord) -> list[Message]:
    """Split one interaction into its user and optional assistant message."""
    messages = [
        Message(
            ts=record.created_at,
            role="user",
            payload=record.model_dump(exclude={"response"}),
        )
    ]
    if record.response is not None:
        payload = decode_response(record)
        messages.append(
            Message(
                ts=record.created_at,
                role="assistant",
                payload=payload,
                view=summarize_assistant_payload(payload),
            )
        )
    return messages


def build_threads(
    records: Iterable[InteractionRecord],
    receiver_id: str | None = None,
) -> list[ConversationThread]:
    """Group interactions into one thread per (sender_id, receiver_id).

    Threads come back ordered by sender_id, then receiver_id.
    """
    grouped: dict[tuple[str, str], list[Message]] = {}
    for record in records:
        if receiver_id is not None and record.receiver_id != receiver_id:
            continue
        key = (record.sender_id, record.receiver_id)
        grouped.setdefault(key, []).extend(record_messages(record))

    threads = []
    for (sender, receiver), messages in sorted(grouped.items(), key=lambda kv: kv[0]):
        messages.sort(key=lambda msg: (msg.ts, ROLE_ORDER[msg.role]))
        threads.append(
            ConversationThread(sender_id=sender, receiver_id=receiver, conversation=messages)
        )

    logger.debug(f"Built {len(threads)} threads")
    return threads
