"""Aggregate usage statistics over conversation threads."""

from typing import Iterable

from models import (
    AnalyticsSummary,
    ButtonTemplateItem,
    CarouselItem,
    CommentReplyItem,
    ConversationThread,
    DmTextItem,
    ReceiverRank,
    ResponseTypeCounts,
    SenderRank,
)
from inboxlens.services.payloads import parse_response_items

VERIFICATION_PHRASE = "verify me with velvee"
TOP_N = 10


def is_verification_request(input_query: object) -> bool:
    """True if the text contains the verification phrase, ignoring case."""
    return isinstance(input_query, str) and VERIFICATION_PHRASE in input_query.lower()


def _top(counts: dict[str, int], limit: int = TOP_N) -> list[tuple[str, int]]:
    # sorted() is stable, so ties keep first-encountered order
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def compute_analytics(
    threads: Iterable[ConversationThread],
    receiver_id: str | None = None,
) -> AnalyticsSummary:
    """Compute an AnalyticsSummary in a single pass over the threads.

    Args:
        threads: Conversation threads to summarize
        receiver_id: If given, only threads for this receiver are counted
    """
    total_conversations = 0
    total_messages = 0
    user_messages = 0
    assistant_messages = 0
    verification_codes = 0
    product_carousels = 0
    response_types = ResponseTypeCounts()
    receiver_ids: dict[str, int] = {}
    sender_ids: dict[str, int] = {}
    sender_message_counts: dict[str, int] = {}

    for thread in threads:
        if receiver_id is not None and thread.receiver_id != receiver_id:
            continue

        total_conversations += 1
        receiver_ids[thread.receiver_id] = receiver_ids.get(thread.receiver_id, 0) + 1
        sender_ids[thread.sender_id] = sender_ids.get(thread.sender_id, 0) + 1
        sender_message_counts[thread.sender_id] = (
            sender_message_counts.get(thread.sender_id, 0) + len(thread.conversation)
        )

        for msg in thread.conversation:
            total_messages += 1

            if msg.role == "user":
                user_messages += 1
                input_query = msg.payload.get("input_query") if isinstance(msg.payload, dict) else None
                if is_verification_request(input_query):
                    verification_codes += 1
                continue

            assistant_messages += 1
            for item in parse_response_items(msg.payload):
                if isinstance(item, ButtonTemplateItem):
                    response_types.dm_text += 1
                    response_types.button_template += 1
                elif isinstance(item, DmTextItem):
                    response_types.dm_text += 1
                elif isinstance(item, CarouselItem):
                    response_types.dm_carousel += 1
                    product_carousels += 1
                elif isinstance(item, CommentReplyItem):
                    response_types.comment_reply += 1
                # UnknownItem: not counted

    return AnalyticsSummary(
        total_conversations=total_conversations,
        total_messages=total_messages,
        user_messages=user_messages,
        assistant_messages=assistant_messages,
        response_types=response_types,
        receiver_ids=receiver_ids,
        sender_ids=sender_ids,
        verification_codes=verification_codes,
        product_carousels=product_carousels,
        top_senders=[
            SenderRank(sender_id=sender, count=count)
            for sender, count in _top(sender_message_counts)
        ],
        top_receivers=[
            ReceiverRank(receiver_id=receiver, count=count)
            for receiver, count in _top(receiver_ids)
        ],
    )
