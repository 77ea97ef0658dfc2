"""Shared Pydantic models for inboxlens."""

from models.conversation import InteractionRecord, Message, ConversationThread
from models.responses import (
    Button,
    DmTextItem,
    ButtonTemplateItem,
    CarouselItem,
    CommentReplyItem,
    UnknownItem,
    ResponseItem,
    AssistantView,
)
from models.analytics import (
    AnalyticsSummary,
    ResponseTypeCounts,
    SenderRank,
    ReceiverRank,
)
from models.debug import DebugTrace

__all__ = [
    # Conversations
    "InteractionRecord",
    "Message",
    "ConversationThread",
    # Response items
    "Button",
    "DmTextItem",
    "ButtonTemplateItem",
    "CarouselItem",
    "CommentReplyItem",
    "UnknownItem",
    "ResponseItem",
    "AssistantView",
    # Analytics
    "AnalyticsSummary",
    "ResponseTypeCounts",
    "SenderRank",
    "ReceiverRank",
    # Debug
    "DebugTrace",
]
