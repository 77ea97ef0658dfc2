"""Interaction, message and conversation thread models."""

from datetime import datetime
from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field

from models.responses import AssistantView


class InteractionRecord(BaseModel):
    """A logged Instagram webhook interaction (one table row).

    Columns beyond the ones declared here are kept as extra fields so they
    flow through to the user message payload untouched.
    """

    # Numeric (bigint) IDs from the driver are stored as strings
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    sender_id: str = Field(..., description="Instagram-scoped ID of the sender")
    receiver_id: str = Field(..., description="ID of the account that received the message")
    created_at: datetime = Field(..., description="When the interaction was logged")
    input_query: str | None = Field(None, description="Inbound user text")
    trace_id: Any = Field(None, description="Correlation key for LLM diagnostics")
    response: Any = Field(None, description="Outbound response items (JSON array, raw or encoded)")


class Message(BaseModel):
    """A single message in a reconstructed conversation."""

    ts: datetime = Field(..., description="Timestamp of the originating interaction")
    role: Literal["user", "assistant"] = Field(..., description="Message role")
    payload: Any = Field(
        None,
        description="Row fields minus response for user messages, response items for assistant messages",
    )
    view: AssistantView | None = Field(
        None, description="Displayable text, buttons and carousel of an assistant payload"
    )


class ConversationThread(BaseModel):
    """All messages exchanged between one sender and one receiver."""

    sender_id: str = Field(..., description="Sender ID")
    receiver_id: str = Field(..., description="Receiver ID")
    conversation: list[Message] = Field(default_factory=list, description="Messages, oldest first")

    @property
    def latest_ts(self) -> datetime | None:
        """Timestamp of the most recent message, if any."""
        if not self.conversation:
            return None
        return max(msg.ts for msg in self.conversation)
