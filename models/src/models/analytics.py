"""Analytics summary models.

Top-level keys serialize in camelCase, matching what the dashboard reads.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResponseTypeCounts(BaseModel):
    """Response items counted per channel."""

    dm_text: int = 0
    dm_carousel: int = 0
    comment_reply: int = 0
    button_template: int = 0


class SenderRank(BaseModel):
    sender_id: str
    count: int


class ReceiverRank(BaseModel):
    receiver_id: str
    count: int


class AnalyticsSummary(BaseModel):
    """Aggregate usage statistics over a set of conversation threads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_conversations: int = 0
    total_messages: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    response_types: ResponseTypeCounts = Field(default_factory=ResponseTypeCounts)
    receiver_ids: dict[str, int] = Field(default_factory=dict, description="Threads per receiver")
    sender_ids: dict[str, int] = Field(default_factory=dict, description="Threads per sender")
    verification_codes: int = 0
    product_carousels: int = 0
    top_senders: list[SenderRank] = Field(default_factory=list)
    top_receivers: list[ReceiverRank] = Field(default_factory=list)
