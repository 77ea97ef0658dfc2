"""Assistant response item variants.

Every raw response item carries a ``channel`` tag. Items are parsed into one
of the variants below; anything that does not fit a known shape becomes an
``UnknownItem``.
"""

from typing import Any, Literal, Union
from pydantic import BaseModel, Field


class Button(BaseModel):
    """A URL button inside a button template."""

    title: str | None = None
    url: str | None = None


class SearchableItem(BaseModel):
    """Base for response items.

    ``search_text`` holds every text found in the nested message, whatever
    the channel: a plain string message, ``message.text``, attachment text
    and carousel element titles and subtitles.
    """

    search_text: list[str] = Field(default_factory=list)

    def texts(self) -> list[str]:
        return list(self.search_text)


class DmTextItem(SearchableItem):
    """Plain direct-message text."""

    kind: Literal["dm_text"] = "dm_text"
    channel: str = "dm_text"
    text: str | None = Field(None, description="Message text, if present")


class ButtonTemplateItem(SearchableItem):
    """Direct message sent as a button template attachment."""

    kind: Literal["button_template"] = "button_template"
    channel: str = "dm_text"
    text: str | None = Field(None, description="Template body text")
    buttons: list[Button] = Field(default_factory=list)


class CarouselItem(SearchableItem):
    """Direct message carrying a product carousel."""

    kind: Literal["dm_carousel"] = "dm_carousel"
    channel: str = "dm_carousel"
    elements: list[dict[str, Any]] = Field(default_factory=list, description="Carousel elements")


class CommentReplyItem(SearchableItem):
    """Public reply to a comment."""

    kind: Literal["comment_reply"] = "comment_reply"
    channel: str = "comment_reply"
    text: str | None = None


class UnknownItem(SearchableItem):
    """Item with an unrecognized channel or shape."""

    kind: Literal["unknown"] = "unknown"
    channel: str | None = None
    raw: Any = None


ResponseItem = Union[DmTextItem, ButtonTemplateItem, CarouselItem, CommentReplyItem, UnknownItem]


class AssistantView(BaseModel):
    """Displayable parts of an assistant payload."""

    text: str | None = None
    button_template: ButtonTemplateItem | None = None
    carousel: list[dict[str, Any]] | None = None
