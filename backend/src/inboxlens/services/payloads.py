"""Classification of assistant response payloads.

Raw items look like ``{"channel": "dm_text", "payload": {"message": {...}}}``.
The nested ``message`` is either a plain string (comment replies) or an
object holding ``text`` or an ``attachment`` whose ``payload`` is a button
template (``text`` + ``buttons``) or a carousel (``elements``).
"""

from typing import Any

from models import (
    AssistantView,
    Button,
    ButtonTemplateItem,
    CarouselItem,
    CommentReplyItem,
    DmTextItem,
    ResponseItem,
    UnknownItem,
)


def _get(value: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a step is missing."""
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _is_button_template(attachment_payload: Any) -> bool:
    if not isinstance(attachment_payload, dict):
        return False
    if attachment_payload.get("template_type") == "button":
        return True
    return bool(attachment_payload.get("text")) and isinstance(attachment_payload.get("buttons"), list)


def _buttons(raw_buttons: Any) -> list[Button]:
    if not isinstance(raw_buttons, list):
        return []
    return [
        Button(
            title=btn.get("title") if isinstance(btn.get("title"), str) else None,
            url=btn.get("url") if isinstance(btn.get("url"), str) else None,
        )
        for btn in raw_buttons
        if isinstance(btn, dict)
    ]


def _message_text(message: Any) -> str | None:
    if isinstance(message, str):
        return message
    text = _get(message, "text")
    return text if isinstance(text, str) else None


def _search_texts(message: Any) -> list[str]:
    """Every text in a nested message, regardless of channel."""
    found: list[str] = []
    text = _message_text(message)
    if text:
        found.append(text)
    attachment_payload = _get(message, "attachment", "payload")
    attachment_text = _get(attachment_payload, "text")
    if isinstance(attachment_text, str) and attachment_text:
        found.append(attachment_text)
    elements = _get(attachment_payload, "elements")
    if isinstance(elements, list):
        for el in elements:
            for key in ("title", "subtitle"):
                value = _get(el, key)
                if isinstance(value, str) and value:
                    found.append(value)
    return found


def parse_response_item(raw: Any) -> ResponseItem:
    """Map one raw response item to its variant. Never raises."""
    if not isinstance(raw, dict):
        return UnknownItem(raw=raw)

    channel = raw.get("channel")
    message = _get(raw, "payload", "message")
    search_text = _search_texts(message)

    if channel == "dm_text":
        attachment_payload = _get(message, "attachment", "payload")
        if _is_button_template(attachment_payload):
            text = attachment_payload.get("text")
            return ButtonTemplateItem(
                text=text if isinstance(text, str) else None,
                buttons=_buttons(attachment_payload.get("buttons")),
                search_text=search_text,
            )
        return DmTextItem(text=_message_text(message), search_text=search_text)

    if channel == "dm_carousel":
        elements = _get(message, "attachment", "payload", "elements")
        if not isinstance(elements, list):
            elements = []
        return CarouselItem(
            elements=[el for el in elements if isinstance(el, dict)],
            search_text=search_text,
        )

    if channel == "comment_reply":
        return CommentReplyItem(text=_message_text(message), search_text=search_text)

    return UnknownItem(
        channel=channel if isinstance(channel, str) else None,
        raw=raw,
        search_text=search_text,
    )


def parse_response_items(payload: Any) -> list[ResponseItem]:
    """Parse an assistant payload; anything but a list yields no items."""
    if not isinstance(payload, list):
        return []
    return [parse_response_item(raw) for raw in payload]


def summarize_assistant_payload(payload: Any) -> AssistantView:
    """Reduce an assistant payload to what a chat bubble shows.

    Later items overwrite earlier ones of the same kind.
    """
    view = AssistantView()
    for item in parse_response_items(payload):
        if isinstance(item, (DmTextItem, CommentReplyItem)) and item.text:
            view.text = item.text
        elif isinstance(item, ButtonTemplateItem) and item.text:
            view.button_template = item
        elif isinstance(item, CarouselItem) and item.elements:
            view.carousel = item.elements
    return view
