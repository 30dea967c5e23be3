"""
ORDER MESSAGES

The append-only message log between the customer and the tailor of an order.
Messages are never edited or deleted; only the read flag changes.
"""

import logging

from django.db import transaction
from django.utils import timezone

from orders.exceptions import NotFoundError, ValidationError
from orders.models import OrderMessage
from orders.services.lifecycle import lock_order, require_party

logger = logging.getLogger(__name__)


def _clean_attachments(attachments):
    cleaned = []
    for item in attachments or []:
        if not isinstance(item, dict) or not item.get("url"):
            raise ValidationError("Each attachment needs a url.")
        kind = item.get("type") or "image"
        if kind not in OrderMessage.ATTACHMENT_TYPES:
            raise ValidationError(f"Unknown attachment type '{kind}'.")
        cleaned.append({"type": kind, "url": item["url"], "name": item.get("name", "")})
    return cleaned


@transaction.atomic
def add_message(*, order_id, actor, text="", attachments=None) -> OrderMessage:
    order = lock_order(order_id)
    require_party(order, actor)

    text = (text or "").strip()
    attachments = _clean_attachments(attachments)
    if not text and not attachments:
        raise ValidationError("A message needs text or at least one attachment.")

    message = OrderMessage.objects.create(
        order=order,
        sender=actor,
        text=text,
        attachments=attachments,
    )
    logger.info(
        "Order %s: message %s posted by user %s",
        order.order_number,
        message.pk,
        actor.pk,
    )
    return message


@transaction.atomic
def mark_message_read(*, order_id, actor, message_id) -> OrderMessage:
    """
    Mark a message as read by the other party.

    Reading your own message changes nothing, and so does reading a message
    twice.
    """
    order = lock_order(order_id)
    require_party(order, actor)

    message = order.messages.filter(pk=message_id).first()
    if message is None:
        raise NotFoundError("Message not found.")

    if message.sender_id != actor.pk and not message.read:
        message.read = True
        message.read_at = timezone.now()
        message.save(update_fields=["read", "read_at"])
    return message


def unread_count(order, actor) -> int:
    """Unread messages on ``order`` that were sent by the other party."""
    return order.messages.filter(read=False).exclude(sender=actor).count()
