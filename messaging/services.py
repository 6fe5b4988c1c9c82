# messaging/services.py
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from events.models import Event

from .models import Conversation, ConversationMember

logger = logging.getLogger(__name__)


def _get_or_create_event_conversation(event: Event) -> Conversation:
    """
    Ensure there's a Conversation row linked to this Event.
    """
    title = event.name or f"Event #{event.pk}"
    try:
        with transaction.atomic():
            conv, created = Conversation.objects.get_or_create(
                event=event,
                defaults={"created_by": event.created_by, "title": title},
            )
    except IntegrityError:
        # created concurrently by another enrollment
        return Conversation.objects.get(event=event)

    if not created and not conv.title:
        # Backfill title if empty
        conv.title = title
        conv.save(update_fields=["title"])
    return conv


def enroll_in_event_conversation(event: Event, user) -> bool:
    """
    Add ``user`` to the event's chat.  Returns True when newly added.
    """
    conv = _get_or_create_event_conversation(event)
    try:
        with transaction.atomic():
            _, created = ConversationMember.objects.get_or_create(conversation=conv, user=user)
    except IntegrityError:
        created = False
    if created:
        logger.info("User %s joined the chat of event %s", user.pk, event.pk)
    return created
