# messaging/models.py
from django.conf import settings
from django.db import models


class Conversation(models.Model):
    """The group chat of one event."""
    event = models.OneToOneField(
        "events.Event", on_delete=models.CASCADE, related_name="chat_conversation"
    )
    title = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        related_name="created_conversations", null=True, blank=True
    )
    updated_at = models.DateTimeField(auto_now=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"[Event] {self.title or self.event_id}"


class ConversationMember(models.Model):
    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="chat_memberships")
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["conversation", "user"], name="uniq_conversation_member"),
        ]

    def __str__(self):
        return f"{self.user_id} in {self.conversation_id}"
