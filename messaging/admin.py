# messaging/admin.py
from django.contrib import admin

from .models import Conversation, ConversationMember


class ConversationMemberInline(admin.TabularInline):
    model = ConversationMember
    extra = 0
    raw_id_fields = ("user",)


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "event", "member_count", "updated_at", "created_at")
    search_fields = ("title", "event__name")
    ordering = ("-updated_at",)
    inlines = [ConversationMemberInline]

    def member_count(self, obj):
        return obj.members.count()
