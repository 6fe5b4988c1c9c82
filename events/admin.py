"""
Admin configuration for the events app.

`remaining_seats` is shown read-only; only the seat ledger moves it.
"""
from django.contrib import admin

from .models import Event, PriceTier


class PriceTierInline(admin.TabularInline):
    model = PriceTier
    extra = 1


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "access_type", "capacity", "remaining_seats", "starts_at", "created_by")
    list_filter = ("status", "access_type")
    search_fields = ("name", "location")
    readonly_fields = ("remaining_seats", "created_at", "updated_at")
    inlines = [PriceTierInline]
