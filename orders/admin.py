"""
Django admin registration for the orders app.
"""
from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("price_tier", "quantity", "unit_price_snapshot", "ticket_urls")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "event", "buyer", "is_guest", "status", "payment_status", "total_amount", "created_at")
    list_filter = ("status", "payment_status", "is_guest")
    search_fields = ("id", "buyer__email", "external_transaction_reference", "event__name")
    readonly_fields = (
        "status",
        "payment_status",
        "total_amount",
        "external_transaction_reference",
        "seats_committed_at",
        "confirmation_sent_at",
        "created_at",
        "updated_at",
    )
    ordering = ("-created_at",)
    inlines = [OrderItemInline]
