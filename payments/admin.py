"""
Django admin registration for the payments app.
"""
from django.contrib import admin

from .models import PricingPlan, Transaction


@admin.register(PricingPlan)
class PricingPlanAdmin(admin.ModelAdmin):
    list_display = ("name", "amount", "duration", "is_active", "created_at")
    list_filter = ("duration", "is_active")
    search_fields = ("name",)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("external_reference", "user", "plan", "amount", "status", "expires_at", "created_at")
    list_filter = ("status", "plan")
    search_fields = ("external_reference", "user__email")
    readonly_fields = ("external_reference", "status", "expires_at")
    ordering = ("-created_at",)
