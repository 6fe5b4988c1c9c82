"""
Database models for the payments app.

Pricing plans are the subscriptions sold outside of event ticketing.  A
Transaction records one purchase of a plan against FedaPay: it starts
pending, is settled by the webhook reconciler, and carries the date at
which the subscription lapses.
"""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class PricingPlan(models.Model):
    """A subscription plan sold through FedaPay."""

    DURATION_WEEKLY = "weekly"
    DURATION_MONTHLY = "monthly"
    DURATION_YEARLY = "yearly"
    DURATION_CHOICES = [
        (DURATION_WEEKLY, "Weekly"),
        (DURATION_MONTHLY, "Monthly"),
        (DURATION_YEARLY, "Yearly"),
    ]
    DURATION_DAYS = {
        DURATION_WEEKLY: 7,
        DURATION_MONTHLY: 30,
        DURATION_YEARLY: 365,
    }

    name = models.CharField(max_length=255)
    amount = models.PositiveIntegerField(help_text="Price in the processor currency (XOF has no minor unit)")
    duration = models.CharField(max_length=10, choices=DURATION_CHOICES, default=DURATION_MONTHLY)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["amount"]

    def __str__(self) -> str:
        return f"{self.name} ({self.amount} {settings.FEDAPAY_CURRENCY}/{self.duration})"

    def expires_at(self, start=None):
        """End of the subscription period when bought at ``start`` (default now)."""
        start = start or timezone.now()
        return start + timedelta(days=self.DURATION_DAYS[self.duration])


class Transaction(models.Model):
    """A subscription purchase tracked by its FedaPay transaction id."""

    STATUS_PENDING = "pending"
    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="payment_transactions",
    )
    plan = models.ForeignKey(
        PricingPlan,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    amount = models.PositiveIntegerField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    external_reference = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "status"], name="transaction_user_status_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Transaction {self.external_reference} ({self.get_status_display()})"

    @property
    def is_active(self) -> bool:
        return self.status == self.STATUS_COMPLETED and self.expires_at > timezone.now()
