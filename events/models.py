"""
Models for the events app.

An `Event` is published by its creator with a fixed seat capacity.  The
`remaining_seats` counter is the seat ledger: it starts at `capacity` and
is only ever moved by :mod:`events.ledger` when an order is confirmed.
`PriceTier` rows are the ticket categories buyers order from.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Event(models.Model):
    """A ticketed event with a seat capacity."""

    STATUS_DRAFT = "draft"
    STATUS_PENDING = "pending"
    STATUS_PUBLISHED = "published"
    STATUS_CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PENDING, "Pending review"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    ACCESS_FREE = "free"
    ACCESS_PAID = "paid"
    ACCESS_CHOICES = [
        (ACCESS_FREE, "Free"),
        (ACCESS_PAID, "Paid"),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    access_type = models.CharField(max_length=8, choices=ACCESS_CHOICES, default=ACCESS_PAID)
    capacity = models.PositiveIntegerField()
    remaining_seats = models.PositiveIntegerField(editable=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(remaining_seats__lte=models.F("capacity")),
                name="event_remaining_seats_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_free(self) -> bool:
        return self.access_type == self.ACCESS_FREE

    @property
    def has_ended(self) -> bool:
        return self.ends_at <= timezone.now()

    def is_open_for_orders(self) -> bool:
        return self.status == self.STATUS_PUBLISHED and not self.has_ended

    def clean(self):
        super().clean()
        if self.starts_at and self.ends_at and self.ends_at <= self.starts_at:
            raise ValidationError({"ends_at": "End must be after start."})

    def save(self, *args, **kwargs):
        if self._state.adding:
            # the ledger starts full
            self.remaining_seats = self.capacity
        else:
            stored = (
                Event.objects.filter(pk=self.pk)
                .values("capacity", "status")
                .first()
            )
            capacity_delta = 0
            if stored and stored["capacity"] != self.capacity:
                if stored["status"] == self.STATUS_PUBLISHED:
                    raise ValidationError({"capacity": "Capacity cannot change once the event is published."})
                capacity_delta = self.capacity - stored["capacity"]
            # remaining_seats belongs to the ledger, never to a model save
            if kwargs.get("update_fields") is None:
                kwargs["update_fields"] = [
                    f.name for f in self._meta.concrete_fields
                    if not f.primary_key and f.name != "remaining_seats"
                ]
            if capacity_delta:
                self.remaining_seats = models.F("remaining_seats") + capacity_delta
                kwargs["update_fields"] = [*kwargs["update_fields"], "remaining_seats"]
                super().save(*args, **kwargs)
                self.refresh_from_db(fields=["remaining_seats"])
                return
        super().save(*args, **kwargs)


class PriceTier(models.Model):
    """A priced ticket category scoped to one event."""

    DEFAULT_FREE_NAME = "Standard"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="price_tiers")
    name = models.CharField(max_length=100)
    unit_amount = models.PositiveIntegerField(default=0, help_text="Price per unit in the processor currency")
    seats_per_unit = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text="Capacity units consumed by one purchased unit",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["unit_amount", "id"]
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="uniq_tier_name_per_event"),
            models.CheckConstraint(condition=models.Q(seats_per_unit__gte=1), name="tier_seats_per_unit_positive"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.unit_amount})"
