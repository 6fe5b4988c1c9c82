import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

from events.models import Event, PriceTier


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_CANCELLED = "cancelled"
    STATUS = (
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_CANCELLED, "Cancelled"),
    )
    TERMINAL_STATUSES = (STATUS_CONFIRMED, STATUS_CANCELLED)

    PAYMENT_PENDING = "pending"
    PAYMENT_COMPLETED = "completed"
    PAYMENT_FAILED = "failed"
    PAYMENT_STATUS = (
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_COMPLETED, "Completed"),
        (PAYMENT_FAILED, "Failed"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="orders")
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="ticket_orders")
    is_guest = models.BooleanField(default=False)
    status = models.CharField(max_length=12, choices=STATUS, default=STATUS_PENDING, db_index=True)
    payment_status = models.CharField(max_length=12, choices=PAYMENT_STATUS, default=PAYMENT_PENDING)
    total_amount = models.PositiveIntegerField(default=0)
    external_transaction_reference = models.CharField(max_length=64, null=True, blank=True, unique=True)
    callback_url = models.URLField(max_length=500, blank=True)
    # idempotency markers for the confirmation handlers
    seats_committed_at = models.DateTimeField(null=True, blank=True)
    confirmation_sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "status"], name="order_event_status_idx"),
        ]
        constraints = [
            # confirmed orders always settled their payment
            models.CheckConstraint(
                condition=~Q(status="confirmed") | Q(payment_status="completed"),
                name="confirmed_order_payment_completed",
            ),
        ]

    def __str__(self):
        return f"Order {self.pk} ({self.get_status_display()})"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def seat_units(self) -> int:
        return sum(item.seat_units() for item in self.items.select_related("price_tier"))

    def items_total(self) -> int:
        return sum(item.line_total for item in self.items.all())


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    price_tier = models.ForeignKey(PriceTier, on_delete=models.PROTECT, related_name="order_items")
    quantity = models.PositiveIntegerField(default=1)
    unit_price_snapshot = models.PositiveIntegerField()
    ticket_urls = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("order", "price_tier"),)
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.price_tier.name}"

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_price_snapshot

    def seat_units(self) -> int:
        return self.quantity * self.price_tier.seats_per_unit
