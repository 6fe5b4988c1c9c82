"""
Initial migration for the orders app.

Creates Order (UUID keyed, with the processor reference and the
confirmation handler markers) and OrderItem.
"""
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("is_guest", models.BooleanField(default=False)),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                    db_index=True, default="pending", max_length=12,
                )),
                ("payment_status", models.CharField(
                    choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed")],
                    default="pending", max_length=12,
                )),
                ("total_amount", models.PositiveIntegerField(default=0)),
                ("external_transaction_reference", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("callback_url", models.URLField(blank=True, max_length=500)),
                ("seats_committed_at", models.DateTimeField(blank=True, null=True)),
                ("confirmation_sent_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("buyer", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="ticket_orders",
                    to=settings.AUTH_USER_MODEL,
                )),
                ("event", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="orders",
                    to="events.event",
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["event", "status"], name="order_event_status_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(models.Q(("status", "confirmed"), _negated=True), ("payment_status", "completed"), _connector="OR"),
                        name="confirmed_order_payment_completed",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price_snapshot", models.PositiveIntegerField()),
                ("ticket_urls", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="items",
                    to="orders.order",
                )),
                ("price_tier", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="order_items",
                    to="events.pricetier",
                )),
            ],
            options={
                "ordering": ["id"],
                "unique_together": {("order", "price_tier")},
            },
        ),
    ]
