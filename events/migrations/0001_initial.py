"""
Initial migration for the events app.

Creates the Event table with its seat ledger counter and the PriceTier
table.  The check constraints keep the counter within capacity and every
tier consuming at least one seat.
"""
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("location", models.CharField(blank=True, max_length=255)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                ("status", models.CharField(
                    choices=[("draft", "Draft"), ("pending", "Pending review"), ("published", "Published"), ("cancelled", "Cancelled")],
                    db_index=True, default="draft", max_length=16,
                )),
                ("access_type", models.CharField(choices=[("free", "Free"), ("paid", "Paid")], default="paid", max_length=8)),
                ("capacity", models.PositiveIntegerField()),
                ("remaining_seats", models.PositiveIntegerField(editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="created_events",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("remaining_seats__lte", models.F("capacity"))),
                        name="event_remaining_seats_within_capacity",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PriceTier",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("unit_amount", models.PositiveIntegerField(default=0, help_text="Price per unit in the processor currency")),
                ("seats_per_unit", models.PositiveIntegerField(
                    default=1,
                    help_text="Capacity units consumed by one purchased unit",
                    validators=[django.core.validators.MinValueValidator(1)],
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("event", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="price_tiers",
                    to="events.event",
                )),
            ],
            options={
                "ordering": ["unit_amount", "id"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "name"), name="uniq_tier_name_per_event"),
                    models.CheckConstraint(condition=models.Q(("seats_per_unit__gte", 1)), name="tier_seats_per_unit_positive"),
                ],
            },
        ),
    ]
