"""
Initial migration for the payments app.

Creates the PricingPlan and Transaction tables.  A transaction is keyed
by its FedaPay id so webhook deliveries find it directly.
"""
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PricingPlan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("amount", models.PositiveIntegerField(help_text="Price in the processor currency (XOF has no minor unit)")),
                ("duration", models.CharField(
                    choices=[("weekly", "Weekly"), ("monthly", "Monthly"), ("yearly", "Yearly")],
                    default="monthly", max_length=10,
                )),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["amount"],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.PositiveIntegerField()),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed")],
                    default="pending", max_length=10,
                )),
                ("external_reference", models.CharField(max_length=64, unique=True)),
                ("expires_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("plan", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="transactions",
                    to="payments.pricingplan",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="payment_transactions",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["user", "status"], name="transaction_user_status_idx")],
            },
        ),
    ]
