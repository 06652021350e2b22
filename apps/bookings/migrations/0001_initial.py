import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("spaces", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "space",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="spaces.space",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="space_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["start_time", "id"],
                "indexes": [
                    models.Index(fields=["space", "start_time", "end_time"], name="booking_space_window_idx"),
                    models.Index(fields=["start_time", "end_time"], name="booking_window_idx"),
                    models.Index(fields=["user", "start_time"], name="booking_user_start_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_time__gt=models.F("start_time")),
                        name="booking_valid_interval",
                    ),
                ],
            },
        ),
    ]
