import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Floor",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                ("width", models.PositiveIntegerField(default=800)),
                ("height", models.PositiveIntegerField(default=600)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Floor",
                "verbose_name_plural": "Floors",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Space",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=120)),
                (
                    "space_type",
                    models.CharField(
                        choices=[
                            ("meeting_room", "Meeting room"),
                            ("lab", "Lab"),
                            ("auditorium", "Auditorium"),
                            ("office", "Office"),
                        ],
                        default="meeting_room",
                        max_length=32,
                    ),
                ),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        default=1, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Inactive spaces are under maintenance and reject new bookings.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "floor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="spaces",
                        to="spaces.floor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Space",
                "verbose_name_plural": "Spaces",
                "ordering": ["floor__name", "name"],
                "indexes": [models.Index(fields=["floor", "is_active"], name="space_floor_active_idx")],
            },
        ),
    ]
