"""Booking persistence model."""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Name of the PostgreSQL EXCLUDE constraint installed by migration 0002.
NO_OVERLAP_CONSTRAINT = "booking_no_space_overlap"


class Booking(models.Model):
    """Reservation of a space for a half-open interval [start_time, end_time)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    space = models.ForeignKey(
        "spaces.Space",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="space_bookings",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_time", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["space", "start_time", "end_time"], name="booking_space_window_idx"),
            models.Index(fields=["start_time", "end_time"], name="booking_window_idx"),
            models.Index(fields=["user", "start_time"], name="booking_user_start_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} for space {self.space_id}"
