"""Floor and space models."""

from __future__ import annotations

import uuid

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Floor(models.Model):
    """A building floor with its map canvas size."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    width = models.PositiveIntegerField(default=800)
    height = models.PositiveIntegerField(default=600)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Floor")
        verbose_name_plural = _("Floors")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Space(models.Model):
    """A bookable room or area drawn on a floor map."""

    class SpaceType(models.TextChoices):
        MEETING_ROOM = "meeting_room", _("Meeting room")
        LAB = "lab", _("Lab")
        AUDITORIUM = "auditorium", _("Auditorium")
        OFFICE = "office", _("Office")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    floor = models.ForeignKey(
        Floor,
        on_delete=models.CASCADE,
        related_name="spaces",
    )
    name = models.CharField(max_length=120)
    space_type = models.CharField(
        max_length=32,
        choices=SpaceType.choices,
        default=SpaceType.MEETING_ROOM,
    )
    capacity = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(
        default=True,
        help_text=_("Inactive spaces are under maintenance and reject new bookings."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Space")
        verbose_name_plural = _("Spaces")
        ordering = ["floor__name", "name"]
        indexes = [
            models.Index(fields=["floor", "is_active"], name="space_floor_active_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.floor_id})"
