"""Read-only lookup of spaces used by the booking engine."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from django.core.exceptions import ValidationError  # type: ignore
from django.db import DEFAULT_DB_ALIAS  # type: ignore

from apps.bookings.domain.exceptions import SpaceNotFoundError

from .models import Space


@dataclass(frozen=True)
class SpaceInfo:
    """What the booking engine needs to know about a space."""

    id: UUID
    floor_id: UUID
    name: str
    is_active: bool


class SpaceDirectory:
    """Answers ``space_id -> SpaceInfo`` from the spaces table."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def get(self, space_id) -> SpaceInfo:
        try:
            row = (
                Space.objects.using(self.using)
                .filter(pk=space_id)
                .values("id", "floor_id", "name", "is_active")
                .first()
            )
        except (ValueError, ValidationError):
            row = None
        if row is None:
            raise SpaceNotFoundError(f"Space {space_id} does not exist")
        return SpaceInfo(
            id=row["id"],
            floor_id=row["floor_id"],
            name=row["name"],
            is_active=row["is_active"],
        )