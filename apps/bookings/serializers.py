"""Serializers for the booking API."""

from __future__ import annotations

from django.utils import timezone  # type: ignore

from rest_framework import serializers  # type: ignore


class BookingCreateSerializer(serializers.Serializer):
    """Payload for reserving a space. The user is the authenticated requester."""

    space_id = serializers.UUIDField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()


class IntervalQuerySerializer(serializers.Serializer):
    """``start_time``/``end_time`` query parameters of the occupancy endpoints."""

    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()


class AvailabilityQuerySerializer(IntervalQuerySerializer):
    space_id = serializers.UUIDField()


class SpaceBookingsQuerySerializer(serializers.Serializer):
    """Optional window for a space's calendar."""

    space_id = serializers.UUIDField()
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)

    def validate(self, attrs):  # type: ignore
        if ("start_time" in attrs) != ("end_time" in attrs):
            raise serializers.ValidationError("start_time and end_time must be given together.")
        return attrs


class BookingSerializer(serializers.Serializer):
    """Read representation of a booking entity."""

    id = serializers.UUIDField(read_only=True)
    space_id = serializers.UUIDField(read_only=True)
    space_name = serializers.CharField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)
    start_time = serializers.DateTimeField(source="start", read_only=True)
    end_time = serializers.DateTimeField(source="end", read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    phase = serializers.SerializerMethodField()

    def get_phase(self, booking) -> str:  # type: ignore
        now = self.context.get("now") or timezone.now()
        return booking.phase(now).value


class BookingStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    unique_users = serializers.IntegerField()
    per_day = serializers.DictField(child=serializers.IntegerField())
    by_space_type = serializers.DictField(child=serializers.IntegerField())
