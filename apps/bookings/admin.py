"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "space",
        "user",
        "start_time",
        "end_time",
        "created_at",
    )
    list_filter = ("space__floor", "space", "start_time")
    search_fields = ("id", "space__name", "user__email", "user__username")
    list_select_related = ("space", "user")
    date_hierarchy = "start_time"
    readonly_fields = (
        "id",
        "space",
        "user",
        "start_time",
        "end_time",
        "created_at",
    )

    def has_add_permission(self, request):  # type: ignore
        # New bookings go through the API so the overlap check runs.
        return False
