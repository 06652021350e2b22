"""Admin registration for floors and spaces."""

from __future__ import annotations

from django.contrib import admin

from .models import Floor, Space


class SpaceInline(admin.TabularInline):
    model = Space
    extra = 0
    fields = ("name", "space_type", "capacity", "is_active")


@admin.register(Floor)
class FloorAdmin(admin.ModelAdmin):
    list_display = ("name", "width", "height", "created_at")
    search_fields = ("name",)
    inlines = [SpaceInline]


@admin.register(Space)
class SpaceAdmin(admin.ModelAdmin):
    list_display = ("name", "floor", "space_type", "capacity", "is_active")
    list_filter = ("is_active", "space_type", "floor")
    search_fields = ("name", "floor__name")
    list_editable = ("is_active",)
