"""Integration tests for booking API endpoints."""

from __future__ import annotations

from unittest import mock
from uuid import uuid4

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.domain.exceptions import StoreUnavailableError
from apps.bookings.models import Booking
from apps.bookings.store import DjangoBookingStore
from apps.spaces.models import Floor, Space

User = get_user_model()


class BookingAPITests(APITestCase):
    """Covers creating, conflicting and cancelling bookings."""

    def setUp(self) -> None:
        self.alice = User.objects.create_user(username="alice", password="AlicePass123")
        self.bob = User.objects.create_user(username="bob", password="BobPass123")
        self.admin = User.objects.create_superuser(username="admin", password="AdminPass123")
        floor = Floor.objects.create(name="Level 2")
        self.room = Space.objects.create(floor=floor, name="Aurora")
        self.lab = Space.objects.create(floor=floor, name="Lab", space_type=Space.SpaceType.LAB)
        self.client.force_authenticate(self.alice)
        self.list_url = reverse("booking-list")

    def _payload(self, start: str, end: str, space: Space | None = None) -> dict[str, str]:
        return {
            "space_id": str((space or self.room).id),
            "start_time": start,
            "end_time": end,
        }

    def _book(self, start: str, end: str, space: Space | None = None):
        return self.client.post(self.list_url, self._payload(start, end, space), format="json")

    def test_user_can_create_booking(self) -> None:
        response = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        booking = Booking.objects.get()
        self.assertEqual(booking.user, self.alice)
        self.assertEqual(booking.space, self.room)
        self.assertEqual(response.data["space_name"], "Aurora")
        self.assertEqual(response.data["user_id"], self.alice.id)

    def test_prevent_double_booking_on_overlap(self) -> None:
        first = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        self.client.force_authenticate(self.bob)
        conflict = self._book("2030-01-01T09:30:00Z", "2030-01-01T10:30:00Z")

        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["code"], "already_booked")
        self.assertEqual(Booking.objects.count(), 1)

    def test_back_to_back_bookings_are_allowed(self) -> None:
        first = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        second = self._book("2030-01-01T10:00:00Z", "2030-01-01T11:00:00Z")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED, second.data)
        self.assertEqual(Booking.objects.count(), 2)

    def test_invalid_interval_is_bad_request(self) -> None:
        response = self._book("2030-01-01T10:00:00Z", "2030-01-01T09:00:00Z")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_interval")

    def test_malformed_payload_is_bad_request(self) -> None:
        response = self.client.post(self.list_url, {"space_id": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Booking.objects.exists())

    def test_space_under_maintenance_is_unprocessable(self) -> None:
        self.room.is_active = False
        self.room.save(update_fields=["is_active"])

        response = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY, response.data)
        self.assertEqual(response.data["code"], "space_unavailable")

    def test_unknown_space_is_not_found(self) -> None:
        response = self.client.post(
            self.list_url,
            {"space_id": str(uuid4()), "start_time": "2030-01-01T09:00:00Z", "end_time": "2030-01-01T10:00:00Z"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_busy_store_asks_client_to_retry(self) -> None:
        with mock.patch.object(DjangoBookingStore, "create", side_effect=StoreUnavailableError("lock timeout")):
            response = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response["Retry-After"], "2")
        self.assertEqual(response.data["code"], "retry")

    def test_owner_can_cancel_booking(self) -> None:
        booking_id = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z").data["id"]
        detail_url = reverse("booking-detail", args=[booking_id])

        response = self.client.delete(detail_url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Booking.objects.exists())

        again = self.client.delete(detail_url)
        self.assertEqual(again.status_code, status.HTTP_404_NOT_FOUND)

    def test_cancelled_slot_can_be_rebooked(self) -> None:
        booking_id = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z").data["id"]
        self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.client.force_authenticate(self.bob)
        response = self._book("2030-01-01T09:30:00Z", "2030-01-01T10:30:00Z")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_other_user_cannot_cancel(self) -> None:
        booking_id = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z").data["id"]

        self.client.force_authenticate(self.bob)
        response = self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Booking.objects.count(), 1)

    def test_admin_can_cancel_any_booking(self) -> None:
        booking_id = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z").data["id"]

        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_occupied_spaces_for_window(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        self._book("2030-01-01T12:00:00Z", "2030-01-01T13:00:00Z", space=self.lab)
        url = reverse("booking-occupied")

        response = self.client.get(url, {"start_time": "2030-01-01T09:15:00Z", "end_time": "2030-01-01T09:45:00Z"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [str(self.room.id)])

        adjacent = self.client.get(url, {"start_time": "2030-01-01T10:00:00Z", "end_time": "2030-01-01T12:00:00Z"})
        self.assertEqual(adjacent.data, [])

        inverted = self.client.get(url, {"start_time": "2030-01-01T10:00:00Z", "end_time": "2030-01-01T09:00:00Z"})
        self.assertEqual(inverted.status_code, status.HTTP_200_OK)
        self.assertEqual(inverted.data, [])

        malformed = self.client.get(url, {"start_time": "yesterday"})
        self.assertEqual(malformed.status_code, status.HTTP_400_BAD_REQUEST)

    def test_occupied_now(self) -> None:
        Booking.objects.create(
            space=self.lab,
            user=self.bob,
            start_time="2000-01-01T00:00:00Z",
            end_time="2100-01-01T00:00:00Z",
        )

        response = self.client.get(reverse("booking-occupied-now"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [str(self.lab.id)])

    def test_availability_hint(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        url = reverse("booking-availability")
        params = {"space_id": str(self.room.id)}

        busy = self.client.get(url, {**params, "start_time": "2030-01-01T09:30:00Z", "end_time": "2030-01-01T10:30:00Z"})
        free = self.client.get(url, {**params, "start_time": "2030-01-01T10:00:00Z", "end_time": "2030-01-01T11:00:00Z"})

        self.assertEqual(busy.data, {"available": False})
        self.assertEqual(free.data, {"available": True})

    def test_availability_hint_for_space_under_maintenance(self) -> None:
        self.room.is_active = False
        self.room.save(update_fields=["is_active"])

        response = self.client.get(reverse("booking-availability"), {
            "space_id": str(self.room.id),
            "start_time": "2030-01-01T09:00:00Z",
            "end_time": "2030-01-01T10:00:00Z",
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"available": False})

    def test_space_calendar(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        self._book("2030-01-01T14:00:00Z", "2030-01-01T15:00:00Z")

        response = self.client.get(self.list_url, {"space_id": str(self.room.id)})
        window = self.client.get(self.list_url, {
            "space_id": str(self.room.id),
            "start_time": "2030-01-01T13:00:00Z",
            "end_time": "2030-01-01T16:00:00Z",
        })
        half = self.client.get(self.list_url, {"space_id": str(self.room.id), "start_time": "2030-01-01T13:00:00Z"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual([b["start_time"] for b in window.data], ["2030-01-01T14:00:00Z"])
        self.assertEqual(window.data[0]["phase"], "upcoming")
        self.assertEqual(half.status_code, status.HTTP_400_BAD_REQUEST)

    def test_full_listing_requires_admin(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        forbidden = self.client.get(self.list_url)
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        allowed = self.client.get(self.list_url, {"upcoming": "true"})
        self.assertEqual(allowed.status_code, status.HTTP_200_OK)
        self.assertEqual(len(allowed.data), 1)

    def test_user_bookings_are_private(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        own = self.client.get(reverse("booking-for-user", args=[self.alice.id]))
        self.assertEqual(own.status_code, status.HTTP_200_OK)
        self.assertEqual(len(own.data), 1)

        other = self.client.get(reverse("booking-for-user", args=[self.bob.id]))
        self.assertEqual(other.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        as_admin = self.client.get(reverse("booking-for-user", args=[self.alice.id]))
        self.assertEqual(len(as_admin.data), 1)

    def test_stats_for_admins_only(self) -> None:
        self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")
        url = reverse("booking-stats")

        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["in_progress"], 0)
        self.assertEqual(response.data["unique_users"], 1)
        self.assertEqual(len(response.data["per_day"]), 7)
        self.assertEqual(response.data["by_space_type"], {"meeting_room": 1})

    def test_anonymous_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)

        response = self._book("2030-01-01T09:00:00Z", "2030-01-01T10:00:00Z")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class HealthCheckTests(APITestCase):
    def test_healthz_reports_database(self) -> None:
        response = self.client.get(reverse("healthz"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["status"], "healthy")
