"""API views for the booking engine."""

from __future__ import annotations

import structlog
from django.utils import timezone  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.value_objects import InvalidIntervalError

from .application.lifecycle import BookingLifecycle, BookingResult, Outcome
from .domain.exceptions import NotFoundError, StoreUnavailableError
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatsSerializer,
    IntervalQuerySerializer,
    SpaceBookingsQuerySerializer,
)

logger = structlog.get_logger(__name__)

RETRY_AFTER_SECONDS = 2

OUTCOME_STATUS = {
    Outcome.CREATED: status.HTTP_201_CREATED,
    Outcome.CANCELLED: status.HTTP_204_NO_CONTENT,
    Outcome.ALREADY_BOOKED: status.HTTP_409_CONFLICT,
    Outcome.INVALID_INTERVAL: status.HTTP_400_BAD_REQUEST,
    Outcome.SPACE_UNAVAILABLE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.RETRY: status.HTTP_503_SERVICE_UNAVAILABLE,
    Outcome.FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def is_admin(user) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def retry_later() -> Response:
    return Response(
        {"code": Outcome.RETRY.value, "detail": "Booking service is busy, try again."},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


class BookingViewSet(viewsets.ViewSet):
    """Reservations of spaces on the floor map."""

    permission_classes = [permissions.IsAuthenticated]
    lifecycle_class = BookingLifecycle

    def get_lifecycle(self) -> BookingLifecycle:
        return self.lifecycle_class()

    def _render(self, bookings) -> list:
        context = {"request": self.request, "now": timezone.now()}
        return BookingSerializer(bookings, many=True, context=context).data

    def _result_response(self, result: BookingResult) -> Response:
        code = OUTCOME_STATUS[result.outcome]
        if result.outcome is Outcome.CREATED:
            data = BookingSerializer(result.booking, context={"request": self.request}).data
            return Response(data, status=code)
        if result.outcome is Outcome.CANCELLED:
            return Response(status=code)
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if result.retryable else None
        return Response({"code": result.outcome.value, "detail": result.message}, status=code, headers=headers)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = self.get_lifecycle().create_booking(
            data["space_id"],
            request.user.id,
            data["start_time"],
            data["end_time"],
        )
        logger.info(
            "booking.create_requested",
            user_id=request.user.id,
            space_id=str(data["space_id"]),
            outcome=result.outcome.value,
        )
        return self._result_response(result)

    def list(self, request):  # type: ignore
        lifecycle = self.get_lifecycle()
        try:
            if "space_id" in request.query_params:
                query = SpaceBookingsQuerySerializer(data=request.query_params)
                query.is_valid(raise_exception=True)
                params = query.validated_data
                bookings = lifecycle.list_for_space(
                    params["space_id"],
                    params.get("start_time"),
                    params.get("end_time"),
                )
            else:
                if not is_admin(request.user):
                    return Response(status=status.HTTP_403_FORBIDDEN)
                upcoming = request.query_params.get("upcoming", "").lower() in ("1", "true", "yes")
                bookings = lifecycle.list_all(upcoming_only=upcoming)
        except InvalidIntervalError as exc:
            return Response(
                {"code": Outcome.INVALID_INTERVAL.value, "detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except StoreUnavailableError:
            return retry_later()
        return Response(self._render(bookings))

    def destroy(self, request, pk=None):  # type: ignore
        lifecycle = self.get_lifecycle()
        try:
            booking = lifecycle.get_booking(pk)
        except NotFoundError:
            return Response(
                {"code": Outcome.NOT_FOUND.value, "detail": "Booking already cancelled or invalid."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except StoreUnavailableError:
            return retry_later()
        if booking.user_id != request.user.id and not is_admin(request.user):
            return Response(status=status.HTTP_403_FORBIDDEN)
        result = lifecycle.cancel_booking(booking.id)
        logger.info(
            "booking.cancel_requested",
            user_id=request.user.id,
            booking_id=str(booking.id),
            outcome=result.outcome.value,
        )
        return self._result_response(result)

    @action(detail=False, methods=["get"])
    def occupied(self, request):  # type: ignore
        query = IntervalQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            space_ids = self.get_lifecycle().get_occupied(
                query.validated_data["start_time"],
                query.validated_data["end_time"],
            )
        except StoreUnavailableError:
            return retry_later()
        return Response(sorted(str(space_id) for space_id in space_ids))

    @action(detail=False, methods=["get"], url_path="occupied-now")
    def occupied_now(self, request):  # type: ignore
        try:
            space_ids = self.get_lifecycle().get_occupied_now()
        except StoreUnavailableError:
            return retry_later()
        return Response(sorted(str(space_id) for space_id in space_ids))

    @action(detail=False, methods=["get"])
    def availability(self, request):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        if params["start_time"] >= params["end_time"]:
            return Response({"available": False})
        try:
            available = self.get_lifecycle().check_availability(
                params["space_id"],
                params["start_time"],
                params["end_time"],
            )
        except StoreUnavailableError:
            return retry_later()
        return Response({"available": available})

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def for_user(self, request, user_id=None):  # type: ignore
        if int(user_id) != request.user.id and not is_admin(request.user):
            return Response(status=status.HTTP_403_FORBIDDEN)
        try:
            bookings = self.get_lifecycle().list_for_user(int(user_id))
        except StoreUnavailableError:
            return retry_later()
        return Response(self._render(bookings))

    @action(detail=False, methods=["get"], permission_classes=[permissions.IsAdminUser])
    def stats(self, request):  # type: ignore
        try:
            stats = self.get_lifecycle().stats()
        except StoreUnavailableError:
            return retry_later()
        return Response(BookingStatsSerializer(stats).data)
