from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from shared.application.message_bus import message_bus

        from .application.event_handlers import register

        register(message_bus)
