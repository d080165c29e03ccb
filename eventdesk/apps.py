from django.apps import AppConfig


class EventdeskConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "eventdesk"

    def ready(self) -> None:
        from eventdesk import signals  # noqa: F401
