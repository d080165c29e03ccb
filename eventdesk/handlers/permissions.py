import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission

WEBHOOK_SECRET_HEADER = "X-Webhook-Secret"


class HasWebhookSecret(BasePermission):
    """Admit identity-provider webhook calls carrying the shared secret."""

    message = "Invalid webhook secret"

    def has_permission(self, request, view) -> bool:
        supplied = request.headers.get(WEBHOOK_SECRET_HEADER, "")
        expected = settings.IDENTITY_WEBHOOK_SECRET
        return bool(expected) and hmac.compare_digest(supplied.encode(), expected.encode())
