"""
Provedores de e-mail falsos para testes.
"""

from typing import Optional

from storefront.core.exceptions import EmailDeliveryError
from storefront.core.models import EmailMessage, EmailResult
from storefront.notifications.base import BaseEmailSender


class RecordingEmailSender(BaseEmailSender):
    """Provedor falso que guarda as mensagens enviadas."""

    def __init__(self, result: Optional[EmailResult] = None, configured: bool = True):
        self.sent: list[EmailMessage] = []
        self.result = result or EmailResult(
            success=True,
            status_code=201,
            provider_response='{"messageId":"<1@brevo>"}',
        )
        self._configured = configured

    @property
    def provider(self) -> str:
        return "recording"

    @property
    def configured(self) -> bool:
        return self._configured

    async def send(self, message: EmailMessage) -> EmailResult:
        self.sent.append(message)
        return self.result


class FailingEmailSender(RecordingEmailSender):
    """Provedor falso com falha de transporte."""

    async def send(self, message: EmailMessage) -> EmailResult:
        self.sent.append(message)
        raise EmailDeliveryError("Conexão recusada", recipient=message.recipient_email)
