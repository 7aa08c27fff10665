"""
Interface dos provedores de e-mail transacional.
"""

from abc import ABC, abstractmethod

from config.logging_config import LoggerMixin
from storefront.core.models import EmailMessage, EmailResult


class BaseEmailSender(ABC, LoggerMixin):
    """
    Provedor de e-mail.

    send() faz uma única tentativa. Resposta de erro do provedor volta como
    EmailResult(success=False); falha de transporte levanta EmailDeliveryError.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Nome do provedor."""
        pass

    @property
    def configured(self) -> bool:
        """Indica se há credenciais para enviar."""
        return True

    @abstractmethod
    async def send(self, message: EmailMessage) -> EmailResult:
        pass

    async def close(self) -> None:
        return None
