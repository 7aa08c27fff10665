"""
Envio de e-mails pela API v3 da Brevo.
"""

from typing import Any, Optional

import httpx

from storefront.core.exceptions import ConfigurationError, EmailDeliveryError
from storefront.core.models import EmailMessage, EmailResult
from storefront.notifications.base import BaseEmailSender


class BrevoEmailSender(BaseEmailSender):
    """Cliente do endpoint /v3/smtp/email da Brevo."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.brevo.com/v3/smtp/email",
        timeout: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            api_key: Chave da API (None = envio desabilitado)
            api_url: Endpoint de envio
            timeout: Timeout em segundos
            client: Cliente httpx já configurado (testes)
        """
        self.api_key = api_key
        self.api_url = api_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def provider(self) -> str:
        return "brevo"

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def build_payload(message: EmailMessage) -> dict[str, Any]:
        """Monta o corpo JSON esperado pela Brevo."""
        payload: dict[str, Any] = {
            "sender": {"name": message.sender_name, "email": message.sender_email},
            "to": [{"email": message.recipient_email, "name": message.recipient_name}],
            "subject": message.subject,
            "htmlContent": message.html_body,
        }
        if message.text_body:
            payload["textContent"] = message.text_body
        if message.reply_to:
            payload["replyTo"] = {"email": message.reply_to, "name": message.sender_name}
        if message.tags:
            payload["tags"] = list(message.tags)
        return payload

    async def send(self, message: EmailMessage) -> EmailResult:
        """
        Envia a mensagem.

        Returns:
            EmailResult com status HTTP e corpo da resposta
        """
        if not self.api_key:
            raise ConfigurationError("BREVO_API_KEY ausente", setting="brevo_api_key")

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "api-key": self.api_key,
        }

        try:
            response = await self._client.post(
                self.api_url,
                json=self.build_payload(message),
                headers=headers,
            )
        except httpx.HTTPError as e:
            self.logger.error(
                "Falha de conexão com a Brevo",
                recipient=message.recipient_email,
                error=str(e),
            )
            raise EmailDeliveryError(
                "Falha de conexão com a Brevo",
                recipient=message.recipient_email,
                cause=e,
            ) from e

        result = EmailResult(
            success=response.is_success,
            status_code=response.status_code,
            provider_response=response.text,
        )

        if result.success:
            self.logger.info(
                "E-mail enviado",
                recipient=message.recipient_email,
                status_code=response.status_code,
            )
        else:
            self.logger.warning(
                "Brevo recusou o envio",
                recipient=message.recipient_email,
                status_code=response.status_code,
                body=response.text[:200],
            )

        return result
