"""
Notificador de confirmação de orçamento.
Registra cada envio na outbox e entrega em segundo plano.
"""

import asyncio
import math
from typing import Optional

from config.logging_config import LoggerMixin
from config.settings import Settings, get_settings
from storefront.core.constants import (
    CONFIRMATION_SUBJECT,
    CONFIRMATION_TAG,
    CONFIRMATION_TEMPLATE,
    CONFIRMATION_TEST_TAG,
)
from storefront.core.exceptions import ConfigurationError, EmailDeliveryError, ValidationError
from storefront.core.models import (
    ConfirmationContext,
    CustomerData,
    EmailMessage,
    EmailResult,
    OutboxEntry,
    OutboxPage,
    Pagination,
)
from storefront.core.types import EmailStatus
from storefront.notifications.base import BaseEmailSender
from storefront.notifications.rendering import render_confirmation_email
from storefront.storage.base import BaseStore

OUTBOX_DEFAULT_LIMIT = 20
OUTBOX_MAX_LIMIT = 100


class ConfirmationNotifier(LoggerMixin):
    """
    Envia o e-mail "recebemos sua solicitação".

    dispatch() agenda a entrega e retorna na hora; falhas são registradas
    no log e na outbox e nunca chegam a quem criou o orçamento.
    """

    def __init__(
        self,
        store: BaseStore,
        sender: BaseEmailSender,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.sender = sender
        self.settings = settings or get_settings()
        self._pending: set[asyncio.Task] = set()

    def build_message(
        self,
        customer: CustomerData,
        *,
        quote_number: Optional[str] = None,
        message: Optional[str] = None,
        test: bool = False,
    ) -> EmailMessage:
        """Monta a mensagem de confirmação para o cliente."""
        html, text = render_confirmation_email(
            ConfirmationContext(
                client_name=customer.name,
                client_email=customer.email,
                client_phone=customer.phone,
                client_company=customer.company,
                message=message,
                quote_number=quote_number,
            ),
            brand=self.settings.email_sender_name,
            sender_email=self.settings.email_sender_address,
        )
        return EmailMessage(
            sender_name=self.settings.email_sender_name,
            sender_email=self.settings.email_sender_address,
            recipient_email=customer.email,
            recipient_name=customer.name,
            subject=CONFIRMATION_SUBJECT,
            html_body=html,
            text_body=text,
            reply_to=self.settings.email_sender_address,
            tags=[CONFIRMATION_TEST_TAG if test else CONFIRMATION_TAG],
        )

    async def deliver(
        self,
        message: EmailMessage,
        payload: Optional[dict] = None,
    ) -> Optional[EmailResult]:
        """
        Registra na outbox, envia e atualiza o status.

        Returns:
            EmailResult, ou None quando o envio foi pulado (sem API key)

        Raises:
            EmailDeliveryError: falha de transporte com o provedor
        """
        log = self.log_operation("deliver", recipient=message.recipient_email)

        if not self.sender.configured:
            log.warning("API key do provedor ausente; envio ignorado", provider=self.sender.provider)
            return None

        entry_id = await self._record_queued(message, payload or {})

        try:
            result = await self.sender.send(message)
        except EmailDeliveryError as e:
            await self._record_result(entry_id, EmailStatus.ERROR, str(e))
            raise

        status = EmailStatus.SENT if result.success else EmailStatus.ERROR
        await self._record_result(entry_id, status, result.provider_response)

        log.info("Confirmação processada", status=status.value, status_code=result.status_code)
        return result

    def dispatch(
        self,
        customer: CustomerData,
        quote_number: Optional[str] = None,
    ) -> asyncio.Task:
        """Agenda a confirmação em segundo plano e retorna a task."""
        message = self.build_message(customer, quote_number=quote_number)
        payload = {
            "customerData": customer.model_dump(by_alias=True),
            "quoteNumber": quote_number,
        }
        task = asyncio.create_task(self._deliver_safely(message, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Aguarda todas as entregas pendentes."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _deliver_safely(self, message: EmailMessage, payload: dict) -> None:
        try:
            await self.deliver(message, payload)
        except Exception as e:
            self.logger.error(
                "Erro ao enviar confirmação",
                recipient=message.recipient_email,
                error=str(e),
            )

    async def send_test_email(self, to: str, name: str = "Cliente Teste") -> EmailResult:
        """
        Envia o mesmo template com a tag de teste e aguarda o resultado.

        Raises:
            ConfigurationError: provedor sem API key
        """
        customer = CustomerData(name=name, email=to)
        message = self.build_message(customer, test=True)
        result = await self.deliver(message, {"to": to, "name": name, "test": True})
        if result is None:
            raise ConfigurationError("Provedor de e-mail sem API key", setting="brevo_api_key")
        return result

    async def list_outbox(
        self,
        recipient: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = OUTBOX_DEFAULT_LIMIT,
    ) -> OutboxPage:
        """Lista a outbox, mais recentes primeiro. status="all" não filtra."""
        page = max(1, page)
        limit = max(1, min(OUTBOX_MAX_LIMIT, limit))
        email_status = None if not status or status == "all" else self._parse_status(status)

        entries, total = await self.store.list_outbox(
            recipient=recipient,
            status=email_status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return OutboxPage(
            items=entries,
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(total / limit),
                total_items=total,
                items_per_page=limit,
            ),
        )

    @staticmethod
    def _parse_status(status: str) -> EmailStatus:
        try:
            return EmailStatus(status)
        except ValueError as e:
            raise ValidationError("Status inválido", field="status", value=status, cause=e) from e

    async def _record_queued(self, message: EmailMessage, payload: dict) -> Optional[int]:
        """Grava a entrada 'queued'; falha na outbox não impede o envio."""
        try:
            entry = await self.store.insert_outbox(
                OutboxEntry(
                    recipient=message.recipient_email,
                    subject=message.subject,
                    template=CONFIRMATION_TEMPLATE,
                    payload=payload,
                    status=EmailStatus.QUEUED,
                )
            )
        except Exception as e:
            self.logger.warning("Erro ao registrar outbox", error=str(e))
            return None
        return entry.id

    async def _record_result(
        self,
        entry_id: Optional[int],
        status: EmailStatus,
        response_text: Optional[str],
    ) -> None:
        if entry_id is None:
            return
        try:
            await self.store.update_outbox(entry_id, status, {"text": response_text or ""})
        except Exception as e:
            self.logger.warning("Erro ao atualizar outbox", entry_id=entry_id, error=str(e))
