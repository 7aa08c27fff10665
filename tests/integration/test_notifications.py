"""
Testes de integração para o envio pela Brevo e a outbox de confirmações.
"""

import json

import httpx
import pytest
import pytest_asyncio

from storefront.core.exceptions import (
    ConfigurationError,
    DataStoreError,
    EmailDeliveryError,
    ValidationError,
)
from storefront.core.models import CustomerData, EmailMessage, EmailResult
from storefront.core.types import EmailStatus
from storefront.notifications import BrevoEmailSender, ConfirmationNotifier
from tests.fixtures.senders import FailingEmailSender, RecordingEmailSender


@pytest.fixture
def message() -> EmailMessage:
    return EmailMessage(
        sender_name="Natureza Brindes",
        sender_email="naturezabrindes@naturezabrindes.com.br",
        recipient_email="maria@empresa.com.br",
        recipient_name="Maria",
        subject="Assunto",
        html_body="<p>oi</p>",
    )


@pytest.fixture
def customer() -> CustomerData:
    return CustomerData(name="Maria Souza", email="maria@empresa.com.br", company="Empresa Verde")


def brevo_with(handler, api_key: str = "xkeysib-test") -> BrevoEmailSender:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BrevoEmailSender(api_key, client=client)


class TestBrevoEmailSender:
    """Testes para BrevoEmailSender."""

    @pytest.mark.asyncio
    async def test_envio_aceito(self, message):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"messageId": "<1@smtp-relay.brevo.com>"})

        sender = brevo_with(handler)
        result = await sender.send(message)

        request = requests[0]
        assert result.success is True
        assert result.status_code == 201
        assert "messageId" in result.provider_response
        assert str(request.url) == "https://api.brevo.com/v3/smtp/email"
        assert request.headers["api-key"] == "xkeysib-test"
        assert json.loads(request.content)["to"] == [{"email": "maria@empresa.com.br", "name": "Maria"}]

    @pytest.mark.asyncio
    async def test_envio_recusado(self, message):
        sender = brevo_with(lambda r: httpx.Response(400, json={"code": "invalid_parameter"}))

        result = await sender.send(message)

        assert result.success is False
        assert result.status_code == 400
        assert "invalid_parameter" in result.provider_response

    @pytest.mark.asyncio
    async def test_falha_de_conexao(self, message):
        def refuse(request):
            raise httpx.ConnectError("conexão recusada", request=request)

        sender = brevo_with(refuse)

        with pytest.raises(EmailDeliveryError) as exc_info:
            await sender.send(message)

        assert exc_info.value.details["recipient"] == "maria@empresa.com.br"

    @pytest.mark.asyncio
    async def test_sem_api_key(self, message):
        sender = brevo_with(lambda r: httpx.Response(201), api_key=None)

        assert sender.configured is False
        with pytest.raises(ConfigurationError):
            await sender.send(message)


class TestConfirmationNotifier:
    """Testes para ConfirmationNotifier sobre o SQLiteStore."""

    @pytest_asyncio.fixture
    async def notifier(self, sqlite_store, email_sender, settings):
        notifier = ConfirmationNotifier(sqlite_store, email_sender, settings)
        yield notifier
        await notifier.drain()

    async def outbox(self, store):
        entries, _ = await store.list_outbox(None, None, offset=0, limit=20)
        return entries

    @pytest.mark.asyncio
    async def test_mensagem(self, notifier, customer):
        message = notifier.build_message(customer, quote_number="SOL-1-ABCDEF")

        assert message.subject == "RECEBEMOS SUA SOLICITAÇÃO DE ORÇAMENTO - Natureza Brindes"
        assert message.recipient_email == "maria@empresa.com.br"
        assert message.reply_to == "naturezabrindes@naturezabrindes.com.br"
        assert message.tags == ["quote_confirmation"]
        assert "SOL-1-ABCDEF" in message.html_body
        assert message.text_body.startswith("Olá Maria Souza,")

    @pytest.mark.asyncio
    async def test_dispatch_grava_outbox_enviada(self, notifier, customer, email_sender, sqlite_store):
        task = notifier.dispatch(customer, quote_number="SOL-1-ABCDEF")
        await task

        entries = await self.outbox(sqlite_store)
        assert len(email_sender.sent) == 1
        assert entries[0].status == EmailStatus.SENT
        assert entries[0].template == "quote_confirmation"
        assert entries[0].payload["customerData"]["company"] == "Empresa Verde"
        assert entries[0].provider_response == {"text": '{"messageId":"<1@brevo>"}'}

    @pytest.mark.asyncio
    async def test_recusa_do_provedor_vira_erro(self, sqlite_store, settings, customer):
        sender = RecordingEmailSender(EmailResult(success=False, status_code=400, provider_response="bad"))
        notifier = ConfirmationNotifier(sqlite_store, sender, settings)

        notifier.dispatch(customer)
        await notifier.drain()

        entries = await self.outbox(sqlite_store)
        assert entries[0].status == EmailStatus.ERROR
        assert entries[0].provider_response == {"text": "bad"}

    @pytest.mark.asyncio
    async def test_falha_de_transporte_nao_propaga(self, sqlite_store, settings, customer):
        sender = FailingEmailSender()
        notifier = ConfirmationNotifier(sqlite_store, sender, settings)

        task = notifier.dispatch(customer)
        await notifier.drain()

        assert task.exception() is None
        entries = await self.outbox(sqlite_store)
        assert entries[0].status == EmailStatus.ERROR
        assert "Conexão recusada" in entries[0].provider_response["text"]

    @pytest.mark.asyncio
    async def test_deliver_propaga_falha_de_transporte(self, sqlite_store, settings, message):
        notifier = ConfirmationNotifier(sqlite_store, FailingEmailSender(), settings)

        with pytest.raises(EmailDeliveryError):
            await notifier.deliver(message)

    @pytest.mark.asyncio
    async def test_sem_api_key_pula_envio(self, sqlite_store, settings, message):
        sender = RecordingEmailSender(configured=False)
        notifier = ConfirmationNotifier(sqlite_store, sender, settings)

        assert await notifier.deliver(message) is None
        assert sender.sent == []
        assert await self.outbox(sqlite_store) == []

    @pytest.mark.asyncio
    async def test_falha_na_outbox_nao_impede_envio(self, notifier, message, email_sender, sqlite_store, monkeypatch):
        async def broken(entry):
            raise DataStoreError("outbox indisponível", table="email_outbox")

        monkeypatch.setattr(sqlite_store, "insert_outbox", broken)

        result = await notifier.deliver(message)

        assert result.success is True
        assert len(email_sender.sent) == 1

    @pytest.mark.asyncio
    async def test_email_de_teste(self, notifier, email_sender, sqlite_store):
        result = await notifier.send_test_email("ana@x.com", name="Ana")

        assert result.success is True
        assert email_sender.sent[0].tags == ["quote_confirmation_test"]
        entries = await self.outbox(sqlite_store)
        assert entries[0].payload == {"to": "ana@x.com", "name": "Ana", "test": True}

    @pytest.mark.asyncio
    async def test_email_de_teste_sem_api_key(self, sqlite_store, settings):
        notifier = ConfirmationNotifier(sqlite_store, RecordingEmailSender(configured=False), settings)

        with pytest.raises(ConfigurationError):
            await notifier.send_test_email("ana@x.com")

    @pytest.mark.asyncio
    async def test_lista_outbox(self, notifier, email_sender, sqlite_store):
        for address in ["ana@x.com", "bia@y.com", "ana.souza@z.com"]:
            await notifier.send_test_email(address)

        page = await notifier.list_outbox(recipient="ana", limit=1)
        sent = await notifier.list_outbox(status="sent")
        everything = await notifier.list_outbox(status="all", limit=500)

        assert page.pagination.total_items == 2
        assert page.pagination.total_pages == 2
        assert page.items[0].recipient == "ana.souza@z.com"
        assert sent.pagination.total_items == 3
        assert everything.pagination.items_per_page == 100

    @pytest.mark.asyncio
    async def test_outbox_status_invalido(self, notifier):
        with pytest.raises(ValidationError) as exc_info:
            await notifier.list_outbox(status="arquivado")

        assert exc_info.value.details["field"] == "status"
        assert exc_info.value.details["invalid_value"] == "arquivado"
