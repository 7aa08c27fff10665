"""
QuoteService: solicitações de orçamento (captação de leads).
Valida, grava cliente e itens e agenda o e-mail de confirmação.
"""

import math
import secrets
import time
from typing import Optional, Union

from config.logging_config import LoggerMixin
from config.settings import Settings, get_settings
from storefront.core.constants import (
    DASHBOARD_RECENT_LIMIT,
    EMAIL_PATTERN,
    MIN_CUSTOMER_NAME_LENGTH,
    QUOTE_SUFFIX_ALPHABET,
    QUOTE_SUFFIX_LENGTH,
)
from storefront.core.exceptions import QuoteValidationError
from storefront.core.models import (
    Pagination,
    QuoteDashboard,
    QuoteItem,
    QuotePage,
    QuoteRequest,
    QuoteSubmission,
)
from storefront.core.types import QuoteStatus
from storefront.notifications.notifier import ConfirmationNotifier
from storefront.storage.base import BaseStore, RecordId

QUOTES_DEFAULT_LIMIT = 10


class QuoteService(LoggerMixin):
    """
    Serviço de orçamentos.

    O e-mail de confirmação é best-effort: create_quote() retorna assim que a
    solicitação é gravada, sem esperar o provedor.
    """

    def __init__(
        self,
        store: BaseStore,
        notifier: Optional[ConfirmationNotifier] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            store: Backend de dados
            notifier: Notificador de confirmação (None = sem e-mail)
            settings: Configurações (None = get_settings())
        """
        self.store = store
        self.notifier = notifier
        self.settings = settings or get_settings()

    # =========================================================================
    # VALIDAÇÃO
    # =========================================================================

    @staticmethod
    def validate(submission: QuoteSubmission) -> None:
        """
        Valida a solicitação; a primeira falha vence.

        Raises:
            QuoteValidationError: com code MISSING_CUSTOMER_DATA, INVALID_NAME,
                INVALID_EMAIL, NO_ITEMS, INVALID_QUANTITY, MISSING_PRODUCT_NAME
                ou INVALID_PRICE
        """
        customer = submission.customer
        if customer is None:
            raise QuoteValidationError(
                "Informações do cliente são obrigatórias",
                code="MISSING_CUSTOMER_DATA",
            )

        if len(customer.name.strip()) < MIN_CUSTOMER_NAME_LENGTH:
            raise QuoteValidationError(
                "Nome do cliente deve ter pelo menos 2 caracteres",
                code="INVALID_NAME",
                field="name",
                value=customer.name,
            )

        if not EMAIL_PATTERN.match(customer.email.strip()):
            raise QuoteValidationError(
                "Email válido é obrigatório",
                code="INVALID_EMAIL",
                field="email",
                value=customer.email,
            )

        if not submission.items:
            raise QuoteValidationError(
                "Pelo menos um item deve ser incluído no orçamento",
                code="NO_ITEMS",
            )

        for index, item in enumerate(submission.items, start=1):
            if not item.quantity or not math.isfinite(item.quantity) or item.quantity <= 0:
                raise QuoteValidationError(
                    f"Item {index}: quantidade deve ser maior que zero",
                    code="INVALID_QUANTITY",
                    field=f"items[{index - 1}].quantity",
                    value=item.quantity,
                )
            if not item.product_name.strip():
                raise QuoteValidationError(
                    f"Item {index}: nome do produto é obrigatório",
                    code="MISSING_PRODUCT_NAME",
                    field=f"items[{index - 1}].product_name",
                )
            if not math.isfinite(item.unit_price) or item.unit_price < 0:
                raise QuoteValidationError(
                    f"Item {index}: preço unitário não pode ser negativo",
                    code="INVALID_PRICE",
                    field=f"items[{index - 1}].unit_price",
                    value=item.unit_price,
                )

    def generate_number(self) -> str:
        """Número legível: PREFIXO-<epoch ms>-<6 alfanuméricos maiúsculos>."""
        suffix = "".join(secrets.choice(QUOTE_SUFFIX_ALPHABET) for _ in range(QUOTE_SUFFIX_LENGTH))
        return f"{self.settings.quote_number_prefix}-{int(time.time() * 1000)}-{suffix}"

    # =========================================================================
    # OPERAÇÕES
    # =========================================================================

    async def create_quote(self, submission: Union[QuoteSubmission, dict]) -> QuoteRequest:
        """
        Cria a solicitação de orçamento.

        Args:
            submission: QuoteSubmission ou dict no formato do formulário

        Returns:
            QuoteRequest gravada, com status pendente
        """
        if not isinstance(submission, QuoteSubmission):
            submission = QuoteSubmission.model_validate(submission)

        self.validate(submission)
        customer = submission.customer.model_copy(
            update={
                "name": submission.customer.name.strip(),
                "email": submission.customer.email.strip().lower(),
            }
        )

        items = [
            QuoteItem(
                product_id=item.product_id,
                product_name=item.product_name.strip(),
                quantity=max(1, int(item.quantity)),
                unit_price=item.unit_price,
                customizations=item.customizations,
            )
            for item in submission.items
        ]

        log = self.log_operation("create_quote", email=customer.email)

        customer_id = await self.store.find_customer_id(customer.email)
        if customer_id is None:
            customer_id = await self.store.create_customer(customer)
            log.info("Novo cliente criado", customer_id=customer_id)
        else:
            log.info("Cliente existente encontrado", customer_id=customer_id)

        number = self.generate_number()
        quote_id = await self.store.insert_quote(
            customer_id=customer_id,
            number=number,
            notes=submission.notes,
            status=QuoteStatus.PENDING,
            items=items,
        )

        quote = await self.store.get_quote(quote_id)
        log.info(
            "Solicitação criada",
            quote_id=quote_id,
            number=number,
            items=len(items),
        )

        if self.notifier is not None:
            self.notifier.dispatch(customer, quote_number=number)

        return quote

    async def get_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        return await self.store.get_quote(quote_id)

    async def list_quotes(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = QUOTES_DEFAULT_LIMIT,
    ) -> QuotePage:
        """Lista solicitações, mais novas primeiro. status="all" não filtra."""
        page = max(1, page)
        limit = max(1, min(limit, self.settings.max_page_size))
        quote_status = None if not status or status == "all" else self._parse_status(status)

        quotes, total = await self.store.list_quotes(
            status=quote_status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return QuotePage(
            items=quotes,
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(total / limit),
                total_items=total,
                items_per_page=limit,
            ),
        )

    async def update_status(
        self,
        quote_id: RecordId,
        status: Union[QuoteStatus, str],
    ) -> Optional[QuoteRequest]:
        """
        Atualiza o status.

        Raises:
            QuoteValidationError: status fora de QuoteStatus (INVALID_STATUS)
        """
        new_status = self._parse_status(status)
        quote = await self.store.update_quote_status(quote_id, new_status)
        if quote is not None:
            self.logger.info("Status atualizado", quote_id=quote_id, status=new_status.value)
        return quote

    async def delete_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        quote = await self.store.delete_quote(quote_id)
        if quote is not None:
            self.logger.info("Solicitação removida", quote_id=quote_id)
        return quote

    async def dashboard(self) -> QuoteDashboard:
        """Totais por status e as solicitações mais recentes."""
        counts = await self.store.count_quotes_by_status()
        by_status = {status.value: counts.get(status.value, 0) for status in QuoteStatus}
        recent, _ = await self.store.list_quotes(
            status=None,
            offset=0,
            limit=DASHBOARD_RECENT_LIMIT,
        )
        return QuoteDashboard(
            total=sum(counts.values()),
            by_status=by_status,
            recent=recent,
        )

    @staticmethod
    def _parse_status(status: Union[QuoteStatus, str]) -> QuoteStatus:
        try:
            return QuoteStatus(status)
        except ValueError as e:
            raise QuoteValidationError(
                "Status inválido",
                code="INVALID_STATUS",
                field="status",
                value=status,
                cause=e,
            ) from e
