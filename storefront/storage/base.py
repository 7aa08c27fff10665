"""
Classe base abstrata para os stores de dados.
Define a interface comum do catálogo, dos orçamentos e da outbox de e-mails.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Union

from config.logging_config import LoggerMixin
from storefront.core.models import (
    CustomerData,
    OutboxEntry,
    QuoteItem,
    QuoteRequest,
)
from storefront.core.types import EmailStatus, QuoteStatus, StoreType

RecordId = Union[int, str]

# Colunas do fornecedor gravadas na importação (id é gerado pelo banco)
SUPPLIER_COLUMNS: tuple[str, ...] = (
    "codigo",
    "titulo",
    "descricao",
    "categoria",
    "img_0",
    "img_1",
    "img_2",
    "variacoes",
    "preco",
    "status",
    "promocao",
    "altura",
    "largura",
    "comprimento",
    "peso",
    "cor_web_principal",
    "status_active",
)


class BaseStore(ABC, LoggerMixin):
    """
    Classe base abstrata para backends de dados.

    O catálogo devolve linhas brutas no formato do fornecedor; o mapeamento
    para Product acontece sempre no pipeline, nunca no store.
    """

    @property
    @abstractmethod
    def store_type(self) -> StoreType:
        """Retorna o tipo de store."""
        pass

    async def close(self) -> None:
        """Libera recursos do backend."""
        return None

    async def __aenter__(self) -> "BaseStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # =========================================================================
    # CATÁLOGO
    # =========================================================================

    @abstractmethod
    async def fetch_active_records(self) -> list[dict[str, Any]]:
        """Retorna todas as linhas com status_active verdadeiro."""
        pass

    @abstractmethod
    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        """Retorna as primeiras linhas da tabela, sem filtro."""
        pass

    @abstractmethod
    async def find_record_by_code(self, code: str) -> Optional[dict[str, Any]]:
        """Busca linha pelo código do fornecedor."""
        pass

    @abstractmethod
    async def find_record_by_id(self, record_id: int) -> Optional[dict[str, Any]]:
        """Busca linha pelo id numérico do banco."""
        pass

    @abstractmethod
    async def find_record_by_title(self, fragment: str) -> Optional[dict[str, Any]]:
        """Busca a primeira linha cujo título contém o fragmento (sem caixa)."""
        pass

    @abstractmethod
    async def fetch_highlighted_records(self, limit: int) -> list[dict[str, Any]]:
        """Retorna linhas ativas referenciadas pela tabela de destaques."""
        pass

    @abstractmethod
    async def add_highlight(self, record_id: int) -> None:
        """Marca um produto como destaque."""
        pass

    @abstractmethod
    async def fetch_category_paths(self) -> list[Optional[str]]:
        """Retorna a coluna categoria de todas as linhas, na ordem da tabela."""
        pass

    @abstractmethod
    async def upsert_records(self, records: list[dict[str, Any]]) -> int:
        """
        Insere ou atualiza linhas do fornecedor pelo código.

        Returns:
            Quantidade de linhas gravadas
        """
        pass

    @abstractmethod
    async def deactivate_by_title(self, fragment: str) -> int:
        """
        Desativa linhas ativas cujo título contém o fragmento.

        Returns:
            Quantidade de linhas desativadas
        """
        pass

    # =========================================================================
    # CLIENTES E ORÇAMENTOS
    # =========================================================================

    @abstractmethod
    async def find_customer_id(self, email: str) -> Optional[RecordId]:
        """Busca cliente pelo e-mail já normalizado."""
        pass

    @abstractmethod
    async def create_customer(self, customer: CustomerData) -> RecordId:
        """Cria cliente e retorna seu id."""
        pass

    @abstractmethod
    async def insert_quote(
        self,
        customer_id: RecordId,
        number: str,
        notes: str,
        status: QuoteStatus,
        items: list[QuoteItem],
    ) -> RecordId:
        """Grava solicitação e itens; retorna o id da solicitação."""
        pass

    @abstractmethod
    async def get_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        pass

    @abstractmethod
    async def list_quotes(
        self,
        status: Optional[QuoteStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[QuoteRequest], int]:
        """
        Lista solicitações da mais nova para a mais antiga.

        Returns:
            (página de solicitações, total sem paginação)
        """
        pass

    @abstractmethod
    async def count_quotes_by_status(self) -> dict[str, int]:
        pass

    @abstractmethod
    async def update_quote_status(
        self,
        quote_id: RecordId,
        status: QuoteStatus,
    ) -> Optional[QuoteRequest]:
        pass

    @abstractmethod
    async def delete_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        """Remove itens e depois a solicitação; retorna o que foi removido."""
        pass

    # =========================================================================
    # OUTBOX DE E-MAILS
    # =========================================================================

    @abstractmethod
    async def insert_outbox(self, entry: OutboxEntry) -> OutboxEntry:
        """Grava registro na outbox e devolve com id preenchido."""
        pass

    @abstractmethod
    async def update_outbox(
        self,
        entry_id: RecordId,
        status: EmailStatus,
        provider_response: Optional[dict[str, Any]] = None,
    ) -> None:
        pass

    @abstractmethod
    async def list_outbox(
        self,
        recipient: Optional[str],
        status: Optional[EmailStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[OutboxEntry], int]:
        pass

    # =========================================================================
    # CONVERSÃO DE LINHAS
    # =========================================================================

    @staticmethod
    def _row_to_quote(
        quote_row: dict[str, Any],
        item_rows: list[dict[str, Any]],
        customer_row: Optional[dict[str, Any]] = None,
    ) -> QuoteRequest:
        """Converte linhas das tabelas de orçamento em QuoteRequest."""
        customer_row = customer_row or {}

        items = [
            QuoteItem(
                id=row.get("id"),
                product_id=_optional_text(row.get("product_id")),
                product_name=row.get("produto_nome") or "Produto",
                quantity=row.get("quantidade") or 1,
                unit_price=row.get("valor_unitario_estimado") or 0,
                customizations=_load_json(row.get("personalizacoes")),
            )
            for row in item_rows
        ]

        return QuoteRequest(
            id=quote_row["solicitacao_id"],
            number=quote_row.get("numero_solicitacao") or "",
            customer=CustomerData(
                name=customer_row.get("nome"),
                email=customer_row.get("email"),
                phone=customer_row.get("telefone"),
                company=customer_row.get("empresa"),
                cnpj=customer_row.get("cnpj"),
            ),
            items=items,
            notes=quote_row.get("observacoes") or "",
            status=QuoteStatus(quote_row.get("status") or QuoteStatus.PENDING.value),
            created_at=_parse_timestamp(quote_row.get("created_at")) or datetime.now(),
            updated_at=_parse_timestamp(quote_row.get("updated_at")),
        )

    @staticmethod
    def _row_to_outbox(row: dict[str, Any]) -> OutboxEntry:
        """Converte linha da outbox em OutboxEntry."""
        return OutboxEntry(
            id=row.get("id"),
            recipient=row["recipient"],
            subject=row["subject"],
            template=row["template"],
            payload=_load_json(row.get("payload")),
            status=EmailStatus(row.get("status") or EmailStatus.QUEUED.value),
            provider_response=_load_json(row.get("provider_response")) or None,
            created_at=_parse_timestamp(row.get("created_at")) or datetime.now(),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )


def _load_json(value: Any) -> dict[str, Any]:
    """Aceita dict já decodificado ou texto JSON."""
    if not value:
        return {}
    if isinstance(value, dict):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        return {}
    return decoded if isinstance(decoded, dict) else {}


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Converte timestamp ISO (com ou sem Z) em datetime."""
    if isinstance(value, datetime):
        return value
    if value:
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            pass
    return None
