"""
Store Supabase (PostgREST).
Fala com o banco de produção pela API REST usando httpx.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Optional

import httpx

from storefront.core.exceptions import ConfigurationError, DataStoreError
from storefront.core.models import CustomerData, OutboxEntry, QuoteItem, QuoteRequest
from storefront.core.types import EmailStatus, QuoteStatus, StoreType
from storefront.storage.base import SUPPLIER_COLUMNS, BaseStore, RecordId


class SupabaseStore(BaseStore):
    """
    Store usando a API REST do Supabase.

    Cada chamada é uma única tentativa; qualquer falha de transporte ou
    resposta >= 400 vira DataStoreError.
    """

    # Limite padrão de linhas por resposta do PostgREST
    PAGE_SIZE = 1000

    def __init__(
        self,
        url: Optional[str],
        service_role_key: Optional[str],
        *,
        products_table: str = "ecologic_products_site",
        highlighted_table: str = "produtos_destaque",
        highlighted_fk: str = "produtos_destaque_id_produto_fkey",
        customers_table: str = "usuarios_clientes",
        quotes_table: str = "solicitacao_orcamentos",
        quote_items_table: str = "products_solicitacao",
        outbox_table: str = "email_outbox",
        timeout: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Inicializa o store.

        Args:
            url: URL do projeto Supabase
            service_role_key: Chave service-role
            timeout: Timeout das requisições em segundos
            client: Cliente httpx já configurado (testes)
        """
        if not url or not service_role_key:
            raise ConfigurationError(
                "SUPABASE_URL e SUPABASE_SERVICE_ROLE_KEY são obrigatórios",
                setting="supabase_url",
            )

        self.rest_url = f"{url.rstrip('/')}/rest/v1"
        self.products_table = products_table
        self.highlighted_table = highlighted_table
        self.highlighted_fk = highlighted_fk
        self.customers_table = customers_table
        self.quotes_table = quotes_table
        self.quote_items_table = quote_items_table
        self.outbox_table = outbox_table

        self._headers = {
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Content-Type": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def store_type(self) -> StoreType:
        return StoreType.SUPABASE

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        """Executa uma chamada REST e converte falhas em DataStoreError."""
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer

        try:
            response = await self._client.request(
                method,
                f"{self.rest_url}/{table}",
                params=params,
                json=json,
                headers=headers,
            )
        except httpx.HTTPError as e:
            self.logger.error("Falha de conexão com o Supabase", table=table, error=str(e))
            raise DataStoreError(
                "Falha de conexão com o Supabase",
                storage_type=self.store_type.value,
                table=table,
                cause=e,
            ) from e

        if response.status_code >= 400:
            self.logger.error(
                "Erro do Supabase",
                table=table,
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise DataStoreError(
                f"Erro do Supabase: {response.text[:200]}",
                storage_type=self.store_type.value,
                table=table,
                status_code=response.status_code,
            )

        return response

    async def _select(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        response = await self._request("GET", table, params=params)
        return response.json() if response.content else []

    async def _select_all(self, table: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Percorre todas as páginas do PostgREST."""
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            page = await self._select(
                table,
                {**params, "offset": offset, "limit": self.PAGE_SIZE},
            )
            rows.extend(page)
            if len(page) < self.PAGE_SIZE:
                return rows
            offset += self.PAGE_SIZE

    async def _select_first(self, table: str, params: dict[str, Any]) -> Optional[dict[str, Any]]:
        rows = await self._select(table, {**params, "limit": 1})
        return rows[0] if rows else None

    @staticmethod
    def _parse_total(response: httpx.Response, fallback: int) -> int:
        """Lê o total de Content-Range (ex: 0-9/42)."""
        content_range = response.headers.get("content-range", "")
        _, _, total = content_range.partition("/")
        return int(total) if total.isdigit() else fallback

    # =========================================================================
    # CATÁLOGO
    # =========================================================================

    async def fetch_active_records(self) -> list[dict[str, Any]]:
        records = await self._select_all(
            self.products_table,
            {"select": "*", "status_active": "eq.true", "order": "id.asc"},
        )
        self.logger.debug("Registros ativos carregados", count=len(records))
        return records

    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        return await self._select(
            self.products_table,
            {"select": "*", "order": "id.asc", "limit": limit},
        )

    async def find_record_by_code(self, code: str) -> Optional[dict[str, Any]]:
        return await self._select_first(
            self.products_table,
            {"select": "*", "codigo": f"eq.{code}"},
        )

    async def find_record_by_id(self, record_id: int) -> Optional[dict[str, Any]]:
        return await self._select_first(
            self.products_table,
            {"select": "*", "id": f"eq.{record_id}"},
        )

    async def find_record_by_title(self, fragment: str) -> Optional[dict[str, Any]]:
        return await self._select_first(
            self.products_table,
            {"select": "*", "titulo": f"ilike.*{fragment}*", "order": "id.asc"},
        )

    async def fetch_highlighted_records(self, limit: int) -> list[dict[str, Any]]:
        embed = f"{self.products_table}!{self.highlighted_fk}"
        rows = await self._select(
            self.highlighted_table,
            {
                "select": f"*,{embed}(*)",
                f"{self.products_table}.status_active": "eq.true",
                "limit": limit,
            },
        )
        # Filtro sobre recurso embutido deixa o produto nulo em vez de remover a linha
        return [row[self.products_table] for row in rows if row.get(self.products_table)]

    async def add_highlight(self, record_id: int) -> None:
        await self._request(
            "POST",
            self.highlighted_table,
            json={"id_produto": record_id},
            prefer="return=minimal",
        )

    async def fetch_category_paths(self) -> list[Optional[str]]:
        rows = await self._select_all(
            self.products_table,
            {"select": "categoria", "order": "id.asc"},
        )
        return [row.get("categoria") for row in rows]

    async def upsert_records(self, records: list[dict[str, Any]]) -> int:
        if not records:
            return 0

        body = [
            {col: record.get(col) for col in SUPPLIER_COLUMNS}
            | {"status_active": record.get("status_active", True) is not False}
            for record in records
        ]
        await self._request(
            "POST",
            self.products_table,
            params={"on_conflict": "codigo"},
            json=body,
            prefer="resolution=merge-duplicates,return=minimal",
        )
        self.logger.info("Registros do fornecedor gravados", count=len(records))
        return len(records)

    async def deactivate_by_title(self, fragment: str) -> int:
        response = await self._request(
            "PATCH",
            self.products_table,
            params={
                "titulo": f"ilike.*{fragment}*",
                "status_active": "eq.true",
                "select": "id",
            },
            json={"status_active": False},
            prefer="return=representation",
        )
        return len(response.json())

    # =========================================================================
    # CLIENTES E ORÇAMENTOS
    # =========================================================================

    async def find_customer_id(self, email: str) -> Optional[RecordId]:
        row = await self._select_first(
            self.customers_table,
            {"select": "id", "email": f"eq.{email}"},
        )
        return row["id"] if row else None

    async def create_customer(self, customer: CustomerData) -> RecordId:
        response = await self._request(
            "POST",
            self.customers_table,
            json={
                "nome": customer.name,
                "email": customer.email,
                "telefone": customer.phone,
                "empresa": customer.company,
                "cnpj": customer.cnpj,
            },
            prefer="return=representation",
        )
        return response.json()[0]["id"]

    async def insert_quote(
        self,
        customer_id: RecordId,
        number: str,
        notes: str,
        status: QuoteStatus,
        items: list[QuoteItem],
    ) -> RecordId:
        response = await self._request(
            "POST",
            self.quotes_table,
            json={
                "user_id": customer_id,
                "numero_solicitacao": number,
                "observacoes": notes,
                "status": status.value,
            },
            prefer="return=representation",
        )
        quote_id = response.json()[0]["solicitacao_id"]

        await self._request(
            "POST",
            self.quote_items_table,
            json=[
                {
                    "solicitacao_id": quote_id,
                    "product_id": item.product_id,
                    "produto_nome": item.product_name,
                    "quantidade": item.quantity,
                    "valor_unitario_estimado": item.unit_price,
                    "subtotal_estimado": item.subtotal,
                    "personalizacoes": item.customizations,
                }
                for item in items
            ],
            prefer="return=minimal",
        )
        return quote_id

    def _quote_select(self) -> str:
        return f"*,{self.quote_items_table}(*),{self.customers_table}(*)"

    def _embedded_to_quote(self, row: dict[str, Any]) -> QuoteRequest:
        return self._row_to_quote(
            row,
            row.get(self.quote_items_table) or [],
            row.get(self.customers_table),
        )

    async def get_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        row = await self._select_first(
            self.quotes_table,
            {"select": self._quote_select(), "solicitacao_id": f"eq.{quote_id}"},
        )
        return self._embedded_to_quote(row) if row else None

    async def list_quotes(
        self,
        status: Optional[QuoteStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[QuoteRequest], int]:
        params: dict[str, Any] = {
            "select": self._quote_select(),
            "order": "created_at.desc",
            "offset": offset,
            "limit": limit,
        }
        if status is not None:
            params["status"] = f"eq.{status.value}"

        response = await self._request("GET", self.quotes_table, params=params, prefer="count=exact")
        rows = response.json()
        quotes = [self._embedded_to_quote(row) for row in rows]
        return quotes, self._parse_total(response, len(quotes))

    async def count_quotes_by_status(self) -> dict[str, int]:
        rows = await self._select_all(self.quotes_table, {"select": "status"})
        return dict(Counter(row.get("status") for row in rows))

    async def update_quote_status(
        self,
        quote_id: RecordId,
        status: QuoteStatus,
    ) -> Optional[QuoteRequest]:
        response = await self._request(
            "PATCH",
            self.quotes_table,
            params={"solicitacao_id": f"eq.{quote_id}"},
            json={"status": status.value, "updated_at": datetime.now().isoformat()},
            prefer="return=representation",
        )
        if not response.json():
            return None
        return await self.get_quote(quote_id)

    async def delete_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        quote = await self.get_quote(quote_id)
        if quote is None:
            return None

        await self._request(
            "DELETE",
            self.quote_items_table,
            params={"solicitacao_id": f"eq.{quote_id}"},
        )
        await self._request(
            "DELETE",
            self.quotes_table,
            params={"solicitacao_id": f"eq.{quote_id}"},
        )
        return quote

    # =========================================================================
    # OUTBOX DE E-MAILS
    # =========================================================================

    async def insert_outbox(self, entry: OutboxEntry) -> OutboxEntry:
        response = await self._request(
            "POST",
            self.outbox_table,
            json={
                "recipient": entry.recipient,
                "subject": entry.subject,
                "template": entry.template,
                "payload": entry.model_dump(mode="json")["payload"],
                "status": entry.status.value,
            },
            prefer="return=representation",
        )
        return entry.model_copy(update={"id": response.json()[0]["id"]})

    async def update_outbox(
        self,
        entry_id: RecordId,
        status: EmailStatus,
        provider_response: Optional[dict[str, Any]] = None,
    ) -> None:
        await self._request(
            "PATCH",
            self.outbox_table,
            params={"id": f"eq.{entry_id}"},
            json={"status": status.value, "provider_response": provider_response},
            prefer="return=minimal",
        )

    async def list_outbox(
        self,
        recipient: Optional[str],
        status: Optional[EmailStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[OutboxEntry], int]:
        params: dict[str, Any] = {
            "select": "*",
            "order": "created_at.desc",
            "offset": offset,
            "limit": limit,
        }
        if recipient:
            params["recipient"] = f"ilike.*{recipient}*"
        if status is not None:
            params["status"] = f"eq.{status.value}"

        response = await self._request("GET", self.outbox_table, params=params, prefer="count=exact")
        entries = [self._row_to_outbox(row) for row in response.json()]
        return entries, self._parse_total(response, len(entries))
