"""
Store SQLite local.
Espelha as tabelas de produção para desenvolvimento e testes.
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import aiosqlite

from storefront.core.exceptions import DataStoreError
from storefront.core.models import CustomerData, OutboxEntry, QuoteItem, QuoteRequest
from storefront.core.types import EmailStatus, QuoteStatus, StoreType
from storefront.storage.base import SUPPLIER_COLUMNS, BaseStore, RecordId


class SQLiteStore(BaseStore):
    """
    Store usando SQLite.
    Mantém os mesmos nomes de tabela e coluna do banco de produção.
    """

    def __init__(
        self,
        db_path: Path,
        products_table: str = "ecologic_products_site",
        highlighted_table: str = "produtos_destaque",
        customers_table: str = "usuarios_clientes",
        quotes_table: str = "solicitacao_orcamentos",
        quote_items_table: str = "products_solicitacao",
        outbox_table: str = "email_outbox",
    ):
        """
        Inicializa o store SQLite.

        Args:
            db_path: Caminho do arquivo do banco
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.products_table = products_table
        self.highlighted_table = highlighted_table
        self.customers_table = customers_table
        self.quotes_table = quotes_table
        self.quote_items_table = quote_items_table
        self.outbox_table = outbox_table
        self._initialized = False

    @property
    def store_type(self) -> StoreType:
        return StoreType.SQLITE

    async def _ensure_initialized(self) -> None:
        """Garante que as tabelas existem."""
        if self._initialized:
            return

        try:
            async with aiosqlite.connect(self.db_path) as db:
                # Colunas sem tipo preservam o valor como veio do fornecedor
                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.products_table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        codigo TEXT UNIQUE,
                        titulo TEXT,
                        descricao TEXT,
                        categoria TEXT,
                        img_0 TEXT,
                        img_1 TEXT,
                        img_2 TEXT,
                        variacoes TEXT,
                        preco,
                        status TEXT,
                        promocao,
                        altura,
                        largura,
                        comprimento,
                        peso,
                        cor_web_principal TEXT,
                        status_active INTEGER NOT NULL DEFAULT 1
                    )
                """)

                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.highlighted_table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        id_produto INTEGER NOT NULL
                            REFERENCES {self.products_table}(id),
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """)

                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.customers_table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        nome TEXT NOT NULL,
                        email TEXT NOT NULL UNIQUE,
                        telefone TEXT,
                        empresa TEXT,
                        cnpj TEXT,
                        created_at TIMESTAMP NOT NULL
                    )
                """)

                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.quotes_table} (
                        solicitacao_id INTEGER PRIMARY KEY AUTOINCREMENT,
                        user_id INTEGER NOT NULL
                            REFERENCES {self.customers_table}(id),
                        numero_solicitacao TEXT NOT NULL UNIQUE,
                        observacoes TEXT,
                        status TEXT NOT NULL,
                        created_at TIMESTAMP NOT NULL,
                        updated_at TIMESTAMP
                    )
                """)

                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.quote_items_table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        solicitacao_id INTEGER NOT NULL
                            REFERENCES {self.quotes_table}(solicitacao_id),
                        product_id TEXT,
                        produto_nome TEXT NOT NULL,
                        quantidade INTEGER NOT NULL,
                        valor_unitario_estimado REAL NOT NULL DEFAULT 0,
                        subtotal_estimado REAL NOT NULL DEFAULT 0,
                        personalizacoes TEXT
                    )
                """)

                await db.execute(f"""
                    CREATE TABLE IF NOT EXISTS {self.outbox_table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        recipient TEXT NOT NULL,
                        subject TEXT NOT NULL,
                        template TEXT NOT NULL,
                        payload TEXT,
                        status TEXT NOT NULL,
                        provider_response TEXT,
                        created_at TIMESTAMP NOT NULL,
                        updated_at TIMESTAMP
                    )
                """)

                # Índices para queries frequentes
                await db.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_products_active
                    ON {self.products_table}(status_active)
                """)
                await db.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_quotes_status
                    ON {self.quotes_table}(status)
                """)
                await db.execute(f"""
                    CREATE INDEX IF NOT EXISTS idx_outbox_recipient
                    ON {self.outbox_table}(recipient)
                """)

                await db.commit()
        except aiosqlite.Error as e:
            raise DataStoreError(
                "Erro ao inicializar banco SQLite",
                storage_type=self.store_type.value,
                path=str(self.db_path),
                cause=e,
            ) from e

        self._initialized = True
        self.logger.debug("SQLite inicializado", db_path=str(self.db_path))

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Abre conexão convertendo falhas do driver em DataStoreError."""
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as e:
            self.logger.error("Erro no SQLite", error=str(e))
            raise DataStoreError(
                "Erro ao consultar banco SQLite",
                storage_type=self.store_type.value,
                path=str(self.db_path),
                cause=e,
            ) from e

    # =========================================================================
    # CATÁLOGO
    # =========================================================================

    async def fetch_active_records(self) -> list[dict[str, Any]]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT * FROM {self.products_table} WHERE status_active = 1 ORDER BY id"
            ) as cursor:
                records = [self._row_to_record(row) async for row in cursor]

        self.logger.debug("Registros ativos carregados", count=len(records))
        return records

    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT * FROM {self.products_table} ORDER BY id LIMIT ?",
                (limit,),
            ) as cursor:
                return [self._row_to_record(row) async for row in cursor]

    async def find_record_by_code(self, code: str) -> Optional[dict[str, Any]]:
        return await self._fetch_one(
            f"SELECT * FROM {self.products_table} WHERE codigo = ? LIMIT 1",
            (code,),
        )

    async def find_record_by_id(self, record_id: int) -> Optional[dict[str, Any]]:
        return await self._fetch_one(
            f"SELECT * FROM {self.products_table} WHERE id = ?",
            (record_id,),
        )

    async def find_record_by_title(self, fragment: str) -> Optional[dict[str, Any]]:
        # LOWER() do SQLite só cobre ASCII; compara em Python
        needle = fragment.lower()
        async with self._connect() as db:
            async with db.execute(
                f"SELECT * FROM {self.products_table} ORDER BY id"
            ) as cursor:
                async for row in cursor:
                    if needle in (row["titulo"] or "").lower():
                        return self._row_to_record(row)
        return None

    async def fetch_highlighted_records(self, limit: int) -> list[dict[str, Any]]:
        async with self._connect() as db:
            async with db.execute(
                f"""
                SELECT p.* FROM {self.highlighted_table} d
                JOIN {self.products_table} p ON p.id = d.id_produto
                WHERE p.status_active = 1
                ORDER BY d.id
                LIMIT ?
                """,
                (limit,),
            ) as cursor:
                return [self._row_to_record(row) async for row in cursor]

    async def add_highlight(self, record_id: int) -> None:
        async with self._connect() as db:
            await db.execute(
                f"INSERT INTO {self.highlighted_table} (id_produto) VALUES (?)",
                (record_id,),
            )
            await db.commit()

    async def fetch_category_paths(self) -> list[Optional[str]]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT categoria FROM {self.products_table} ORDER BY id"
            ) as cursor:
                return [row["categoria"] async for row in cursor]

    async def upsert_records(self, records: list[dict[str, Any]]) -> int:
        columns = ", ".join(SUPPLIER_COLUMNS)
        placeholders = ", ".join("?" for _ in SUPPLIER_COLUMNS)
        updates = ", ".join(f"{col} = excluded.{col}" for col in SUPPLIER_COLUMNS if col != "codigo")

        async with self._connect() as db:
            for record in records:
                await db.execute(
                    f"""
                    INSERT INTO {self.products_table} ({columns})
                    VALUES ({placeholders})
                    ON CONFLICT(codigo) DO UPDATE SET {updates}
                    """,
                    self._record_to_values(record),
                )
            await db.commit()

        self.logger.info(
            "Registros do fornecedor gravados",
            count=len(records),
            db_path=str(self.db_path),
        )
        return len(records)

    async def deactivate_by_title(self, fragment: str) -> int:
        needle = fragment.lower()
        async with self._connect() as db:
            async with db.execute(
                f"SELECT id, titulo FROM {self.products_table} WHERE status_active = 1"
            ) as cursor:
                ids = [row["id"] async for row in cursor if needle in (row["titulo"] or "").lower()]

            await db.executemany(
                f"UPDATE {self.products_table} SET status_active = 0 WHERE id = ?",
                [(record_id,) for record_id in ids],
            )
            await db.commit()

        return len(ids)

    async def _fetch_one(self, query: str, params: tuple) -> Optional[dict[str, Any]]:
        async with self._connect() as db:
            async with db.execute(query, params) as cursor:
                row = await cursor.fetchone()
        return self._row_to_record(row) if row else None

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> dict[str, Any]:
        """Converte row do SQLite no formato da tabela do fornecedor."""
        record = dict(row)
        variants = record.get("variacoes")
        if isinstance(variants, str):
            try:
                record["variacoes"] = json.loads(variants)
            except ValueError:
                record["variacoes"] = []
        record["status_active"] = bool(record.get("status_active"))
        return record

    @staticmethod
    def _record_to_values(record: dict[str, Any]) -> tuple:
        values = []
        for col in SUPPLIER_COLUMNS:
            value = record.get(col)
            if col == "variacoes" and value is not None and not isinstance(value, str):
                value = json.dumps(value, ensure_ascii=False)
            elif col == "status_active":
                value = 1 if value is None else int(bool(value))
            elif col == "codigo" and value is not None:
                value = str(value)
            values.append(value)
        return tuple(values)

    # =========================================================================
    # CLIENTES E ORÇAMENTOS
    # =========================================================================

    async def find_customer_id(self, email: str) -> Optional[RecordId]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT id FROM {self.customers_table} WHERE email = ?",
                (email,),
            ) as cursor:
                row = await cursor.fetchone()
        return row["id"] if row else None

    async def create_customer(self, customer: CustomerData) -> RecordId:
        async with self._connect() as db:
            cursor = await db.execute(
                f"""
                INSERT INTO {self.customers_table}
                (nome, email, telefone, empresa, cnpj, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    customer.name,
                    customer.email,
                    customer.phone,
                    customer.company,
                    customer.cnpj,
                    datetime.now().isoformat(),
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def insert_quote(
        self,
        customer_id: RecordId,
        number: str,
        notes: str,
        status: QuoteStatus,
        items: list[QuoteItem],
    ) -> RecordId:
        async with self._connect() as db:
            cursor = await db.execute(
                f"""
                INSERT INTO {self.quotes_table}
                (user_id, numero_solicitacao, observacoes, status, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (customer_id, number, notes, status.value, datetime.now().isoformat()),
            )
            quote_id = cursor.lastrowid

            await db.executemany(
                f"""
                INSERT INTO {self.quote_items_table}
                (solicitacao_id, product_id, produto_nome, quantidade,
                 valor_unitario_estimado, subtotal_estimado, personalizacoes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        quote_id,
                        item.product_id,
                        item.product_name,
                        item.quantity,
                        item.unit_price,
                        item.subtotal,
                        json.dumps(item.customizations, ensure_ascii=False),
                    )
                    for item in items
                ],
            )
            await db.commit()

        return quote_id

    async def get_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT * FROM {self.quotes_table} WHERE solicitacao_id = ?",
                (quote_id,),
            ) as cursor:
                row = await cursor.fetchone()
            if row is None:
                return None
            return await self._load_quote(db, dict(row))

    async def list_quotes(
        self,
        status: Optional[QuoteStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[QuoteRequest], int]:
        where = ""
        params: list[Any] = []
        if status is not None:
            where = " WHERE status = ?"
            params.append(status.value)

        async with self._connect() as db:
            async with db.execute(
                f"SELECT COUNT(*) AS total FROM {self.quotes_table}{where}",
                params,
            ) as cursor:
                total = (await cursor.fetchone())["total"]

            async with db.execute(
                f"""
                SELECT * FROM {self.quotes_table}{where}
                ORDER BY created_at DESC, solicitacao_id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ) as cursor:
                rows = [dict(row) async for row in cursor]

            quotes = [await self._load_quote(db, row) for row in rows]

        return quotes, total

    async def count_quotes_by_status(self) -> dict[str, int]:
        async with self._connect() as db:
            async with db.execute(
                f"SELECT status, COUNT(*) AS total FROM {self.quotes_table} GROUP BY status"
            ) as cursor:
                return {row["status"]: row["total"] async for row in cursor}

    async def update_quote_status(
        self,
        quote_id: RecordId,
        status: QuoteStatus,
    ) -> Optional[QuoteRequest]:
        async with self._connect() as db:
            cursor = await db.execute(
                f"""
                UPDATE {self.quotes_table}
                SET status = ?, updated_at = ?
                WHERE solicitacao_id = ?
                """,
                (status.value, datetime.now().isoformat(), quote_id),
            )
            await db.commit()
            if cursor.rowcount == 0:
                return None

        return await self.get_quote(quote_id)

    async def delete_quote(self, quote_id: RecordId) -> Optional[QuoteRequest]:
        quote = await self.get_quote(quote_id)
        if quote is None:
            return None

        async with self._connect() as db:
            await db.execute(
                f"DELETE FROM {self.quote_items_table} WHERE solicitacao_id = ?",
                (quote_id,),
            )
            await db.execute(
                f"DELETE FROM {self.quotes_table} WHERE solicitacao_id = ?",
                (quote_id,),
            )
            await db.commit()

        return quote

    async def _load_quote(
        self,
        db: aiosqlite.Connection,
        quote_row: dict[str, Any],
    ) -> QuoteRequest:
        """Carrega itens e cliente de uma solicitação."""
        async with db.execute(
            f"SELECT * FROM {self.quote_items_table} WHERE solicitacao_id = ? ORDER BY id",
            (quote_row["solicitacao_id"],),
        ) as cursor:
            item_rows = [dict(row) async for row in cursor]

        async with db.execute(
            f"SELECT * FROM {self.customers_table} WHERE id = ?",
            (quote_row["user_id"],),
        ) as cursor:
            customer_row = await cursor.fetchone()

        return self._row_to_quote(
            quote_row,
            item_rows,
            dict(customer_row) if customer_row else None,
        )

    # =========================================================================
    # OUTBOX DE E-MAILS
    # =========================================================================

    async def insert_outbox(self, entry: OutboxEntry) -> OutboxEntry:
        async with self._connect() as db:
            cursor = await db.execute(
                f"""
                INSERT INTO {self.outbox_table}
                (recipient, subject, template, payload, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.recipient,
                    entry.subject,
                    entry.template,
                    json.dumps(entry.payload, ensure_ascii=False, default=str),
                    entry.status.value,
                    entry.created_at.isoformat(),
                ),
            )
            await db.commit()
            entry_id = cursor.lastrowid

        return entry.model_copy(update={"id": entry_id})

    async def update_outbox(
        self,
        entry_id: RecordId,
        status: EmailStatus,
        provider_response: Optional[dict[str, Any]] = None,
    ) -> None:
        async with self._connect() as db:
            await db.execute(
                f"""
                UPDATE {self.outbox_table}
                SET status = ?, provider_response = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    status.value,
                    json.dumps(provider_response, ensure_ascii=False) if provider_response else None,
                    datetime.now().isoformat(),
                    entry_id,
                ),
            )
            await db.commit()

    async def list_outbox(
        self,
        recipient: Optional[str],
        status: Optional[EmailStatus],
        offset: int,
        limit: int,
    ) -> tuple[list[OutboxEntry], int]:
        conditions = []
        params: list[Any] = []
        if recipient:
            conditions.append("LOWER(recipient) LIKE ?")
            params.append(f"%{recipient.lower()}%")
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""

        async with self._connect() as db:
            async with db.execute(
                f"SELECT COUNT(*) AS total FROM {self.outbox_table}{where}",
                params,
            ) as cursor:
                total = (await cursor.fetchone())["total"]

            async with db.execute(
                f"""
                SELECT * FROM {self.outbox_table}{where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            ) as cursor:
                entries = [self._row_to_outbox(dict(row)) async for row in cursor]

        return entries, total
