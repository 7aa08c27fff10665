"""
CatalogService: orquestrador do catálogo.
Busca registros no store, passa pelo pipeline e pagina o resultado.
"""

import math
from typing import Iterable, Optional

from config.logging_config import LoggerMixin
from config.settings import Settings, get_settings
from storefront.core.constants import PRODUCT_ID_PREFIX_PATTERN
from storefront.core.exceptions import StorefrontError
from storefront.core.models import (
    CategoryEntry,
    ListingQuery,
    Pagination,
    Product,
    ProductPage,
)
from storefront.pipeline import CatalogPipeline
from storefront.storage.base import BaseStore


class CatalogService(LoggerMixin):
    """
    Orquestrador do catálogo.

    Responsabilidades:
    - Listagem com busca, categoria, ordenação e paginação
    - Página de produto por id público
    - Destaques, vitrine inicial e categorias do fornecedor
    - Manutenção (desativação por título)
    """

    def __init__(
        self,
        store: BaseStore,
        pipeline: Optional[CatalogPipeline] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Inicializa o serviço.

        Args:
            store: Backend de dados
            pipeline: Pipeline de listagem (None = tabelas padrão)
            settings: Configurações (None = get_settings())
        """
        self.store = store
        self.pipeline = pipeline or CatalogPipeline()
        self.settings = settings or get_settings()

    async def list_products(self, query: Optional[ListingQuery] = None) -> ProductPage:
        """
        Lista produtos ativos.

        Todos os registros ativos são buscados e filtrados em memória;
        nenhum filtro é enviado ao banco.

        Args:
            query: Parâmetros de listagem

        Returns:
            ProductPage com itens e paginação
        """
        query = query or ListingQuery()
        limit = self._clamp_limit(query.limit)

        self.logger.info(
            "Listando produtos",
            search=query.search,
            category=query.category,
            sort=query.sort.value,
            page=query.page,
            limit=limit,
        )

        records = await self.store.fetch_active_records()
        products = self.pipeline.process(records, query)

        total = len(products)
        start = (query.page - 1) * limit
        items = products[start:start + limit]

        return ProductPage(
            items=items,
            pagination=Pagination(
                current_page=query.page,
                total_pages=math.ceil(total / limit),
                total_items=total,
                items_per_page=limit,
            ),
        )

    async def get_product(self, product_id: str) -> Optional[Product]:
        """
        Busca um produto pelo id público.

        Remove o prefixo (ecologic-, ecologic_, eco-, eco_) e tenta, em ordem:
        código do fornecedor, id numérico e título contendo o valor.
        Registros inativos também são retornados.
        """
        key = PRODUCT_ID_PREFIX_PATTERN.sub("", product_id.strip())
        if not key:
            return None

        record = await self.store.find_record_by_code(key)
        if record is None and key.isdigit():
            record = await self.store.find_record_by_id(int(key))
        if record is None:
            record = await self.store.find_record_by_title(key)

        if record is None:
            self.logger.info("Produto não encontrado", product_id=product_id)
            return None

        return self.pipeline.mapper.map_record(record)

    async def highlighted(self, limit: Optional[int] = None) -> list[Product]:
        """
        Produtos da tabela de destaques.
        Em caso de falha no store, usa os primeiros produtos da tabela.
        """
        limit = limit or self.settings.highlighted_limit
        try:
            records = await self.store.fetch_highlighted_records(limit)
        except StorefrontError as e:
            self.logger.warning(
                "Erro ao buscar destaques, usando primeiros produtos",
                error=str(e),
            )
            records = await self.store.fetch_records(limit)
        return self.pipeline.mapper.map_batch(records)

    async def featured_list(self, limit: Optional[int] = None) -> list[Product]:
        """Primeiros produtos da tabela, para a vitrine inicial."""
        records = await self.store.fetch_records(limit or self.settings.featured_limit)
        return self.pipeline.mapper.map_batch(records)

    async def list_categories(self) -> list[CategoryEntry]:
        """Categorias distintas do fornecedor, na ordem em que aparecem."""
        seen: dict[str, CategoryEntry] = {}
        for path in await self.store.fetch_category_paths():
            if not isinstance(path, str) or not path.strip():
                continue
            name = path.strip()
            if name not in seen:
                seen[name] = CategoryEntry(id="_".join(name.lower().split()), name=name)
        return list(seen.values())

    async def deactivate_by_title(self, fragments: Iterable[str]) -> dict[str, int]:
        """
        Desativa produtos cujo título contém cada fragmento.

        Returns:
            Quantidade desativada por fragmento
        """
        counts: dict[str, int] = {}
        for fragment in fragments:
            fragment = fragment.strip()
            if not fragment:
                continue
            counts[fragment] = await self.store.deactivate_by_title(fragment)
            self.logger.info(
                "Produtos desativados",
                fragment=fragment,
                count=counts[fragment],
            )
        return counts

    async def import_records(self, records: list[dict]) -> int:
        """Grava registros do fornecedor no store."""
        return await self.store.upsert_records(records)

    async def all_products(self, query: Optional[ListingQuery] = None) -> list[Product]:
        """Listagem completa sem paginação (exportação)."""
        records = await self.store.fetch_active_records()
        return self.pipeline.process(records, query)

    def _clamp_limit(self, limit: Optional[int]) -> int:
        """Sem limite (ou zero) usa o padrão; o resto fica entre 1 e o máximo."""
        if not limit:
            limit = self.settings.default_page_size
        return max(1, min(limit, self.settings.max_page_size))
