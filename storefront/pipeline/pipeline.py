"""
Pipeline de listagem completo.
Orquestra mapper, ranker e filtro de categoria para montar a listagem.
"""

from typing import Iterable, Optional, Sequence

from config.categories import LISTING_TEXT_CATEGORIES
from config.logging_config import LoggerMixin
from storefront.core.models import ListingQuery, Product
from storefront.core.types import SortOption
from storefront.pipeline.category_filter import CategoryFilter
from storefront.pipeline.mapper import RawInput, RecordMapper
from storefront.pipeline.ranker import SearchRanker
from storefront.pipeline.text import normalize_text


class CatalogPipeline(LoggerMixin):
    """
    Pipeline de listagem do catálogo.
    Fluxo: registros brutos -> Product -> busca -> categoria -> ordenação
    """

    def __init__(
        self,
        mapper: Optional[RecordMapper] = None,
        ranker: Optional[SearchRanker] = None,
        category_filter: Optional[CategoryFilter] = None,
    ):
        """Inicializa o pipeline com seus componentes."""
        self.mapper = mapper or RecordMapper()
        self.ranker = ranker or SearchRanker()
        self.category_filter = category_filter or CategoryFilter()

    def process(
        self,
        raws: Iterable[RawInput],
        query: Optional[ListingQuery] = None,
    ) -> list[Product]:
        """
        Mapeia registros brutos e aplica a listagem.

        Args:
            raws: Registros ativos do fornecedor
            query: Parâmetros de listagem (None = sem filtro, name_asc)

        Returns:
            Produtos filtrados e ordenados
        """
        products = self.mapper.map_batch(raws)
        return self.apply_listing(products, query or ListingQuery())

    def apply_listing(
        self,
        products: Sequence[Product],
        query: ListingQuery,
    ) -> list[Product]:
        """Aplica busca, filtro de categoria e ordenação, nessa ordem."""
        result = list(products)
        total = len(result)

        # Etapa 1: Busca por relevância
        if query.has_search:
            result = self.ranker.rank(result, query.search)

        # Etapa 2: Filtro de categoria
        if query.has_category:
            result = self.filter_category(result, query.category)

        # Etapa 3: Ordenação
        result = self.sort(result, query.sort)

        self.logger.info(
            "Listagem aplicada",
            total=total,
            returned=len(result),
            search=query.search,
            category=query.category,
            sort=query.sort.value,
        )
        return result

    def filter_category(self, products: Sequence[Product], token: str) -> list[Product]:
        """
        Filtro de categoria da listagem.

        "canetas" e "canecas" casam nome OU descrição; os demais tokens vão
        para o CategoryFilter.
        """
        term = LISTING_TEXT_CATEGORIES.get(normalize_text(token.strip()))
        if term is None:
            return self.category_filter.filter(products, token)

        return [
            p
            for p in products
            if term in normalize_text(p.name) or term in normalize_text(p.description)
        ]

    @staticmethod
    def sort(products: Sequence[Product], sort: SortOption) -> list[Product]:
        """Ordena por nome ou categoria; a ordenação é estável."""
        if sort in (SortOption.CATEGORY_ASC, SortOption.CATEGORY_DESC):
            return sorted(products, key=lambda p: p.category.value, reverse=sort.descending)
        return sorted(
            products,
            key=lambda p: (normalize_text(p.name), p.name),
            reverse=sort.descending,
        )
