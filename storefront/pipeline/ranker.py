"""
Ranking de busca por relevância.
Pontuação aditiva sobre nome normalizado e códigos do fornecedor.
"""

from typing import Optional, Sequence

from config.logging_config import LoggerMixin
from storefront.core.constants import (
    BAG_IRRELEVANT_TERMS,
    BAG_QUERIES,
    BAG_RELEVANT_TERMS,
    DEFAULT_SEARCH_WEIGHTS,
    SearchWeights,
)
from storefront.core.models import Product, ScoredProduct
from storefront.pipeline.text import normalize_text


class SearchRanker(LoggerMixin):
    """
    Ranker de produtos por termo livre.

    Regras (todas avaliadas, somadas):
    - nome contém a busca inteira
    - nome contém cada palavra da busca
    - código/referência igual à busca (sem normalizar)
    - código/referência contém a busca
    - nome começa com a busca
    - ajuste de relevância para "bolsa"/"bolsas"
    """

    def __init__(self, weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS):
        self.weights = weights

    def rank(self, products: Sequence[Product], query: Optional[str]) -> list[Product]:
        """
        Filtra e ordena produtos pela relevância.

        Args:
            products: Produtos já mapeados
            query: Termo de busca

        Returns:
            Produtos com pontuação positiva, da maior para a menor.
            Empates mantêm a ordem de entrada.
        """
        return [scored.product for scored in self.rank_with_scores(products, query)]

    def rank_with_scores(
        self,
        products: Sequence[Product],
        query: Optional[str],
    ) -> list[ScoredProduct]:
        """Como rank(), mas mantém a pontuação de cada produto."""
        if not query or not query.strip():
            return []

        scored = []
        for product in products:
            score = self.score(product, query)
            if score > 0:
                scored.append(ScoredProduct(product=product, score=score))

        # sorted() é estável
        ranked = sorted(scored, key=lambda item: item.score, reverse=True)

        self.logger.debug(
            "Busca ranqueada",
            query=query,
            candidates=len(products),
            matches=len(ranked),
        )
        return ranked

    def score(self, product: Product, query: str) -> int:
        """Calcula a pontuação de um produto para a busca."""
        raw_query = query.strip()
        if not raw_query:
            return 0

        w = self.weights
        name = normalize_text(product.name)
        normalized_query = normalize_text(raw_query)
        words = normalized_query.split()

        score = 0

        if normalized_query in name:
            score += w.name_contains_query

        for word in words:
            if word in name:
                score += w.name_contains_word

        code = product.supplier_code
        reference = product.reference

        if code is not None and code == raw_query:
            score += w.code_exact
        if reference is not None and reference == raw_query:
            score += w.reference_exact
        if code is not None and raw_query in code:
            score += w.code_contains
        if reference is not None and raw_query in reference:
            score += w.reference_contains

        if name.startswith(normalized_query):
            score += w.name_starts_with_query

        if raw_query.lower() in BAG_QUERIES:
            if any(term in name for term in BAG_IRRELEVANT_TERMS):
                score += w.irrelevant_penalty
            if any(term in name for term in BAG_RELEVANT_TERMS):
                score += w.relevant_bonus

        return score
