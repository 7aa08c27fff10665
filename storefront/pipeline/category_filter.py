"""
Filtro de categoria da vitrine.
Despacha o token para uma regra nomeada ou cai no filtro genérico.
"""

from typing import Optional, Sequence

from config.categories import (
    CATEGORY_FILTER_RULES,
    GENERIC_EXCLUDE_TERM,
    CategoryFilterRule,
)
from config.logging_config import LoggerMixin
from storefront.core.models import Product
from storefront.pipeline.text import normalize_text


class CategoryFilter(LoggerMixin):
    """
    Filtro de produtos por categoria nomeada.

    Regras nomeadas olham apenas o nome do produto. Tokens desconhecidos
    comparam com o campo category e excluem nomes com "porta".
    """

    def __init__(self, rules: Sequence[CategoryFilterRule] = CATEGORY_FILTER_RULES):
        self.rules = tuple(rules)
        self._dispatch = {normalize_text(rule.name): rule for rule in self.rules}

    def find_rule(self, token: str) -> Optional[CategoryFilterRule]:
        """Busca a regra pelo nome, ignorando caixa e acentos."""
        return self._dispatch.get(normalize_text(token.strip()))

    def filter(self, products: Sequence[Product], token: Optional[str]) -> list[Product]:
        """
        Aplica o filtro de categoria.

        Args:
            products: Produtos mapeados
            token: Nome da categoria (ou texto livre para o filtro genérico)

        Returns:
            Produtos que passam no filtro, na ordem original
        """
        if not token or not token.strip():
            return list(products)

        rule = self.find_rule(token)
        if rule is not None:
            result = [p for p in products if rule.matches_name(normalize_text(p.name))]
        else:
            result = self._generic(products, normalize_text(token.strip()))

        self.logger.debug(
            "Filtro de categoria aplicado",
            token=token,
            rule=rule.name if rule else "generic",
            matches=len(result),
        )
        return result

    @staticmethod
    def _generic(products: Sequence[Product], normalized_token: str) -> list[Product]:
        return [
            p
            for p in products
            if normalized_token in normalize_text(p.category.value)
            and GENERIC_EXCLUDE_TERM not in normalize_text(p.name)
        ]
