"""
Classificador de categoria em duas etapas.

Etapa A: regras de substring sobre o caminho de categoria do fornecedor.
Etapa B: palavras-chave de papelaria no título e descrição, aplicada apenas
quando a etapa A não produziu uma categoria final.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from config.categories import DEFAULT_CLASSIFIER_TABLES, ClassifierTables
from config.logging_config import LoggerMixin
from storefront.core.models import RawSupplierRecord
from storefront.core.types import Category


@dataclass(frozen=True)
class CategoryDecision:
    """Decisão explícita das duas etapas de classificação."""

    stage_a: Category
    stage_b_eligible: bool
    matched_keyword: Optional[str] = None

    @property
    def category(self) -> Category:
        """Categoria final."""
        if self.stage_b_eligible and self.matched_keyword is not None:
            return Category.PAPELARIA
        return self.stage_a

    @property
    def overridden(self) -> bool:
        return self.category != self.stage_a


class CategoryClassifier(LoggerMixin):
    """Classificador determinístico sobre tabelas fixas."""

    def __init__(self, tables: ClassifierTables = DEFAULT_CLASSIFIER_TABLES):
        self.tables = tables

    def classify(self, raw: Union[RawSupplierRecord, dict[str, Any]]) -> Category:
        """Retorna apenas a categoria final."""
        return self.decide(raw).category

    def decide(self, raw: Union[RawSupplierRecord, dict[str, Any]]) -> CategoryDecision:
        """
        Executa as duas etapas e retorna a decisão completa.

        Args:
            raw: Registro do fornecedor

        Returns:
            CategoryDecision com resultado de cada etapa
        """
        if not isinstance(raw, RawSupplierRecord):
            raw = RawSupplierRecord.model_validate(raw)

        stage_a = self.stage_a(raw.category_path)
        eligible = stage_a not in self.tables.final_categories

        keyword = None
        if eligible:
            keyword = self.find_office_keyword(raw.title, raw.description)

        decision = CategoryDecision(
            stage_a=stage_a,
            stage_b_eligible=eligible,
            matched_keyword=keyword,
        )

        if decision.overridden:
            self.logger.debug(
                "Categoria reclassificada por palavra-chave",
                stage_a=stage_a.value,
                keyword=keyword,
            )

        return decision

    def stage_a(self, category_path: Optional[str]) -> Category:
        """Primeira regra que casar com o caminho vence."""
        if not category_path:
            return self.tables.default

        path = category_path.lower()
        for rule in self.tables.path_rules:
            if rule.matches(path):
                return rule.category
        return self.tables.default

    def find_office_keyword(
        self,
        title: Optional[str],
        description: Optional[str],
    ) -> Optional[str]:
        """Retorna a primeira palavra-chave de papelaria encontrada, se houver."""
        text = f"{title or ''} {description or ''}".lower()
        for keyword in self.tables.office_keywords:
            if keyword in text:
                return keyword
        return None
