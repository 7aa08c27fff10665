"""
Tabelas fixas de categorização do catálogo.
Define as regras de mapeamento da categoria do fornecedor, as palavras-chave
de papelaria e os filtros nomeados usados na vitrine.
"""

from dataclasses import dataclass, field
from typing import Final

from storefront.core.types import Category


@dataclass(frozen=True)
class CategoryPathRule:
    """Regra da etapa A: termos procurados no caminho de categoria do fornecedor."""

    terms: tuple[str, ...]
    category: Category

    def matches(self, category_path: str) -> bool:
        """Verifica se algum termo aparece no caminho (já em minúsculas)."""
        return any(term in category_path for term in self.terms)


@dataclass(frozen=True)
class CategoryFilterRule:
    """
    Filtro nomeado da vitrine.

    Os termos são comparados com o nome normalizado do produto (sem acentos,
    minúsculo). Um produto passa se contém algum termo de inclusão e nenhum
    termo de exclusão.
    """

    name: str
    include: tuple[str, ...]
    exclude: tuple[str, ...] = ("porta",)

    def matches_name(self, normalized_name: str) -> bool:
        """Aplica inclusão e exclusão sobre o nome normalizado."""
        if not any(term in normalized_name for term in self.include):
            return False
        return not any(term in normalized_name for term in self.exclude)


@dataclass(frozen=True)
class ClassifierTables:
    """Conjunto de tabelas injetado no classificador."""

    path_rules: tuple[CategoryPathRule, ...]
    office_keywords: tuple[str, ...]
    final_categories: frozenset[Category] = field(
        default_factory=lambda: frozenset({Category.PAPELARIA, Category.CASA_ESCRITORIO})
    )
    default: Category = Category.ECOLOGICOS


# =============================================================================
# ETAPA A: CAMINHO DE CATEGORIA DO FORNECEDOR (primeira regra que casar vence)
# =============================================================================

CATEGORY_PATH_RULES: Final[tuple[CategoryPathRule, ...]] = (
    CategoryPathRule(
        terms=("canetas", "escritório", "escritorio", "blocos", "cadernos", "anotações"),
        category=Category.PAPELARIA,
    ),
    CategoryPathRule(
        terms=("bolsas", "mochilas", "sacolas", "nécessaire"),
        category=Category.ACESSORIOS,
    ),
    CategoryPathRule(
        terms=("canecas", "garrafas", "copos", "xícaras"),
        category=Category.CASA_ESCRITORIO,
    ),
    CategoryPathRule(
        terms=("malas", "maletas"),
        category=Category.TEXTIL,
    ),
    CategoryPathRule(
        terms=("chaveiros", "diversos"),
        category=Category.ACESSORIOS,
    ),
)


# =============================================================================
# ETAPA B: PALAVRAS-CHAVE DE ESCRITÓRIO E PAPELARIA
# =============================================================================

OFFICE_KEYWORDS: Final[tuple[str, ...]] = (
    "caneta", "canetas", "pen", "pens",
    "bloco", "blocos", "notepad", "notepads",
    "caderno", "cadernos", "notebook", "notebooks",
    "agenda", "agendas", "planner", "planners",
    "lápis", "lapis", "pencil", "pencils",
    "adesivo", "adesivos", "sticker", "stickers",
    "papel", "papeis", "paper",
    "escritório", "escritorio", "office",
    "papelaria", "stationery",
    "marca-texto", "marcador", "highlighter",
    "régua", "ruler",
    "borracha", "eraser",
    "grampeador", "stapler",
    "clips", "clipe",
    "post-it", "sticky notes",
)

DEFAULT_CLASSIFIER_TABLES: Final[ClassifierTables] = ClassifierTables(
    path_rules=CATEGORY_PATH_RULES,
    office_keywords=OFFICE_KEYWORDS,
)


# =============================================================================
# FILTROS NOMEADOS DA VITRINE (termos já normalizados)
# =============================================================================

CATEGORY_FILTER_RULES: Final[tuple[CategoryFilterRule, ...]] = (
    CategoryFilterRule("Agenda", ("agenda",)),
    CategoryFilterRule("Blocos e Cadernetas", ("bloco", "caderno", "caderneta")),
    CategoryFilterRule("Bolsas", ("bolsa",), exclude=("porta", "termica", "thermal")),
    CategoryFilterRule("Bolsas Térmicas", ("termica",)),
    CategoryFilterRule("Canecas", ("caneca",)),
    CategoryFilterRule("Canetas", ("caneta",)),
    CategoryFilterRule("Canudos", ("canudo",)),
    CategoryFilterRule("Canivetes", ("canivete",)),
    CategoryFilterRule("Chaveiros", ("chaveiro",)),
    CategoryFilterRule("Copos", ("copo",)),
    CategoryFilterRule("Leques", ("leque",)),
    CategoryFilterRule(
        "Linha PET",
        ("tigela para pet retratil", "tigela pet", "pet´s", "bebedouro pet", "pet`s"),
    ),
    CategoryFilterRule("Nécessaires", ("necessaire",)),
    CategoryFilterRule(
        "Porta-Cartão e Carteira",
        (
            "porta-cartao",
            "porta cartao",
            "carteira",
            "documento",
            "identidade",
            "porta documento",
            "porta identidade",
        ),
        exclude=(),
    ),
    CategoryFilterRule("Sacochilas", ("sacochila",)),
    CategoryFilterRule("Sacolas", ("sacola", "ecobag")),
    CategoryFilterRule(
        "Squeezes e Garrafas",
        ("squeeze", "garrafa"),
        exclude=("porta", "abridor de garrafa", "garrafa bebedouro"),
    ),
    CategoryFilterRule("Tapetes", ("tapete",)),
    CategoryFilterRule(
        "Cozinha",
        ("tabua", "abridor", "panela", "marmita", "tempero", "talher"),
        exclude=("porta", "suporte", "kit tabua"),
    ),
    CategoryFilterRule("Eletrônicos", ("relogio", "pen", "som", "carregador")),
    CategoryFilterRule("Escritório", ("agenda", "pasta", "envelope")),
    CategoryFilterRule("Estojos", ("estojo", "embalagem em kraft")),
    CategoryFilterRule("Moda", ("viseira", "chapeu", "camisa", "camiseta", "roupa")),
)

# Termo que exclui produtos no filtro genérico
GENERIC_EXCLUDE_TERM: Final[str] = "porta"

# Tokens de categoria que na listagem casam nome OU descrição
LISTING_TEXT_CATEGORIES: Final[dict[str, str]] = {
    "canetas": "caneta",
    "canecas": "caneca",
}
