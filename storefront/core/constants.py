"""
Constantes de mapeamento, busca e orçamentos.
"""

import re
from dataclasses import dataclass
from typing import Final

# =============================================================================
# MAPEAMENTO DE REGISTROS DO FORNECEDOR
# =============================================================================

ID_PREFIX: Final[str] = "ecologic-"
UNKNOWN_ID: Final[str] = "unknown"
DEFAULT_PRODUCT_NAME: Final[str] = "Produto Ecológico"
DEFAULT_DESCRIPTION: Final[str] = ""

# Status do fornecedor que indicam produto fora de estoque
UNAVAILABLE_STATUSES: Final[frozenset[str]] = frozenset({"indisponivel", "esgotado"})

# Prefixos aceitos no id público ao buscar um produto
PRODUCT_ID_PREFIX_PATTERN: Final[re.Pattern] = re.compile(r"^(?:ecologic|eco)[-_]", re.IGNORECASE)

# Leading number de uma string (comportamento de parseFloat)
LEADING_FLOAT_PATTERN: Final[re.Pattern] = re.compile(
    r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)


# =============================================================================
# BUSCA POR RELEVÂNCIA
# =============================================================================

@dataclass(frozen=True)
class SearchWeights:
    """Pesos aditivos do ranking de busca."""

    name_contains_query: int = 100
    name_contains_word: int = 20
    code_exact: int = 150
    reference_exact: int = 150
    code_contains: int = 80
    reference_contains: int = 80
    name_starts_with_query: int = 50
    irrelevant_penalty: int = -30
    relevant_bonus: int = 30


DEFAULT_SEARCH_WEIGHTS: Final[SearchWeights] = SearchWeights()

# Buscas que ativam o ajuste de relevância para bolsas
BAG_QUERIES: Final[frozenset[str]] = frozenset({"bolsa", "bolsas"})

# Termos normalizados (sem acento)
BAG_IRRELEVANT_TERMS: Final[tuple[str, ...]] = (
    "caneta", "lapis", "agenda", "caderno", "bloco", "adesivo", "alicate", "ferramenta",
)
BAG_RELEVANT_TERMS: Final[tuple[str, ...]] = (
    "bolsa", "sacola", "mochila", "necessaire", "ecobag", "bag",
)

# Token de categoria que desliga o filtro
ALL_CATEGORIES: Final[str] = "all"


# =============================================================================
# ORÇAMENTOS
# =============================================================================

EMAIL_PATTERN: Final[re.Pattern] = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

QUOTE_SUFFIX_LENGTH: Final[int] = 6
QUOTE_SUFFIX_ALPHABET: Final[str] = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MIN_CUSTOMER_NAME_LENGTH: Final[int] = 2
DASHBOARD_RECENT_LIMIT: Final[int] = 5


# =============================================================================
# E-MAIL
# =============================================================================

CONFIRMATION_SUBJECT: Final[str] = "RECEBEMOS SUA SOLICITAÇÃO DE ORÇAMENTO - Natureza Brindes"
CONFIRMATION_TEMPLATE: Final[str] = "quote_confirmation"
CONFIRMATION_TAG: Final[str] = "quote_confirmation"
CONFIRMATION_TEST_TAG: Final[str] = "quote_confirmation_test"
