"""
Tipos customizados e enumerações do sistema.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints


# ENUMERAÇÕES

class Category(str, Enum):
    """Categorias fixas da vitrine."""

    PAPELARIA = "papelaria"
    ACESSORIOS = "acessorios"
    CASA_ESCRITORIO = "casa-escritorio"
    TEXTIL = "textil"
    ECOLOGICOS = "ecologicos"


class SortOption(str, Enum):
    """Ordenações aceitas na listagem."""

    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    CATEGORY_ASC = "category_asc"
    CATEGORY_DESC = "category_desc"

    @classmethod
    def from_text(cls, text: str | None) -> "SortOption":
        """Converte texto livre, caindo em name_asc quando desconhecido."""
        if not text:
            return cls.NAME_ASC
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.NAME_ASC

    @property
    def descending(self) -> bool:
        return self in (SortOption.NAME_DESC, SortOption.CATEGORY_DESC)


class QuoteStatus(str, Enum):
    """Status de uma solicitação de orçamento."""

    PENDING = "pendente"
    APPROVED = "aprovado"
    REJECTED = "rejeitado"
    COMPLETED = "concluido"


class EmailStatus(str, Enum):
    """Status de um envio registrado na outbox."""

    QUEUED = "queued"
    SENT = "sent"
    ERROR = "error"


class StoreType(str, Enum):
    """Backends de dados suportados."""

    SQLITE = "sqlite"
    SUPABASE = "supabase"


# TIPOS ANOTADOS

# Preço (sempre positivo)
Price = Annotated[float, Field(ge=0)]

# Quantidade solicitada em orçamento
Quantity = Annotated[int, Field(gt=0)]

# Termo de busca livre
SearchQuery = Annotated[
    str,
    StringConstraints(
        max_length=200,
        strip_whitespace=True,
    ),
]
