"""
Modelos de dados Pydantic para o sistema.
Define estruturas para registros do fornecedor, produtos da vitrine,
orçamentos e e-mails transacionais.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from storefront.core.types import (
    Category,
    EmailStatus,
    Price,
    QuoteStatus,
    SortOption,
)


# =============================================================================
# REGISTRO BRUTO DO FORNECEDOR
# =============================================================================

class ColorVariant(BaseModel):
    """Variação de cor como vem do fornecedor."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    color: Optional[str] = Field(default=None, alias="cor")
    image: Optional[str] = Field(default=None, alias="link_image")

    @field_validator("color", "image", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v)


class RawSupplierRecord(BaseModel):
    """
    Linha da tabela do fornecedor, com os nomes de campo originais.
    Aceita tanto os nomes do fornecedor (codigo, titulo, ...) quanto os
    nomes Python. Todos os campos são opcionais e tolerantes a tipo.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    # Identificação
    code: Optional[Union[int, str]] = Field(default=None, alias="codigo")
    numeric_id: Optional[Union[int, str]] = Field(default=None, alias="id")

    # Texto livre
    title: Optional[str] = Field(default=None, alias="titulo")
    description: Optional[str] = Field(default=None, alias="descricao")
    category_path: Optional[str] = Field(default=None, alias="categoria")

    # Imagens
    img_0: Optional[str] = None
    img_1: Optional[str] = None
    img_2: Optional[str] = None
    color_variants: list[ColorVariant] = Field(default_factory=list, alias="variacoes")

    # Comercial
    price: Any = Field(default=None, alias="preco")
    availability_status: Optional[str] = Field(default=None, alias="status")
    is_promotional: Any = Field(default=None, alias="promocao")

    # Dimensões (strings numéricas)
    height: Any = Field(default=None, alias="altura")
    width: Any = Field(default=None, alias="largura")
    length: Any = Field(default=None, alias="comprimento")
    weight: Any = Field(default=None, alias="peso")

    primary_color: Optional[str] = Field(default=None, alias="cor_web_principal")
    is_active: Optional[bool] = Field(default=True, alias="status_active")

    @field_validator(
        "title",
        "description",
        "category_path",
        "img_0",
        "img_1",
        "img_2",
        "availability_status",
        "primary_color",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        """Converte valores não textuais em string."""
        if v is None:
            return None
        return str(v)

    @field_validator("code", "numeric_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Optional[Union[int, str]]:
        """Mantém inteiros; qualquer outro valor vira string (12.5 -> "12.5")."""
        if v is None or (isinstance(v, int) and not isinstance(v, bool)):
            return v
        return str(v)

    @field_validator("color_variants", mode="before")
    @classmethod
    def coerce_variants(cls, v: Any) -> list:
        """Descarta entradas de variação que não são objetos."""
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, (dict, ColorVariant))]

    @field_validator("is_active", mode="before")
    @classmethod
    def coerce_active(cls, v: Any) -> Optional[bool]:
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, str):
            text = v.strip().lower()
            if text in ("true", "1", "t"):
                return True
            if text in ("false", "0", "f", ""):
                return False
            return None
        try:
            return bool(v)
        except (TypeError, ValueError):
            return None


# =============================================================================
# PRODUTO NORMALIZADO
# =============================================================================

class StorefrontModel(BaseModel):
    """Base dos modelos expostos: serializa em camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ColorVariation(StorefrontModel):
    """Par cor/imagem exibido na página do produto."""

    model_config = ConfigDict(frozen=True)

    color: str
    image: str


class Dimensions(StorefrontModel):
    """Dimensões opcionais; ausência nunca vira zero."""

    model_config = ConfigDict(frozen=True)

    height: Optional[float] = None
    width: Optional[float] = None
    length: Optional[float] = None
    weight: Optional[float] = None


class Product(StorefrontModel):
    """
    Produto normalizado da vitrine.
    Derivado a cada requisição a partir do registro bruto, nunca persistido.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: Category
    images: list[str] = Field(default_factory=list)
    color_variations: list[ColorVariation] = Field(default_factory=list)
    price: float = 0.0
    in_stock: bool = True
    featured: bool = False
    supplier_code: Optional[str] = None
    reference: Optional[str] = None
    dimensions: Dimensions = Field(default_factory=Dimensions)
    primary_color: Optional[str] = None

    def format_price(self) -> str:
        """Formata preço para exibição."""
        return f"R$ {self.price:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


class ScoredProduct(BaseModel):
    """Produto com sua pontuação de relevância."""

    model_config = ConfigDict(frozen=True)

    product: Product
    score: int


# =============================================================================
# LISTAGEM
# =============================================================================

class ListingQuery(BaseModel):
    """Parâmetros de listagem do catálogo."""

    search: Optional[str] = None
    category: Optional[str] = None
    sort: SortOption = SortOption.NAME_ASC
    page: int = 1
    limit: Optional[int] = None

    @field_validator("sort", mode="before")
    @classmethod
    def parse_sort(cls, v: Any) -> SortOption:
        if isinstance(v, SortOption):
            return v
        return SortOption.from_text(v if isinstance(v, str) else None)

    @field_validator("page", mode="before")
    @classmethod
    def parse_page(cls, v: Any) -> int:
        """Página inválida ou menor que 1 vira 1."""
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return max(1, page)

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @property
    def has_search(self) -> bool:
        return bool(self.search and self.search.strip())

    @property
    def has_category(self) -> bool:
        return bool(
            self.category
            and self.category.strip()
            and self.category.strip().lower() != "all"
        )


class Pagination(StorefrontModel):
    """Metadados de paginação."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.current_page > 1


class ProductPage(StorefrontModel):
    """Página de produtos retornada pela listagem."""

    items: list[Product] = Field(default_factory=list)
    pagination: Pagination


class CategoryEntry(StorefrontModel):
    """Categoria do fornecedor exposta no menu."""

    id: str
    name: str


# =============================================================================
# ORÇAMENTOS
# =============================================================================

class CustomerData(StorefrontModel):
    """Dados do cliente informados no formulário."""

    name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    cnpj: str = ""

    @field_validator("name", "email", "phone", "company", "cnpj", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class QuoteItemInput(StorefrontModel):
    """Item enviado no carrinho de orçamento."""

    product_id: Optional[str] = None
    product_name: str = Field(
        default="",
        validation_alias=AliasChoices("product_name", "productName", "name"),
    )
    quantity: Optional[float] = None
    unit_price: float = 0.0
    customizations: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("product_name", "notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("unit_price", mode="before")
    @classmethod
    def none_as_zero(cls, v: Any) -> float:
        return 0.0 if v is None or v == "" else v


class QuoteSubmission(StorefrontModel):
    """Solicitação de orçamento ainda não validada."""

    customer: Optional[CustomerData] = Field(
        default=None,
        validation_alias=AliasChoices("customer", "customerData", "customer_data"),
    )
    items: list[QuoteItemInput] = Field(default_factory=list)
    notes: str = ""

    @field_validator("items", mode="before")
    @classmethod
    def none_as_list(cls, v: Any) -> list:
        return [] if v is None else v

    @field_validator("notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class QuoteItem(StorefrontModel):
    """Item persistido de uma solicitação."""

    id: Optional[int] = None
    product_id: Optional[str] = None
    product_name: str
    quantity: int = Field(..., gt=0)
    unit_price: Price = 0.0
    customizations: dict[str, Any] = Field(default_factory=dict)

    @computed_field
    @property
    def subtotal(self) -> float:
        return round(self.quantity * self.unit_price, 2)


class QuoteRequest(StorefrontModel):
    """Solicitação de orçamento persistida."""

    id: Union[int, str]
    number: str
    customer: CustomerData
    items: list[QuoteItem] = Field(default_factory=list)
    notes: str = ""
    status: QuoteStatus = QuoteStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def total_estimated(self) -> float:
        """Soma dos subtotais dos itens."""
        return round(sum(item.subtotal for item in self.items), 2)


class QuotePage(StorefrontModel):
    """Página de solicitações."""

    items: list[QuoteRequest] = Field(default_factory=list)
    pagination: Pagination


class QuoteDashboard(StorefrontModel):
    """Resumo das solicitações para o painel."""

    total: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    recent: list[QuoteRequest] = Field(default_factory=list)


# =============================================================================
# E-MAIL
# =============================================================================

class EmailMessage(BaseModel):
    """Mensagem transacional pronta para o provedor."""

    sender_name: str
    sender_email: str
    recipient_email: str
    recipient_name: str = ""
    subject: str
    html_body: str
    text_body: Optional[str] = None
    reply_to: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class EmailResult(BaseModel):
    """Resultado de uma tentativa de envio."""

    success: bool
    status_code: Optional[int] = None
    provider_response: Optional[str] = None


class ConfirmationContext(BaseModel):
    """Dados exibidos no e-mail de confirmação."""

    client_name: str
    client_email: str
    client_phone: str = ""
    client_company: str = ""
    subject: Optional[str] = None
    message: Optional[str] = None
    quote_number: Optional[str] = None


class OutboxEntry(BaseModel):
    """Registro de auditoria de um e-mail enviado ou tentado."""

    id: Optional[Union[int, str]] = None
    recipient: str
    subject: str
    template: str
    payload: dict[str, Any] = Field(default_factory=dict)
    status: EmailStatus = EmailStatus.QUEUED
    provider_response: Optional[dict[str, Any]] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None


class OutboxPage(StorefrontModel):
    """Página da outbox de e-mails."""

    items: list[OutboxEntry] = Field(default_factory=list)
    pagination: Pagination
