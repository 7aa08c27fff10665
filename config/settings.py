"""
Configurações globais do sistema usando Pydantic Settings.
Carrega variáveis de ambiente e define valores padrão.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configurações principais do sistema."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ambiente
    env: Literal["development", "production", "testing"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Paths
    base_path: Path = Field(default_factory=lambda: Path(__file__).parent.parent)
    data_path: Path = Field(default=Path("./data"))
    log_path: Path = Field(default=Path("./logs"))

    # Backend de dados
    store_backend: Literal["sqlite", "supabase"] = "sqlite"
    sqlite_db_name: str = "storefront.db"

    # Supabase (PostgREST)
    supabase_url: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    products_table: str = "ecologic_products_site"
    highlighted_table: str = "produtos_destaque"
    highlighted_fk: str = "produtos_destaque_id_produto_fkey"
    customers_table: str = "usuarios_clientes"
    quotes_table: str = "solicitacao_orcamentos"
    quote_items_table: str = "products_solicitacao"
    outbox_table: str = "email_outbox"

    # E-mail transacional (Brevo)
    brevo_api_key: Optional[str] = None
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    email_sender_name: str = "Natureza Brindes"
    email_sender_address: str = "naturezabrindes@naturezabrindes.com.br"

    # Timeouts
    request_timeout: int = Field(default=30, ge=5, le=120)

    # Listagem
    default_page_size: int = Field(default=100, ge=1, le=2000)
    max_page_size: int = Field(default=2000, ge=1, le=10000)
    highlighted_limit: int = Field(default=6, ge=1, le=100)
    featured_limit: int = Field(default=4, ge=1, le=100)

    # Orçamentos
    quote_number_prefix: str = "SOL"

    @field_validator("data_path", "log_path", mode="after")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Garante que os diretórios existam."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @property
    def sqlite_path(self) -> Path:
        """Caminho completo do banco SQLite local."""
        return self.data_path / self.sqlite_db_name

    @property
    def supabase_configured(self) -> bool:
        """Indica se as credenciais do Supabase estão presentes."""
        return bool(self.supabase_url and self.supabase_service_role_key)


@lru_cache
def get_settings() -> Settings:
    """
    Retorna instância singleton das configurações.
    Usa cache para evitar recarregar .env múltiplas vezes.
    """
    return Settings()
