"""
Fábrica de stores.
Escolhe o backend de dados a partir das configurações.
"""

from typing import Optional

from config.logging_config import get_logger
from config.settings import Settings, get_settings
from storefront.core.exceptions import ConfigurationError
from storefront.core.types import StoreType
from storefront.storage.base import BaseStore
from storefront.storage.sqlite_storage import SQLiteStore
from storefront.storage.supabase_storage import SupabaseStore

logger = get_logger("storefront.storage")


def create_store(
    settings: Optional[Settings] = None,
    store_type: Optional[StoreType] = None,
) -> BaseStore:
    """
    Cria o store configurado.

    Args:
        settings: Configurações (None = get_settings())
        store_type: Força um backend específico

    Returns:
        Instância do store
    """
    settings = settings or get_settings()
    backend = store_type or StoreType(settings.store_backend)

    tables = {
        "products_table": settings.products_table,
        "highlighted_table": settings.highlighted_table,
        "customers_table": settings.customers_table,
        "quotes_table": settings.quotes_table,
        "quote_items_table": settings.quote_items_table,
        "outbox_table": settings.outbox_table,
    }

    if backend == StoreType.SUPABASE:
        if not settings.supabase_configured:
            raise ConfigurationError(
                "Backend supabase selecionado sem credenciais",
                setting="supabase_service_role_key",
            )
        store: BaseStore = SupabaseStore(
            settings.supabase_url,
            settings.supabase_service_role_key,
            highlighted_fk=settings.highlighted_fk,
            timeout=settings.request_timeout,
            **tables,
        )
    else:
        store = SQLiteStore(settings.sqlite_path, **tables)

    logger.debug("Store criado", store_type=store.store_type.value)
    return store
