"""
Módulo de storage: SQLite, Supabase e arquivos.
"""

from storefront.storage.base import BaseStore
from storefront.storage.sqlite_storage import SQLiteStore
from storefront.storage.supabase_storage import SupabaseStore
from storefront.storage.file_storage import SupplierFileStorage
from storefront.storage.manager import create_store

__all__ = [
    "BaseStore",
    "SQLiteStore",
    "SupabaseStore",
    "SupplierFileStorage",
    "create_store",
]
