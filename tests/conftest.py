"""
Configurações e fixtures compartilhadas para pytest.
"""

import logging
from pathlib import Path

import pytest
import pytest_asyncio

from config.settings import Settings
from storefront.pipeline import CatalogPipeline, RecordMapper
from storefront.storage import SQLiteStore
from tests.fixtures.raw_records import ALL_RECORDS, without_ids
from tests.fixtures.senders import RecordingEmailSender


# ISOLAMENTO DE LOGGING

@pytest.fixture(autouse=True)
def _isolate_root_log_handlers():
    """Remove handlers adicionados ao logger raiz durante o teste."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers


# FIXTURES DE DIRETÓRIOS

@pytest.fixture
def temp_data_dir(tmp_path) -> Path:
    """Cria diretório temporário para dados de teste."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def temp_log_dir(tmp_path) -> Path:
    """Cria diretório temporário para logs de teste."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


# FIXTURES DE CONFIGURAÇÃO

@pytest.fixture
def settings(temp_data_dir, temp_log_dir) -> Settings:
    """Configurações isoladas do .env local."""
    return Settings(
        _env_file=None,
        env="testing",
        data_path=temp_data_dir,
        log_path=temp_log_dir,
        store_backend="sqlite",
        brevo_api_key="test-key",
    )


# FIXTURES DE PIPELINE

@pytest.fixture
def mapper() -> RecordMapper:
    """Instância do mapper."""
    return RecordMapper()


@pytest.fixture
def pipeline() -> CatalogPipeline:
    """Pipeline com tabelas padrão."""
    return CatalogPipeline()


# FIXTURES DE STORAGE

@pytest_asyncio.fixture
async def sqlite_store(temp_data_dir) -> SQLiteStore:
    """Store SQLite vazio."""
    store = SQLiteStore(temp_data_dir / "test.db")
    yield store
    await store.close()


@pytest_asyncio.fixture
async def seeded_store(sqlite_store) -> SQLiteStore:
    """Store SQLite com o catálogo de teste e dois destaques."""
    await sqlite_store.upsert_records(without_ids(ALL_RECORDS))
    await sqlite_store.add_highlight(3)
    await sqlite_store.add_highlight(1)
    return sqlite_store


# FIXTURES DE E-MAIL

@pytest.fixture
def email_sender() -> RecordingEmailSender:
    """Provedor de e-mail falso."""
    return RecordingEmailSender()
