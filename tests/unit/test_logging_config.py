"""
Testes unitários para a configuração de logging.
"""

import logging

import pytest

from config.logging_config import LoggerMixin, configure_logging, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers


class TestSetupLogging:
    """Testes para setup_logging e configure_logging."""

    def test_arquivo_geral(self, temp_log_dir):
        setup_logging(level="INFO", log_path=temp_log_dir)

        assert (temp_log_dir / "storefront.log").exists()

    def test_nao_duplica_handler(self, temp_log_dir):
        setup_logging(log_path=temp_log_dir)
        setup_logging(log_path=temp_log_dir)

        files = [
            h for h in logging.getLogger().handlers
            if getattr(h, "baseFilename", "").endswith("storefront.log")
        ]
        assert len(files) == 1

    def test_bibliotecas_ruidosas_em_warning(self):
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_a_partir_das_settings(self, settings):
        configure_logging(settings, verbose=True)

        assert (settings.log_path / "storefront.log").exists()
        assert logging.getLogger("aiosqlite").level == logging.WARNING


class TestLoggerMixin:
    """Testes para LoggerMixin."""

    class Service(LoggerMixin):
        pass

    def test_logger_reaproveitado(self):
        service = self.Service()

        assert service.logger is service.logger

    def test_log_operation_binda_contexto(self, capsys):
        setup_logging(level="INFO")

        self.Service().log_operation("create_quote", email="ana@x.com").info("ok")

        err = capsys.readouterr().err
        assert "create_quote" in err
        assert "ana@x.com" in err

    def test_get_logger_com_contexto(self, capsys):
        setup_logging(level="INFO")

        get_logger("storefront.test", quote="SOL-1").warning("aviso")

        assert "SOL-1" in capsys.readouterr().err
