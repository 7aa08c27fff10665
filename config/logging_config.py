"""
Logging estruturado com structlog.
JSON em produção, console colorido no resto; tudo em stderr para não
misturar com a saída da CLI.
"""

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import structlog
from structlog.typing import Processor

if TYPE_CHECKING:
    from config.settings import Settings

# Bibliotecas que logam cada requisição em INFO
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def _stderr_logger(*args) -> structlog.PrintLogger:
    """Resolve sys.stderr na criação de cada logger, não na configuração."""
    return structlog.PrintLogger(sys.stderr)


def _renderer(json_format: bool) -> Processor:
    if json_format:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(
    level: str = "INFO",
    log_path: Optional[Path] = None,
    json_format: bool = False,
    component: Optional[str] = None,
) -> structlog.BoundLogger:
    """
    Configura structlog e o logging padrão.

    Args:
        level: Nível mínimo (DEBUG, INFO, WARNING, ERROR)
        log_path: Diretório do storefront.log (None = só stderr)
        json_format: Renderiza em JSON (produção)
        component: Componente (catalog, quotes, email) com arquivo próprio

    Returns:
        Logger raiz, com o componente bindado quando informado
    """
    numeric_level = getattr(logging, level.upper())

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(json_format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    if log_path:
        _add_file_handlers(log_path, numeric_level, component)

    logger = structlog.get_logger()
    return logger.bind(component=component) if component else logger


def _add_file_handlers(log_path: Path, level: int, component: Optional[str]) -> None:
    """Arquivo geral e, opcionalmente, um arquivo por componente."""
    log_path.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()

    general = log_path / "storefront.log"
    if not any(getattr(h, "baseFilename", None) == os.path.abspath(general) for h in root.handlers):
        handler = logging.FileHandler(general, encoding="utf-8")
        handler.setLevel(level)
        root.addHandler(handler)

    if component:
        handler = logging.FileHandler(log_path / f"{component}.log", encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        logging.getLogger(f"storefront.{component}").addHandler(handler)


def configure_logging(settings: "Settings", verbose: bool = False) -> structlog.BoundLogger:
    """
    Configura o logging a partir das Settings.

    verbose força DEBUG; env=production liga o formato JSON.
    """
    return setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_path=settings.log_path,
        json_format=settings.env == "production",
    )


def get_logger(name: str = "storefront", **context) -> structlog.BoundLogger:
    """Logger nomeado, com contexto opcional já bindado."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


class LoggerMixin:
    """Mixin para adicionar logging a classes."""

    @property
    def logger(self) -> structlog.BoundLogger:
        """Retorna logger com nome da classe."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger

    def log_operation(
        self,
        operation: str,
        **kwargs,
    ) -> structlog.BoundLogger:
        """Retorna logger com operação bindada."""
        return self.logger.bind(operation=operation, **kwargs)
