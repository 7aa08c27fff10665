"""
Configuração da vitrine: settings, logging e regras de categoria.
"""

from config.settings import Settings, get_settings
from config.logging_config import configure_logging, get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "setup_logging",
]
