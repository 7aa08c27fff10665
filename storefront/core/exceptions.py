"""
Hierarquia de exceções do sistema.
Todas as exceções herdam de StorefrontError para facilitar tratamento.
"""

from typing import Any, Optional


class StorefrontError(Exception):
    """
    Exceção base do sistema.
    Todas as exceções customizadas herdam desta classe.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Serializa exceção para dicionário."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


# EXCEÇÕES DE STORAGE

class StorageError(StorefrontError):
    """Erro de persistência de dados."""

    def __init__(
        self,
        message: str,
        *,
        storage_type: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if storage_type:
            details["storage_type"] = storage_type
        if path:
            details["path"] = path
        super().__init__(message, details=details, **kwargs)


class DataStoreError(StorageError):
    """Falha ao consultar ou gravar no banco de dados. Fatal para a requisição."""

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details, **kwargs)
        self.table = table
        self.status_code = status_code


class FileStorageError(StorageError):
    """Erro específico de importação ou exportação em arquivo."""
    pass


# EXCEÇÕES DE VALIDAÇÃO

class ValidationError(StorefrontError):
    """Erro de validação de dados de entrada."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = str(value)
        super().__init__(message, details=details, **kwargs)


class QuoteValidationError(ValidationError):
    """Solicitação de orçamento rejeitada, com código legível por máquina."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["code"] = code
        super().__init__(message, details=details, **kwargs)
        self.code = code


# EXCEÇÕES DE NOTIFICAÇÃO

class NotificationError(StorefrontError):
    """Erro genérico de notificação."""
    pass


class EmailDeliveryError(NotificationError):
    """Falha de transporte ao falar com o provedor de e-mail."""

    def __init__(
        self,
        message: str = "Falha ao enviar e-mail",
        *,
        recipient: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if recipient:
            details["recipient"] = recipient
        super().__init__(message, details=details, **kwargs)
        self.recipient = recipient


# EXCEÇÕES DE CONFIGURAÇÃO

class ConfigurationError(StorefrontError):
    """Configuração ausente ou inválida (credenciais, backend)."""

    def __init__(
        self,
        message: str,
        *,
        setting: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if setting:
            details["setting"] = setting
        super().__init__(message, details=details, **kwargs)
        self.setting = setting
