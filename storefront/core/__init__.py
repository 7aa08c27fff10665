"""
Módulo core: modelos de dados, exceções, tipos e constantes.
"""

from storefront.core.models import (
    RawSupplierRecord,
    Product,
    ListingQuery,
    ProductPage,
    QuoteSubmission,
    QuoteRequest,
    EmailMessage,
    EmailResult,
)
from storefront.core.exceptions import (
    StorefrontError,
    StorageError,
    DataStoreError,
    ValidationError,
    QuoteValidationError,
    NotificationError,
    EmailDeliveryError,
    ConfigurationError,
)
from storefront.core.types import (
    Category,
    SortOption,
    QuoteStatus,
    EmailStatus,
)

__all__ = [
    # Models
    "RawSupplierRecord",
    "Product",
    "ListingQuery",
    "ProductPage",
    "QuoteSubmission",
    "QuoteRequest",
    "EmailMessage",
    "EmailResult",
    # Exceptions
    "StorefrontError",
    "StorageError",
    "DataStoreError",
    "ValidationError",
    "QuoteValidationError",
    "NotificationError",
    "EmailDeliveryError",
    "ConfigurationError",
    # Types
    "Category",
    "SortOption",
    "QuoteStatus",
    "EmailStatus",
]
