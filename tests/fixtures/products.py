"""
Fábrica de Products já mapeados para testes de busca e filtro.
"""

from typing import Optional

from storefront.core.models import Product
from storefront.core.types import Category


def make_product(
    name: str,
    *,
    description: str = "",
    category: Category = Category.ECOLOGICOS,
    supplier_code: Optional[str] = None,
    reference: Optional[str] = None,
) -> Product:
    """Cria um Product mínimo."""
    return Product(
        id=f"ecologic-{supplier_code or name.lower().replace(' ', '-')}",
        name=name,
        description=description,
        category=category,
        supplier_code=supplier_code,
        reference=reference,
    )
