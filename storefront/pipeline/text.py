"""
Utilitários de texto compartilhados pelo pipeline.
"""

import math
import unicodedata
from typing import Any, Optional

from storefront.core.constants import LEADING_FLOAT_PATTERN


def normalize_text(text: Optional[str]) -> str:
    """
    Normaliza texto para comparação: minúsculo e sem acentos.

    Args:
        text: Texto livre (pode ser None)

    Returns:
        Texto em minúsculas, decomposto em NFD e sem marcas combinantes
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", str(text).lower())
    return "".join(ch for ch in decomposed if not "\u0300" <= ch <= "\u036f")


def parse_float(value: Any) -> Optional[float]:
    """
    Extrai o número do início do valor, como um parseFloat permissivo.

    Exemplos:
        "29.90" -> 29.9
        "12abc" -> 12.0
        "abc"   -> None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number

    match = LEADING_FLOAT_PATTERN.match(str(value).strip())
    if not match:
        return None
    return float(match.group(0))


def first_non_empty(*values: Any) -> Optional[str]:
    """Retorna o primeiro valor não vazio convertido em string."""
    for value in values:
        if value is None:
            continue
        text = str(value)
        if text:
            return text
    return None
