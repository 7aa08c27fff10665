"""
Renderização dos e-mails transacionais com Jinja2.
"""

from datetime import datetime
from functools import lru_cache

from jinja2 import Environment, PackageLoader, select_autoescape

from storefront.core.models import ConfirmationContext

CONFIRMATION_HTML = "quote_confirmation.html"
CONFIRMATION_TEXT = "quote_confirmation.txt"


@lru_cache
def get_environment() -> Environment:
    """Ambiente Jinja2 com autoescape para HTML (não para .txt)."""
    return Environment(
        loader=PackageLoader("storefront.notifications", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        keep_trailing_newline=True,
    )


def render_confirmation_email(
    ctx: ConfirmationContext,
    *,
    brand: str = "Natureza Brindes",
    sender_email: str = "naturezabrindes@naturezabrindes.com.br",
) -> tuple[str, str]:
    """
    Renderiza o e-mail "recebemos sua solicitação de orçamento".

    Args:
        ctx: Dados do cliente e da solicitação
        brand: Nome exibido da loja
        sender_email: E-mail de contato no rodapé

    Returns:
        (html, texto puro)
    """
    env = get_environment()
    values = {
        "ctx": ctx,
        "brand": brand,
        "sender_email": sender_email,
        "year": datetime.now().year,
    }
    html = env.get_template(CONFIRMATION_HTML).render(**values)
    text = env.get_template(CONFIRMATION_TEXT).render(**values)
    return html, text
