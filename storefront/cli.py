"""
Interface de linha de comando (CLI) da vitrine Natureza Brindes.
Usa Typer para os comandos e Rich para a saída formatada.
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from config.logging_config import configure_logging
from config.settings import Settings, get_settings
from storefront.catalog_service import CatalogService
from storefront.core.exceptions import StorefrontError
from storefront.core.models import ListingQuery, Product, QuoteRequest
from storefront.notifications import BrevoEmailSender, ConfirmationNotifier
from storefront.quote_service import QuoteService
from storefront.storage import SupplierFileStorage, create_store
from storefront.storage.base import BaseStore

T = TypeVar("T")

# Inicializa CLI
app = typer.Typer(
    name="storefront",
    help="Catálogo, busca e orçamentos da vitrine Natureza Brindes.",
    add_completion=False,
)

# Console Rico para output formatado
console = Console()


@dataclass
class Services:
    """Serviços montados sobre um único store."""

    store: BaseStore
    catalog: CatalogService
    quotes: QuoteService
    notifier: ConfirmationNotifier


def run_async(coro):
    """Helper para executar corrotinas."""
    return asyncio.run(coro)


def run_with_services(
    action: Callable[[Services], Awaitable[T]],
    settings: Optional[Settings] = None,
) -> T:
    """
    Monta store e serviços, executa a ação e libera os recursos.
    E-mails agendados durante a ação são aguardados antes do fechamento.
    """
    settings = settings or get_settings()

    async def _run() -> T:
        store = create_store(settings)
        sender = BrevoEmailSender(
            settings.brevo_api_key,
            api_url=settings.brevo_api_url,
            timeout=settings.request_timeout,
        )
        notifier = ConfirmationNotifier(store, sender, settings)
        services = Services(
            store=store,
            catalog=CatalogService(store, settings=settings),
            quotes=QuoteService(store, notifier, settings),
            notifier=notifier,
        )
        try:
            return await action(services)
        finally:
            await notifier.drain()
            await sender.close()
            await store.close()

    try:
        return run_async(_run())
    except StorefrontError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        if e.details:
            console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(code=1)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Logs em nível DEBUG"),
):
    """Configura o logging antes de qualquer comando."""
    configure_logging(get_settings(), verbose=verbose)


# =============================================================================
# CATÁLOGO
# =============================================================================

@app.command("products")
def products(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Termo de busca"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Categoria (ex: canetas)"),
    sort: str = typer.Option("name_asc", "--sort", help="name_asc, name_desc, category_asc ou category_desc"),
    page: int = typer.Option(1, "--page", "-p", help="Página"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Itens por página"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Saída em formato JSON"),
):
    """
    Lista produtos ativos com busca, categoria e ordenação.

    Exemplos:
        storefront products --search "caneta"
        storefront products --category squeezes --sort name_desc
        storefront products --search 92823 --json
    """
    query = ListingQuery(search=search, category=category, sort=sort, page=page, limit=limit)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Carregando catálogo...", total=None)
        result = run_with_services(lambda s: s.catalog.list_products(query))

    if json_output:
        console.print_json(result.model_dump_json(by_alias=True))
        return

    _display_products(result.items, title=f"Página {result.pagination.current_page}/{result.pagination.total_pages}")
    console.print(
        f"\n[bold]Total:[/bold] {result.pagination.total_items} produtos "
        f"({result.pagination.items_per_page} por página)"
    )


@app.command("product")
def product(
    product_id: str = typer.Argument(..., help="Id público (ex: ecologic-92823)"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Saída em formato JSON"),
):
    """Exibe um produto pelo id público."""
    item = run_with_services(lambda s: s.catalog.get_product(product_id))

    if item is None:
        console.print(f"[yellow]Produto '{product_id}' não encontrado[/yellow]")
        raise typer.Exit(code=1)

    if json_output:
        console.print_json(item.model_dump_json(by_alias=True))
        return

    dims = item.dimensions
    console.print(Panel(
        f"[bold]{item.name}[/bold]\n\n"
        f"{item.description or '[dim]Sem descrição[/dim]'}\n\n"
        f"Categoria: [cyan]{item.category.value}[/cyan]\n"
        f"Código: {item.supplier_code or '-'}\n"
        f"Preço: [green]{item.format_price()}[/green]\n"
        f"Estoque: {'sim' if item.in_stock else 'não'}\n"
        f"Cores: {', '.join(v.color for v in item.color_variations) or '-'}\n"
        f"Dimensões: {dims.height or '-'} x {dims.width or '-'} x {dims.length or '-'}",
        title=f"🎁 {item.id}",
        border_style="green",
    ))


@app.command("highlighted")
def highlighted(
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Quantidade"),
):
    """Lista os produtos em destaque."""
    items = run_with_services(lambda s: s.catalog.highlighted(limit))
    _display_products(items, title="Destaques")


@app.command("categories")
def categories():
    """Lista as categorias do fornecedor."""
    entries = run_with_services(lambda s: s.catalog.list_categories())

    table = Table(title="Categorias do Fornecedor")
    table.add_column("ID", style="cyan")
    table.add_column("Nome", style="green")

    for entry in entries:
        table.add_row(entry.id, entry.name)

    console.print(table)


@app.command("import")
def import_records(
    path: Path = typer.Argument(..., help="Arquivo do fornecedor (csv, json ou parquet)"),
):
    """
    Importa registros do fornecedor para o store.

    Exemplos:
        storefront import produtos.csv
        storefront import export_fornecedor.json
    """

    async def _import(services: Services) -> int:
        records = await SupplierFileStorage().load_records(path)
        return await services.catalog.import_records(records)

    count = run_with_services(_import)
    console.print(f"[green]✓ {count} registros importados de {path}[/green]")


@app.command("export")
def export(
    output: Path = typer.Argument(..., help="Arquivo de saída (csv ou parquet)"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Termo de busca"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Categoria"),
):
    """
    Exporta o catálogo normalizado.

    Exemplos:
        storefront export catalogo.csv
        storefront export canetas.parquet --category canetas
    """
    query = ListingQuery(search=search, category=category)

    async def _export(services: Services) -> str:
        items = await services.catalog.all_products(query)
        return await SupplierFileStorage().export_products(items, output)

    path = run_with_services(_export)
    console.print(f"[green]✓ Catálogo exportado para: {path}[/green]")


@app.command("deactivate")
def deactivate(
    fragments: list[str] = typer.Argument(..., help="Trechos de título a desativar"),
):
    """Desativa produtos cujo título contém os trechos informados."""
    counts = run_with_services(lambda s: s.catalog.deactivate_by_title(fragments))

    table = Table(title="Produtos Desativados")
    table.add_column("Trecho", style="cyan")
    table.add_column("Quantidade", justify="right", style="yellow")

    for fragment, count in counts.items():
        table.add_row(fragment, str(count))

    console.print(table)


# =============================================================================
# ORÇAMENTOS
# =============================================================================

@app.command("quote")
def quote(
    path: Path = typer.Argument(..., help="JSON com customerData, items e notes"),
):
    """
    Cria uma solicitação de orçamento a partir de um JSON.

    Exemplos:
        storefront quote pedido.json
    """
    try:
        submission = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]✗ Não foi possível ler {path}: {e}[/red]")
        raise typer.Exit(code=1)

    created = run_with_services(lambda s: s.quotes.create_quote(submission))
    _display_quote(created)


@app.command("quotes")
def quotes(
    status: str = typer.Option("all", "--status", help="pendente, aprovado, rejeitado, concluido ou all"),
    page: int = typer.Option(1, "--page", "-p", help="Página"),
    limit: int = typer.Option(10, "--limit", "-l", help="Itens por página"),
):
    """Lista solicitações de orçamento, mais recentes primeiro."""
    result = run_with_services(lambda s: s.quotes.list_quotes(status=status, page=page, limit=limit))

    table = Table(title=f"Solicitações ({result.pagination.total_items})")
    table.add_column("Número", style="cyan")
    table.add_column("Cliente", style="white")
    table.add_column("E-mail", style="blue")
    table.add_column("Itens", justify="right")
    table.add_column("Status", style="yellow")
    table.add_column("Criada em", style="dim")

    for item in result.items:
        table.add_row(
            item.number,
            item.customer.name,
            item.customer.email,
            str(len(item.items)),
            item.status.value,
            item.created_at.strftime("%d/%m/%Y %H:%M"),
        )

    console.print(table)


@app.command("quote-status")
def quote_status(
    quote_id: str = typer.Argument(..., help="Id da solicitação"),
    status: str = typer.Argument(..., help="Novo status"),
):
    """Atualiza o status de uma solicitação."""
    updated = run_with_services(lambda s: s.quotes.update_status(_record_id(quote_id), status))

    if updated is None:
        console.print(f"[yellow]Solicitação '{quote_id}' não encontrada[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {updated.number}: {updated.status.value}[/green]")


@app.command("dashboard")
def dashboard():
    """Resumo das solicitações por status."""
    summary = run_with_services(lambda s: s.quotes.dashboard())

    lines = "\n".join(
        f"{status}: [cyan]{count}[/cyan]" for status, count in summary.by_status.items()
    )
    console.print(Panel(
        f"[bold]Total:[/bold] {summary.total}\n\n{lines}",
        title="📋 Solicitações",
        border_style="blue",
    ))

    if summary.recent:
        table = Table(title="Mais Recentes")
        table.add_column("Número", style="cyan")
        table.add_column("Cliente")
        table.add_column("Status", style="yellow")
        for item in summary.recent:
            table.add_row(item.number, item.customer.name, item.status.value)
        console.print(table)


# =============================================================================
# E-MAIL
# =============================================================================

@app.command("outbox")
def outbox(
    recipient: Optional[str] = typer.Option(None, "--to", help="Filtrar por destinatário"),
    status: str = typer.Option("all", "--status", help="queued, sent, error ou all"),
    page: int = typer.Option(1, "--page", "-p", help="Página"),
    limit: int = typer.Option(20, "--limit", "-l", help="Itens por página"),
):
    """Lista a outbox de e-mails."""
    result = run_with_services(
        lambda s: s.notifier.list_outbox(recipient=recipient, status=status, page=page, limit=limit)
    )

    table = Table(title=f"Outbox ({result.pagination.total_items})")
    table.add_column("ID", style="dim")
    table.add_column("Destinatário", style="cyan")
    table.add_column("Template")
    table.add_column("Status", style="yellow")
    table.add_column("Criado em", style="dim")

    for entry in result.items:
        table.add_row(
            str(entry.id),
            entry.recipient,
            entry.template,
            entry.status.value,
            entry.created_at.strftime("%d/%m/%Y %H:%M"),
        )

    console.print(table)


@app.command("email-test")
def email_test(
    to: str = typer.Argument(..., help="Destinatário"),
    name: str = typer.Option("Cliente Teste", "--name", "-n", help="Nome exibido"),
):
    """Envia o e-mail de confirmação com a tag de teste."""
    result = run_with_services(lambda s: s.notifier.send_test_email(to, name))

    if result.success:
        console.print(f"[green]✓ E-mail enviado para {to} (HTTP {result.status_code})[/green]")
    else:
        console.print(f"[red]✗ Provedor recusou o envio (HTTP {result.status_code})[/red]")
        raise typer.Exit(code=1)


@app.command("version")
def version():
    """
    Exibe a versão do sistema.
    """
    from storefront import __version__

    console.print(f"[bold green]Natureza Brindes Storefront[/bold green] v{__version__}")
    console.print("Catálogo, busca e orçamentos de brindes ecológicos")


# FUNÇÕES DE DISPLAY

def _display_products(items: list[Product], title: str) -> None:
    """Exibe produtos em tabela."""
    if not items:
        console.print("[yellow]Nenhum produto encontrado.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="cyan")
    table.add_column("Produto", style="white", overflow="fold")
    table.add_column("Categoria", style="blue")
    table.add_column("Preço", justify="right", style="green")
    table.add_column("Estoque", width=8)

    for i, item in enumerate(items, 1):
        stock = "[green]✓[/green]" if item.in_stock else "[red]✗[/red]"
        table.add_row(
            str(i),
            item.id,
            item.name,
            item.category.value,
            item.format_price(),
            stock,
        )

    console.print(table)


def _display_quote(item: QuoteRequest) -> None:
    """Exibe uma solicitação recém-criada."""
    lines = "\n".join(
        f"  • {entry.quantity}x {entry.product_name}" for entry in item.items
    )
    console.print(Panel(
        f"[bold]Número:[/bold] {item.number}\n"
        f"[bold]Cliente:[/bold] {item.customer.name} <{item.customer.email}>\n"
        f"[bold]Status:[/bold] {item.status.value}\n\n"
        f"{lines}",
        title="✓ Solicitação registrada",
        border_style="green",
    ))


def _record_id(value: str):
    """Ids numéricos no SQLite; UUIDs e afins seguem como texto."""
    return int(value) if value.isdigit() else value


# ENTRY POINT

def main():
    """Entry point principal."""
    app()


if __name__ == "__main__":
    main()
