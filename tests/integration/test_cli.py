"""
Testes de integração para a CLI, de ponta a ponta sobre um SQLite temporário.
"""

import json

import pytest
from typer.testing import CliRunner

from config.settings import get_settings
from storefront import __version__
from storefront.cli import app
from tests.fixtures.raw_records import ACTIVE_RECORDS, VALID_SUBMISSION, without_ids

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Aponta as configurações para diretórios temporários, sem Brevo."""
    monkeypatch.setenv("DATA_PATH", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "logs"))
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.setenv("BREVO_API_KEY", "")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


@pytest.fixture
def supplier_file(cli_env):
    path = cli_env / "fornecedor.json"
    path.write_text(json.dumps(without_ids(ACTIVE_RECORDS), ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def imported(supplier_file):
    result = runner.invoke(app, ["import", str(supplier_file)])
    assert result.exit_code == 0, result.output
    return result


@pytest.fixture
def submission_file(cli_env):
    path = cli_env / "pedido.json"
    path.write_text(json.dumps(VALID_SUBMISSION, ensure_ascii=False), encoding="utf-8")
    return path


class TestCatalogCommands:
    """Testes para os comandos de catálogo."""

    def test_version(self, cli_env):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert f"v{__version__}" in result.output

    def test_import(self, imported):
        assert f"{len(ACTIVE_RECORDS)} registros importados" in imported.output

    def test_import_formato_invalido(self, cli_env):
        path = cli_env / "fornecedor.xlsx"
        path.write_text("x", encoding="utf-8")

        result = runner.invoke(app, ["import", str(path)])

        assert result.exit_code == 1

    def test_busca_por_codigo_json(self, imported):
        result = runner.invoke(app, ["products", "--search", "92823", "--json"])

        assert result.exit_code == 0
        assert '"supplierCode": "92823"' in result.output
        assert '"totalItems": 1' in result.output

    def test_listagem_em_tabela(self, imported):
        result = runner.invoke(app, ["products", "--category", "canecas"])

        assert result.exit_code == 0
        assert "Total: 1 produtos" in result.output

    def test_produto(self, imported):
        result = runner.invoke(app, ["product", "ecologic-92823", "--json"])

        assert result.exit_code == 0
        assert '"id": "ecologic-92823"' in result.output

    def test_produto_inexistente(self, imported):
        result = runner.invoke(app, ["product", "ecologic-0000"])

        assert result.exit_code == 1
        assert "não encontrado" in result.output

    def test_categorias(self, imported):
        result = runner.invoke(app, ["categories"])

        assert result.exit_code == 0
        assert "Canetas" in result.output

    def test_exporta(self, imported, cli_env):
        output = cli_env / "catalogo.csv"

        result = runner.invoke(app, ["export", str(output), "--search", "bolsa"])

        assert result.exit_code == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 3

    def test_desativa(self, imported):
        result = runner.invoke(app, ["deactivate", "bolsa"])
        listing = runner.invoke(app, ["products", "--search", "bolsa", "--json"])

        assert result.exit_code == 0
        assert '"totalItems": 0' in listing.output


class TestQuoteCommands:
    """Testes para os comandos de orçamento e e-mail."""

    def test_cria_e_lista(self, submission_file):
        created = runner.invoke(app, ["quote", str(submission_file)])
        summary = runner.invoke(app, ["dashboard"])

        assert created.exit_code == 0, created.output
        assert "Solicitação registrada" in created.output
        assert "500x Caneta Bambu Ecológica" in created.output
        assert summary.exit_code == 0
        assert "Total: 1" in summary.output
        assert "pendente: 1" in summary.output

    def test_json_invalido(self, cli_env):
        path = cli_env / "pedido.json"
        path.write_text("{nao é json", encoding="utf-8")

        result = runner.invoke(app, ["quote", str(path)])

        assert result.exit_code == 1

    def test_solicitacao_invalida(self, cli_env):
        path = cli_env / "pedido.json"
        path.write_text(json.dumps({**VALID_SUBMISSION, "items": []}), encoding="utf-8")

        result = runner.invoke(app, ["quote", str(path)])

        assert result.exit_code == 1
        assert "Pelo menos um item" in result.output

    def test_atualiza_status(self, submission_file):
        runner.invoke(app, ["quote", str(submission_file)])

        updated = runner.invoke(app, ["quote-status", "1", "aprovado"])
        missing = runner.invoke(app, ["quote-status", "99", "aprovado"])
        invalid = runner.invoke(app, ["quote-status", "1", "arquivado"])

        assert updated.exit_code == 0
        assert "aprovado" in updated.output
        assert missing.exit_code == 1
        assert invalid.exit_code == 1

    def test_outbox_vazia_sem_api_key(self, submission_file):
        runner.invoke(app, ["quote", str(submission_file)])

        result = runner.invoke(app, ["outbox"])

        assert result.exit_code == 0
        assert "Outbox (0)" in result.output

    def test_outbox_status_invalido(self, cli_env):
        result = runner.invoke(app, ["outbox", "--status", "arquivado"])

        assert result.exit_code == 1
        assert "Status inválido" in result.output

    def test_preco_negativo(self, cli_env):
        path = cli_env / "pedido.json"
        items = [{"productName": "Caneta", "quantity": 2, "unitPrice": -5}]
        path.write_text(json.dumps({**VALID_SUBMISSION, "items": items}), encoding="utf-8")

        result = runner.invoke(app, ["quote", str(path)])
        summary = runner.invoke(app, ["dashboard"])

        assert result.exit_code == 1
        assert "preço unitário" in result.output
        assert "Total: 0" in summary.output

    def test_email_de_teste_sem_api_key(self, cli_env):
        result = runner.invoke(app, ["email-test", "ana@x.com"])

        assert result.exit_code == 1
