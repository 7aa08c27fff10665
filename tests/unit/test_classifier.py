"""
Testes unitários para o CategoryClassifier.
"""

import pytest

from config.categories import (
    CATEGORY_PATH_RULES,
    DEFAULT_CLASSIFIER_TABLES,
    OFFICE_KEYWORDS,
    CategoryPathRule,
    ClassifierTables,
)
from storefront.core.types import Category
from storefront.pipeline.classifier import CategoryClassifier


class TestCategoryClassifier:
    """Testes para CategoryClassifier."""

    @pytest.fixture
    def classifier(self) -> CategoryClassifier:
        """Instância do classificador."""
        return CategoryClassifier()

    # TESTES: ETAPA A

    class TestStageA:
        """Testes para as regras do caminho de categoria."""

        @pytest.mark.parametrize("path,expected", [
            ("Canetas", Category.PAPELARIA),
            ("Escritório > Organização", Category.PAPELARIA),
            ("Blocos e Cadernetas", Category.PAPELARIA),
            ("Cadernos", Category.PAPELARIA),
            ("Bolsas e Sacolas", Category.ACESSORIOS),
            ("Mochilas", Category.ACESSORIOS),
            ("Canecas", Category.CASA_ESCRITORIO),
            ("Garrafas e Squeezes", Category.CASA_ESCRITORIO),
            ("Malas e Maletas", Category.TEXTIL),
            ("Chaveiros", Category.ACESSORIOS),
            ("Diversos", Category.ACESSORIOS),
            ("Linha Bambu", Category.ECOLOGICOS),
        ])
        def test_caminhos(self, classifier, path, expected):
            assert classifier.stage_a(path) == expected

        def test_primeira_regra_vence(self, classifier):
            """Caminho que casa com duas regras fica com a primeira."""
            assert classifier.stage_a("Canetas e Canecas") == Category.PAPELARIA

        def test_caixa_ignorada(self, classifier):
            assert classifier.stage_a("BOLSAS") == Category.ACESSORIOS

        def test_sem_caminho(self, classifier):
            assert classifier.stage_a(None) == Category.ECOLOGICOS
            assert classifier.stage_a("") == Category.ECOLOGICOS

    # TESTES: ETAPA B

    class TestStageB:
        """Testes para a reclassificação por palavra-chave."""

        def test_padrao_sem_dados(self, classifier):
            """Sem caminho, título ou descrição: ecologicos."""
            assert classifier.classify({}) == Category.ECOLOGICOS

        def test_titulo_reclassifica(self, classifier):
            raw = {"categoria": "Linha Bambu", "titulo": "Bloco de Notas Reciclado"}

            decision = classifier.decide(raw)

            assert decision.stage_a == Category.ECOLOGICOS
            assert decision.stage_b_eligible is True
            assert decision.matched_keyword == "bloco"
            assert decision.category == Category.PAPELARIA
            assert decision.overridden is True

        def test_descricao_reclassifica(self, classifier):
            raw = {"categoria": "Kits", "titulo": "Kit Executivo", "descricao": "Acompanha caneta"}
            assert classifier.classify(raw) == Category.PAPELARIA

        def test_acessorio_reclassifica(self, classifier):
            """Acessórios não são finais: palavra-chave ainda vale."""
            raw = {"categoria": "Diversos", "titulo": "Chaveiro com Caneta"}
            assert classifier.classify(raw) == Category.PAPELARIA

        def test_caneca_nao_reclassifica(self, classifier):
            """Caminho de canecas é final mesmo com 'caneta' no título."""
            raw = {"categoria": "Canecas", "titulo": "Caneca com Caneta"}

            decision = classifier.decide(raw)

            assert decision.stage_b_eligible is False
            assert decision.matched_keyword is None
            assert decision.category == Category.CASA_ESCRITORIO
            assert decision.overridden is False

        def test_papelaria_continua_papelaria(self, classifier):
            decision = classifier.decide({"categoria": "Canetas", "titulo": "Caneta Metal"})

            assert decision.category == Category.PAPELARIA
            assert decision.stage_b_eligible is False

        def test_palavra_chave_por_substring(self, classifier):
            """'pen' casa dentro de 'pendrive'."""
            raw = {"categoria": "Tecnologia", "titulo": "Pendrive de Bambu 8GB"}
            assert classifier.find_office_keyword(raw["titulo"], None) == "pen"

        def test_sem_palavra_chave(self, classifier):
            raw = {"categoria": "Tecnologia", "titulo": "Garrafa Térmica"}
            assert classifier.classify(raw) == Category.ECOLOGICOS

    # TESTES: TABELAS

    def test_toda_regra_e_alcancavel(self, classifier):
        """Cada termo de cada regra leva à categoria da primeira regra que o contém."""
        for rule in CATEGORY_PATH_RULES:
            for term in rule.terms:
                first = next(r for r in CATEGORY_PATH_RULES if r.matches(term))
                assert classifier.stage_a(term) == first.category

    def test_toda_palavra_chave_reclassifica(self, classifier):
        for keyword in OFFICE_KEYWORDS:
            assert classifier.classify({"titulo": keyword}) == Category.PAPELARIA

    def test_tabelas_injetadas(self):
        """Tabelas customizadas substituem as padrão."""
        tables = ClassifierTables(
            path_rules=(CategoryPathRule(terms=("camisetas",), category=Category.TEXTIL),),
            office_keywords=("caneta",),
            final_categories=frozenset({Category.TEXTIL}),
            default=Category.ACESSORIOS,
        )
        classifier = CategoryClassifier(tables)

        assert classifier.classify({"categoria": "Camisetas", "titulo": "Camiseta com caneta"}) == Category.TEXTIL
        assert classifier.classify({"categoria": "Outros"}) == Category.ACESSORIOS
        assert classifier.classify({"categoria": "Outros", "titulo": "Caneta"}) == Category.PAPELARIA

    def test_tabelas_padrao(self):
        assert DEFAULT_CLASSIFIER_TABLES.final_categories == frozenset(
            {Category.PAPELARIA, Category.CASA_ESCRITORIO}
        )
