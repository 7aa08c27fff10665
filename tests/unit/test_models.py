"""
Testes unitários para os modelos Pydantic, tipos e exceções.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import (
    DataStoreError,
    QuoteValidationError,
    StorefrontError,
)
from storefront.core.models import (
    ListingQuery,
    Pagination,
    Product,
    QuoteItem,
    QuoteRequest,
    QuoteSubmission,
    RawSupplierRecord,
    CustomerData,
)
from storefront.core.types import Category, QuoteStatus, SortOption


class TestRawSupplierRecord:
    """Testes para RawSupplierRecord."""

    def test_nomes_do_fornecedor(self):
        record = RawSupplierRecord.model_validate({
            "codigo": "92823",
            "titulo": "Caneta",
            "categoria": "Canetas",
            "status_active": "true",
            "coluna_nova": "ignorada",
        })

        assert record.code == "92823"
        assert record.title == "Caneta"
        assert record.category_path == "Canetas"
        assert record.is_active is True

    def test_tolerante_a_tipos(self):
        record = RawSupplierRecord.model_validate({"titulo": 123, "variacoes": "não é lista"})

        assert record.title == "123"
        assert record.color_variants == []

    def test_imutavel(self):
        record = RawSupplierRecord(codigo="1")
        with pytest.raises(PydanticValidationError):
            record.code = "2"


class TestProduct:
    """Testes para Product."""

    @pytest.fixture
    def product(self) -> Product:
        return Product(
            id="ecologic-1",
            name="Caneta",
            description="",
            category=Category.PAPELARIA,
            price=1234.5,
            in_stock=False,
            supplier_code="1",
        )

    def test_format_price(self, product):
        assert product.format_price() == "R$ 1.234,50"

    def test_serializa_camel_case(self, product):
        data = product.model_dump(by_alias=True)

        assert data["inStock"] is False
        assert data["supplierCode"] == "1"
        assert data["colorVariations"] == []
        assert data["category"] == "papelaria"


class TestListingQuery:
    """Testes para ListingQuery."""

    def test_padroes(self):
        query = ListingQuery()

        assert query.sort == SortOption.NAME_ASC
        assert query.page == 1
        assert query.limit is None
        assert query.has_search is False
        assert query.has_category is False

    @pytest.mark.parametrize("sort,expected", [
        ("name_desc", SortOption.NAME_DESC),
        ("CATEGORY_ASC", SortOption.CATEGORY_ASC),
        ("price_asc", SortOption.NAME_ASC),
        (None, SortOption.NAME_ASC),
    ])
    def test_sort(self, sort, expected):
        assert ListingQuery(sort=sort).sort == expected

    @pytest.mark.parametrize("page,expected", [("3", 3), (0, 1), (-2, 1), ("abc", 1), (None, 1)])
    def test_page(self, page, expected):
        assert ListingQuery(page=page).page == expected

    @pytest.mark.parametrize("limit,expected", [("50", 50), ("", None), ("x", None), (None, None)])
    def test_limit(self, limit, expected):
        assert ListingQuery(limit=limit).limit == expected

    @pytest.mark.parametrize("category,expected", [
        ("all", False),
        ("ALL", False),
        ("  ", False),
        ("Canetas", True),
    ])
    def test_has_category(self, category, expected):
        assert ListingQuery(category=category).has_category is expected

    def test_has_search(self):
        assert ListingQuery(search="   ").has_search is False
        assert ListingQuery(search="caneta").has_search is True


class TestSortOption:
    """Testes para SortOption."""

    def test_descending(self):
        assert SortOption.NAME_DESC.descending is True
        assert SortOption.CATEGORY_DESC.descending is True
        assert SortOption.NAME_ASC.descending is False


class TestPagination:
    """Testes para Pagination."""

    def test_navegacao(self):
        pagination = Pagination(current_page=2, total_pages=3, total_items=25, items_per_page=10)

        assert pagination.has_next is True
        assert pagination.has_previous is True

        data = pagination.model_dump(by_alias=True)
        assert data["currentPage"] == 2
        assert data["itemsPerPage"] == 10

    def test_pagina_unica(self):
        pagination = Pagination(current_page=1, total_pages=1, total_items=3, items_per_page=10)

        assert pagination.has_next is False
        assert pagination.has_previous is False


class TestQuoteModels:
    """Testes para os modelos de orçamento."""

    def test_submission_aceita_customer_data(self):
        submission = QuoteSubmission.model_validate({
            "customerData": {"name": "Ana", "email": "ana@x.com", "phone": None},
            "items": [{"productName": "Caneta", "quantity": 10}],
            "notes": None,
        })

        assert submission.customer.name == "Ana"
        assert submission.customer.phone == ""
        assert submission.items[0].product_name == "Caneta"
        assert submission.notes == ""

    def test_submission_sem_cliente(self):
        submission = QuoteSubmission.model_validate({"items": None})

        assert submission.customer is None
        assert submission.items == []

    def test_item_aceita_name(self):
        submission = QuoteSubmission.model_validate({"items": [{"name": "Caneca", "product_id": 7}]})

        item = submission.items[0]
        assert item.product_name == "Caneca"
        assert item.product_id == "7"
        assert item.quantity is None

    def test_subtotal_e_total(self):
        quote = QuoteRequest(
            id=1,
            number="SOL-1-ABCDEF",
            customer=CustomerData(name="Ana", email="ana@x.com"),
            items=[
                QuoteItem(product_name="Caneta", quantity=100, unit_price=3.5),
                QuoteItem(product_name="Caneca", quantity=3, unit_price=12.9),
            ],
        )

        assert quote.items[0].subtotal == 350.0
        assert quote.items[1].subtotal == 38.7
        assert quote.total_estimated == 388.7
        assert quote.status == QuoteStatus.PENDING

    def test_quantidade_positiva(self):
        with pytest.raises(PydanticValidationError):
            QuoteItem(product_name="Caneta", quantity=0)


class TestExceptions:
    """Testes para a hierarquia de exceções."""

    def test_to_dict(self):
        error = QuoteValidationError("Email válido é obrigatório", code="INVALID_EMAIL", field="email")

        data = error.to_dict()

        assert data["error_type"] == "QuoteValidationError"
        assert data["details"] == {"code": "INVALID_EMAIL", "field": "email"}
        assert error.code == "INVALID_EMAIL"
        assert isinstance(error, StorefrontError)

    def test_causa_no_str(self):
        error = DataStoreError("Falha", table="produtos", status_code=500, cause=RuntimeError("boom"))

        assert "boom" in str(error)
        assert error.details["table"] == "produtos"
        assert error.status_code == 500
