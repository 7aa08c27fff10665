"""
Mapeador de registros do fornecedor.
Converte uma linha bruta da tabela do fornecedor em Product da vitrine.
"""

from typing import Any, Iterable, Optional, Union

from config.logging_config import LoggerMixin
from storefront.core.constants import (
    DEFAULT_DESCRIPTION,
    DEFAULT_PRODUCT_NAME,
    ID_PREFIX,
    UNAVAILABLE_STATUSES,
    UNKNOWN_ID,
)
from storefront.core.models import (
    ColorVariation,
    Dimensions,
    Product,
    RawSupplierRecord,
)
from storefront.pipeline.classifier import CategoryClassifier
from storefront.pipeline.text import first_non_empty, parse_float


RawInput = Union[RawSupplierRecord, dict[str, Any]]


class RecordMapper(LoggerMixin):
    """
    Mapeador total e sem efeitos colaterais.
    Todo campo tem um padrão definido; um registro vazio ainda gera Product.
    """

    def __init__(self, classifier: Optional[CategoryClassifier] = None):
        """
        Inicializa o mapeador.

        Args:
            classifier: Classificador de categoria (None = tabelas padrão)
        """
        self.classifier = classifier or CategoryClassifier()

    def map_record(self, raw: RawInput) -> Product:
        """
        Mapeia um registro bruto.

        Args:
            raw: RawSupplierRecord ou dict com os nomes de campo do fornecedor

        Returns:
            Product normalizado
        """
        record = self.coerce(raw)
        images, variations = self._collect_images(record)

        supplier_code = None if record.code is None else str(record.code)

        product = Product(
            id=self._build_id(record),
            name=record.title or DEFAULT_PRODUCT_NAME,
            description=record.description or DEFAULT_DESCRIPTION,
            category=self.classifier.classify(record),
            images=images,
            color_variations=variations,
            price=self._parse_price(record.price),
            in_stock=record.availability_status not in UNAVAILABLE_STATUSES,
            featured=self._is_featured(record.is_promotional),
            supplier_code=supplier_code,
            reference=supplier_code,
            dimensions=Dimensions(
                height=parse_float(record.height),
                width=parse_float(record.width),
                length=parse_float(record.length),
                weight=parse_float(record.weight),
            ),
            primary_color=record.primary_color,
        )

        self.logger.debug(
            "Registro mapeado",
            product_id=product.id,
            category=product.category.value,
        )
        return product

    def map_batch(self, raws: Iterable[RawInput]) -> list[Product]:
        """Mapeia uma lista de registros preservando a ordem."""
        return [self.map_record(raw) for raw in raws]

    @staticmethod
    def coerce(raw: RawInput) -> RawSupplierRecord:
        """Aceita tanto o modelo quanto o dict vindo do banco."""
        if isinstance(raw, RawSupplierRecord):
            return raw
        return RawSupplierRecord.model_validate(raw)

    @staticmethod
    def _build_id(record: RawSupplierRecord) -> str:
        return ID_PREFIX + first_non_empty(record.code, record.numeric_id, UNKNOWN_ID)

    @staticmethod
    def _collect_images(
        record: RawSupplierRecord,
    ) -> tuple[list[str], list[ColorVariation]]:
        """
        Monta a lista de imagens e variações de cor.

        Ordem: img_0, img_1, img_2 e depois as imagens das variações ainda
        não presentes (comparação exata).
        """
        images = [img for img in (record.img_0, record.img_1, record.img_2) if img]
        variations: list[ColorVariation] = []

        for variant in record.color_variants:
            if not (variant.color and variant.image):
                continue
            if variant.image not in images:
                images.append(variant.image)
            variations.append(ColorVariation(color=variant.color, image=variant.image))

        return images, variations

    @staticmethod
    def _parse_price(value: Any) -> float:
        """Número passa direto; string é convertida; falha vira 0."""
        price = parse_float(value)
        return 0.0 if price is None else price

    @staticmethod
    def _is_featured(value: Any) -> bool:
        if value is True or value == "true":
            return True
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 1
