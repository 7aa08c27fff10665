"""
Importação e exportação em arquivos (CSV, JSON e Parquet).
Lê exportações do fornecedor e grava a vitrine para análise com pandas.
"""

import json
import math
from pathlib import Path
from typing import Any

import pandas as pd

from config.logging_config import LoggerMixin
from storefront.core.exceptions import FileStorageError
from storefront.core.models import Product

SUPPORTED_IMPORT_FORMATS = (".csv", ".json", ".parquet")
SUPPORTED_EXPORT_FORMATS = (".csv", ".parquet")


class SupplierFileStorage(LoggerMixin):
    """
    Leitura de exportações do fornecedor e escrita de produtos mapeados.
    Os registros lidos mantêm os nomes de coluna do fornecedor.
    """

    async def load_records(self, path: Path) -> list[dict[str, Any]]:
        """
        Lê um arquivo de exportação do fornecedor.

        Args:
            path: Arquivo .csv, .json ou .parquet

        Returns:
            Lista de registros brutos (valores ausentes viram None)
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_IMPORT_FORMATS:
            raise FileStorageError(
                f"Formato não suportado: {suffix}",
                storage_type="file",
                path=str(path),
            )

        try:
            if suffix == ".csv":
                # Texto cru, como vem do fornecedor
                df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
            elif suffix == ".json":
                df = pd.read_json(path, orient="records", dtype=False)
            else:
                df = pd.read_parquet(path)
        except (OSError, ValueError) as e:
            raise FileStorageError(
                "Erro ao ler arquivo do fornecedor",
                storage_type="file",
                path=str(path),
                cause=e,
            ) from e

        records = [self._clean_record(row) for row in df.to_dict(orient="records")]

        self.logger.info(
            "Arquivo do fornecedor carregado",
            count=len(records),
            filepath=str(path),
        )
        return records

    async def export_products(self, products: list[Product], path: Path) -> str:
        """
        Exporta produtos mapeados.

        Args:
            products: Produtos da vitrine
            path: Arquivo de saída (.csv ou .parquet)

        Returns:
            Path do arquivo salvo
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_EXPORT_FORMATS:
            raise FileStorageError(
                f"Formato não suportado: {suffix}",
                storage_type="file",
                path=str(path),
            )

        if not products:
            self.logger.warning("Nenhum produto para exportar")

        df = self._products_to_dataframe(products)
        path.parent.mkdir(parents=True, exist_ok=True)

        if suffix == ".csv":
            df.to_csv(path, index=False, encoding="utf-8-sig")
        else:
            df.to_parquet(path, index=False, engine="pyarrow")

        self.logger.info(
            "Produtos exportados",
            count=len(products),
            filepath=str(path),
        )
        return str(path)

    @staticmethod
    def _clean_record(row: dict[str, Any]) -> dict[str, Any]:
        """Troca NaN por None e decodifica colunas estruturadas."""
        record: dict[str, Any] = {}
        for key, value in row.items():
            if hasattr(value, "tolist"):
                value = value.tolist()
            if value is pd.NA or value == "" or (isinstance(value, float) and math.isnan(value)):
                value = None
            record[str(key)] = value

        variants = record.get("variacoes")
        if isinstance(variants, str):
            try:
                record["variacoes"] = json.loads(variants)
            except ValueError:
                record["variacoes"] = []

        active = record.get("status_active")
        if isinstance(active, str):
            record["status_active"] = active.strip().lower() in ("true", "1", "t")

        return record

    @staticmethod
    def _products_to_dataframe(products: list[Product]) -> pd.DataFrame:
        """Achata produtos em colunas simples."""
        rows = []
        for product in products:
            rows.append({
                "id": product.id,
                "name": product.name,
                "description": product.description,
                "category": product.category.value,
                "price": product.price,
                "in_stock": product.in_stock,
                "featured": product.featured,
                "supplier_code": product.supplier_code,
                "primary_color": product.primary_color,
                "images": "|".join(product.images),
                "colors": "|".join(v.color for v in product.color_variations),
                "height": product.dimensions.height,
                "width": product.dimensions.width,
                "length": product.dimensions.length,
                "weight": product.dimensions.weight,
            })
        return pd.DataFrame(rows, columns=[
            "id", "name", "description", "category", "price", "in_stock",
            "featured", "supplier_code", "primary_color", "images", "colors",
            "height", "width", "length", "weight",
        ])
