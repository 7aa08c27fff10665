"""
Módulo de pipeline: mapeamento, classificação, busca e filtro de categoria.
"""

from storefront.pipeline.classifier import CategoryClassifier, CategoryDecision
from storefront.pipeline.mapper import RecordMapper
from storefront.pipeline.ranker import SearchRanker
from storefront.pipeline.category_filter import CategoryFilter
from storefront.pipeline.pipeline import CatalogPipeline

__all__ = [
    "CategoryClassifier",
    "CategoryDecision",
    "RecordMapper",
    "SearchRanker",
    "CategoryFilter",
    "CatalogPipeline",
]
