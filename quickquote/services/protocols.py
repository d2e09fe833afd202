"""Collaborator protocols.

The controller only knows these shapes. Pricing, file formats, and
product-specific rules live behind them and are injected at wiring time.
"""

from __future__ import annotations

from typing import Any, Protocol

from quickquote.schemas.collaborators import CalculationResult, FileResult, PriceMatrix
from quickquote.schemas.quote import QuoteData


class CalculationService(Protocol):
    def calculate_and_sum(self, quote_data: QuoteData, product_strategy: Any) -> CalculationResult:
        """Price every row and total the quote, reporting the first invalid cell."""
        ...


class ProductFactory(Protocol):
    def get_product_strategy(self, product_key: str) -> Any:
        """Pricing/validation strategy for a product key."""
        ...


class ConfigProvider(Protocol):
    def get_fabric_type_sequence(self) -> list[str]:
        ...

    def get_price_matrix(self, fabric_type: str) -> PriceMatrix | None:
        ...


class FileService(Protocol):
    def save_to_json(self, quote_data: QuoteData) -> FileResult:
        ...

    def export_to_csv(self, quote_data: QuoteData) -> FileResult:
        ...
