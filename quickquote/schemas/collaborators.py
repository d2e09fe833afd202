"""Result schemas exchanged with the external collaborators.

Pure data classes — no business logic. The pricing engine, the file
service, and the configuration source all speak these types.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from quickquote.models.enums import Column
from quickquote.schemas.quote import QuoteData


class CellError(BaseModel):
    """First offending cell reported by the calculation service."""

    message: str
    row_index: int
    column: Column


class CalculationResult(BaseModel):
    """Outcome of a calculate-and-sum run."""

    updated_quote_data: QuoteData
    first_error: CellError | None = None


class FileResult(BaseModel):
    """Outcome of a save or export request."""

    success: bool
    message: str


class PriceMatrix(BaseModel):
    """Price matrix metadata for one fabric type."""

    model_config = ConfigDict(extra="allow")

    name: str
    code: str | None = None
    base_price: Decimal | None = None
